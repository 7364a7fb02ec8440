import logging
from datetime import timedelta
from typing import Iterator, Optional, Union

from core.errors import ProbeOutputError

logger = logging.getLogger(__name__)

ASCII_DIGITS = frozenset("0123456789")
UNIT = "ms"


class OutputParser:
    """
    Extracts the best round-trip time from raw ``ping`` output.

    Only lines that mention the target address are considered, so tools that
    also print timings for intermediate hops or other hosts cannot lower the
    result. Within those lines every ``=<digits>ms`` sample is collected and
    the minimum is returned. A fractional part and one space before the unit
    are accepted too (``time=23.4 ms`` as printed by iputils and BSD ping).

    The parser holds no state; one instance can be shared by every task.
    """

    def parse(self, address: str, raw: Union[bytes, str]) -> Optional[timedelta]:
        """
        Return the minimum latency sample for ``address``, or None.

        Args:
            address (str): Target address; lines not containing it are ignored.
            raw (bytes | str): Captured stdout of the probe process.

        Returns:
            Optional[timedelta]: Lowest sample, or None when no line for the
            address carries a sample.

        Raises:
            ProbeOutputError: If a matched digit run fails integer conversion.
        """
        if isinstance(raw, bytes):
            text = raw.decode("utf-8", errors="replace")
        else:
            text = raw

        best = None
        for line in text.splitlines():
            if address not in line:
                continue
            for sample in self.scan_line(address, line):
                if best is None or sample < best:
                    best = sample
        logger.debug(f"Parsed latency for {address}: {best}")
        return best

    def scan_line(self, address: str, line: str) -> Iterator[timedelta]:
        """Yield every ``=<digits>[.<digits>][ ]ms`` sample found in one line."""
        length = len(line)
        pos = line.find("=")
        while pos != -1:
            cursor = pos + 1
            start = cursor
            while cursor < length and line[cursor] in ASCII_DIGITS:
                cursor += 1
            whole = line[start:cursor]

            fraction = ""
            if whole and cursor < length and line[cursor] == ".":
                frac_start = cursor + 1
                frac_end = frac_start
                while frac_end < length and line[frac_end] in ASCII_DIGITS:
                    frac_end += 1
                if frac_end > frac_start:
                    fraction = line[frac_start:frac_end]
                    cursor = frac_end

            unit_at = cursor
            if unit_at < length and line[unit_at] == " ":
                unit_at += 1

            unit_end = unit_at + len(UNIT)
            if (
                whole
                and line.startswith(UNIT, unit_at)
                and not (unit_end < length and line[unit_end].isalpha())
            ):
                yield self._to_duration(address, whole, fraction)

            pos = line.find("=", pos + 1)

    @staticmethod
    def _to_duration(address: str, whole: str, fraction: str) -> timedelta:
        try:
            milliseconds = int(whole)
            # Sub-millisecond digits beyond microsecond precision are dropped
            microseconds = int(fraction[:3].ljust(3, "0")) if fraction else 0
        except ValueError:
            raise ProbeOutputError(address, f"{whole}.{fraction}" if fraction else whole)
        return timedelta(milliseconds=milliseconds, microseconds=microseconds)


_default_parser = OutputParser()


def parse_latency(address: str, raw: Union[bytes, str]) -> Optional[timedelta]:
    """Parse with a shared parser instance."""
    return _default_parser.parse(address, raw)
