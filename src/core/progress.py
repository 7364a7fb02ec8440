from typing import Callable, Optional


class ProgressCounter:
    """
    Counts probes as they start and reports ``current/total`` to a sink.

    The first report is ``0/total``: the count shown is the number of probes
    started before this one. Increments happen without an await in between,
    so concurrent tasks on one event loop cannot lose an update.
    """

    def __init__(self, total: int, sink: Optional[Callable[[str], None]] = None):
        self.total = total
        self._count = 0
        self._sink = sink or print

    @property
    def count(self) -> int:
        return self._count

    def advance(self) -> int:
        current = self._count
        self._count = current + 1
        self._sink(f"{current}/{self.total}")
        return self._count
