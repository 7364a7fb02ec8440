from abc import ABC, abstractmethod

from contracts.probe_result import ProbeResult


class Prober(ABC):
    """
    Abstract base class for latency probes against a single address.
    """

    @abstractmethod
    async def probe(self, address: str) -> ProbeResult:
        """
        Probe one address.

        Implementations report spawn or transport failures through
        ``ProbeResult.error`` instead of raising, so one bad target cannot
        abort a batch.

        Args:
            address (str): Host or IP address to probe.

        Returns:
            ProbeResult: Raw output on success, error text on failure.
        """
