class LobbyPingError(Exception):
    """Base class for errors raised by lobby-ping."""


class LobbyFetchError(LobbyPingError):
    """The lobby directory could not be fetched or decoded. Fatal for the run."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Could not load lobby from {url}: {reason}")


class ProbeOutputError(LobbyPingError):
    """
    A sample matched the latency pattern but its digits did not convert to an
    integer. Indicates a parser bug rather than an unreachable host.
    """

    def __init__(self, address: str, digits: str):
        self.address = address
        self.digits = digits
        super().__init__(f"Matched latency sample {digits!r} for {address} is not an integer")
