import os


class Config:
    """
    Configuration class for environment variables and default settings.
    """

    LOBBY_URL = os.environ.get("YUZU_LOBBY_URL", "https://api.yuzu-emu.org/lobby")
    GAME_NAME = os.environ.get("YUZU_GAME_NAME", "Super Smash Bros. Ultimate")
    LOBBY_TIMEOUT_SECONDS = float(os.environ.get("LOBBY_TIMEOUT_SECONDS", "10"))

    # Executable used for probing; must accept the OS-native ping flags
    PING_EXECUTABLE = os.environ.get("PING_EXECUTABLE", "ping")

    # Fixed for the lifetime of a run
    MAX_CONCURRENT_PROBES = 10
    PROBE_COUNT = 3
    PROBE_TIMEOUT_MS = 500

    # Unreachable rooms sort after anything ping can report
    MISSING_LATENCY_SENTINEL_SECONDS = 1000
