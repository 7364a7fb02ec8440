import asyncio
import logging
import platform
from typing import List, Optional

from abstractions.prober import Prober
from config.config import Config
from contracts.probe_result import ProbeResult
from core.profiler import Profiler

logger = logging.getLogger(__name__)


def ping_command(
    address: str,
    count: int = Config.PROBE_COUNT,
    timeout_ms: int = Config.PROBE_TIMEOUT_MS,
    executable: str = Config.PING_EXECUTABLE,
    system: Optional[str] = None,
) -> List[str]:
    """
    Build the argument vector for the OS-native ping tool. The address is
    always the last argument.
    """
    system = (system or platform.system()).lower()
    if system == "windows":
        return [executable, "-n", str(count), "-w", str(timeout_ms), address]
    # iputils and BSD ping take the per-reply wait in seconds
    wait_seconds = f"{timeout_ms / 1000:g}"
    return [executable, "-c", str(count), "-W", wait_seconds, address]


class PingProber(Prober):
    """
    Runs the system ``ping`` as a subprocess. Spawning a process instead of
    opening a raw ICMP socket means no root, administrator rights or setcap
    are needed.
    """

    def __init__(
        self,
        count: int = Config.PROBE_COUNT,
        timeout_ms: int = Config.PROBE_TIMEOUT_MS,
        executable: str = Config.PING_EXECUTABLE,
        system: Optional[str] = None,
    ):
        self.count = count
        self.timeout_ms = timeout_ms
        self.executable = executable
        self.system = system

    def build_command(self, address: str) -> List[str]:
        return ping_command(
            address,
            count=self.count,
            timeout_ms=self.timeout_ms,
            executable=self.executable,
            system=self.system,
        )

    @Profiler.profile
    async def probe(self, address: str) -> ProbeResult:
        cmd = self.build_command(address)
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.DEVNULL,
            )
            stdout, _ = await proc.communicate()
        except OSError as e:
            return ProbeResult.failure(address, f"{type(e).__name__}: {e}")

        if proc.returncode != 0:
            # ping exits non-zero when replies are lost; the output may still hold samples
            logger.debug(f"{cmd[0]} exited with {proc.returncode} for {address}")
        return ProbeResult.success(address, stdout or b"")
