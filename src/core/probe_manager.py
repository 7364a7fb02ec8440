import asyncio
import logging
from datetime import timedelta
from typing import Callable, Iterable, List, Optional

from abstractions.prober import Prober
from config.config import Config
from contracts.endpoint import Endpoint
from core.errors import ProbeOutputError
from core.metrics_manager import ProbeMetrics
from core.output_parser import OutputParser
from core.probe_limiter import ProbeLimiter
from core.profiler import Profiler
from core.progress import ProgressCounter

logger = logging.getLogger(__name__)


class ProbeManager:
    """
    Probes a batch of endpoints concurrently and records each one's latency.

    Every endpoint gets its own task. Tasks only return their measurement;
    ``run_batch`` writes the results back after all of them have finished, so
    no endpoint is touched from more than one place.
    """

    @Profiler.profile
    def __init__(
        self,
        prober: Prober,
        limiter: Optional[ProbeLimiter] = None,
        parser: Optional[OutputParser] = None,
        metrics: Optional[ProbeMetrics] = None,
        progress_sink: Optional[Callable[[str], None]] = None,
    ):
        self.prober = prober
        self.limiter = limiter or ProbeLimiter(Config.MAX_CONCURRENT_PROBES)
        self.parser = parser or OutputParser()
        self.metrics = metrics or ProbeMetrics()
        self.progress_sink = progress_sink

    @Profiler.profile
    async def run_batch(
        self,
        endpoints: Iterable[Endpoint],
        progress: Optional[ProgressCounter] = None,
    ) -> List[Endpoint]:
        """
        Probe every endpoint and set its ``latency``.

        Returns once every probe has completed. A failed probe leaves that
        endpoint's latency as None and does not affect the others.

        Args:
            endpoints (Iterable[Endpoint]): Targets to probe.
            progress (Optional[ProgressCounter]): Counter to report starts to.
                One sized to the batch is created when omitted.

        Returns:
            List[Endpoint]: The same endpoints, in input order.

        Raises:
            ProbeOutputError: If the parser hit an invariant violation. Raised
                only after every other probe has finished.
        """
        endpoints = list(endpoints)
        if progress is None:
            progress = ProgressCounter(len(endpoints), self.progress_sink)

        outcomes = await asyncio.gather(
            *(self._probe_endpoint(endpoint, progress) for endpoint in endpoints),
            return_exceptions=True,
        )

        violations = []
        for endpoint, outcome in zip(endpoints, outcomes):
            if isinstance(outcome, BaseException):
                violations.append(outcome)
                continue
            endpoint.latency = outcome

        measured = sum(1 for e in endpoints if e.latency is not None)
        logger.info(f"Probed {len(endpoints)} rooms, {measured} reachable")
        if violations:
            raise violations[0]
        return endpoints

    async def _probe_endpoint(
        self, endpoint: Endpoint, progress: ProgressCounter
    ) -> Optional[timedelta]:
        address = endpoint.address
        async with self.limiter.slot():
            progress.advance()
            self.metrics.probe_started()
            latency = None
            failed = True
            try:
                result = await self.prober.probe(address)
                if result.ok:
                    failed = False
                    latency = self.parser.parse(address, result.output)
                    logger.info(f"Probe for {address}: latency={latency}")
                else:
                    logger.error(f"unable to ping {address}: {result.error}")
            except ProbeOutputError:
                failed = True
                raise
            except Exception as e:
                logger.error(f"unable to ping {address}: {e}")
            finally:
                self.metrics.probe_finished(latency, failed=failed)
        return latency
