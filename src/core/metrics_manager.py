import logging
from datetime import timedelta
from typing import Optional

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram

logger = logging.getLogger(__name__)

LATENCY_BUCKETS = (0.005, 0.01, 0.025, 0.05, 0.075, 0.1, 0.15, 0.25, 0.5, 1.0)
OUTCOMES = ("ok", "no_sample", "error")


class ProbeMetrics:
    """
    Prometheus collectors for one probe batch.

    Each instance owns its CollectorRegistry so several batches (or tests) can
    coexist without duplicate-timeseries errors from the global registry.
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry or CollectorRegistry()
        self.IN_FLIGHT = Gauge(
            "lobby_probes_in_flight",
            "Number of ping processes currently running",
            registry=self.registry,
        )
        self.LATENCY = Histogram(
            "lobby_probe_latency_seconds",
            "Best round-trip time reported per room",
            buckets=LATENCY_BUCKETS,
            registry=self.registry,
        )
        self.RESULTS = Counter(
            "lobby_probe_results",
            "Probe outcomes by result",
            ["result"],
            registry=self.registry,
        )
        logger.debug("ProbeMetrics initialized.")

    def probe_started(self):
        self.IN_FLIGHT.inc()

    def probe_finished(self, latency: Optional[timedelta], failed: bool = False):
        self.IN_FLIGHT.dec()
        if failed:
            self.RESULTS.labels(result="error").inc()
        elif latency is None:
            self.RESULTS.labels(result="no_sample").inc()
        else:
            self.RESULTS.labels(result="ok").inc()
            self.LATENCY.observe(latency.total_seconds())

    def get_in_flight(self) -> float:
        return self.registry.get_sample_value("lobby_probes_in_flight") or 0.0

    def snapshot(self) -> dict:
        """
        Plain-dict view of the collectors.

        Returns:
            dict: ``in_flight``, per-outcome counts and the latency sample count.
        """
        counts = {
            outcome: int(
                self.registry.get_sample_value(
                    "lobby_probe_results_total", {"result": outcome}
                )
                or 0
            )
            for outcome in OUTCOMES
        }
        return {
            "in_flight": self.get_in_flight(),
            "results": counts,
            "latency_samples": int(
                self.registry.get_sample_value("lobby_probe_latency_seconds_count") or 0
            ),
        }
