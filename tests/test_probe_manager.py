import unittest
from datetime import timedelta
from unittest.mock import AsyncMock, patch

from contracts.endpoint import Endpoint
from core.errors import ProbeOutputError
from core.ping_prober import PingProber
from core.probe_limiter import ProbeLimiter
from core.probe_manager import ProbeManager
from core.progress import ProgressCounter
from fake_prober import ScriptedProber, linux_output, windows_output


def endpoints_for(*addresses):
    return [Endpoint(address=a, name=f"room {a}", player_count=1) for a in addresses]


class TestProbeManager(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.progress_lines = []

    def _manager(self, prober, limiter=None):
        return ProbeManager(prober, limiter=limiter, progress_sink=self.progress_lines.append)

    async def test_latency_recorded_per_endpoint(self):
        prober = ScriptedProber({
            "10.0.0.1": windows_output("10.0.0.1", 30, 25, 27),
            "10.0.0.2": linux_output("10.0.0.2", "80.1", "79.5", "81.0"),
        })
        endpoints = endpoints_for("10.0.0.1", "10.0.0.2")
        result = await self._manager(prober).run_batch(endpoints)

        self.assertIs(result[0], endpoints[0])
        self.assertEqual(endpoints[0].latency, timedelta(milliseconds=25))
        self.assertEqual(endpoints[1].latency, timedelta(milliseconds=79, microseconds=500))

    async def test_results_never_cross_endpoints(self):
        # Each endpoint's output mentions the other address with a lower time
        prober = ScriptedProber({
            "10.0.0.1": b"hop 10.0.0.2 time=1ms\nreply 10.0.0.1 time=50ms\n",
            "10.0.0.2": b"reply 10.0.0.2 time=70ms\n",
        })
        endpoints = endpoints_for("10.0.0.1", "10.0.0.2")
        await self._manager(prober).run_batch(endpoints)
        self.assertEqual(endpoints[0].latency, timedelta(milliseconds=50))
        self.assertEqual(endpoints[1].latency, timedelta(milliseconds=70))

    async def test_failed_probe_leaves_latency_absent(self):
        prober = ScriptedProber({
            "10.0.0.1": OSError("ping not found"),
            "10.0.0.2": windows_output("10.0.0.2", 12, 14, 13),
        })
        endpoints = endpoints_for("10.0.0.1", "10.0.0.2")
        with self.assertLogs("core.probe_manager", level="ERROR") as logs:
            await self._manager(prober).run_batch(endpoints)

        self.assertIsNone(endpoints[0].latency)
        self.assertEqual(endpoints[1].latency, timedelta(milliseconds=12))
        self.assertTrue(any("unable to ping 10.0.0.1" in line for line in logs.output))

    async def test_spawn_failure_does_not_abort_batch(self):
        endpoints = endpoints_for("10.0.0.9")
        spawn = AsyncMock(side_effect=FileNotFoundError(2, "No such file or directory", "ping"))
        with patch("core.ping_prober.asyncio.create_subprocess_exec", spawn):
            with self.assertLogs("core.probe_manager", level="ERROR"):
                await self._manager(PingProber()).run_batch(endpoints)
        self.assertIsNone(endpoints[0].latency)
        self.assertEqual(self.progress_lines, ["0/1"])

    async def test_prober_exception_is_contained(self):
        class ExplodingProber(ScriptedProber):
            async def probe(self, address):
                if address == "10.0.0.1":
                    raise RuntimeError("boom")
                return await super().probe(address)

        prober = ExplodingProber({"10.0.0.2": b"10.0.0.2 time=5ms"})
        endpoints = endpoints_for("10.0.0.1", "10.0.0.2")
        with self.assertLogs("core.probe_manager", level="ERROR"):
            await self._manager(prober).run_batch(endpoints)
        self.assertIsNone(endpoints[0].latency)
        self.assertEqual(endpoints[1].latency, timedelta(milliseconds=5))

    async def test_parser_invariant_violation_raised_after_join(self):
        prober = ScriptedProber({"10.0.0.2": b"10.0.0.2 time=5ms"})
        manager = self._manager(prober)
        manager.parser.parse = lambda address, raw: _raise_for(address)
        endpoints = endpoints_for("10.0.0.1", "10.0.0.2")
        with self.assertRaises(ProbeOutputError):
            await manager.run_batch(endpoints)
        self.assertEqual(prober.calls.count("10.0.0.2"), 1)
        self.assertEqual(
            manager.metrics.snapshot()["results"], {"ok": 1, "no_sample": 0, "error": 1}
        )

    async def test_empty_batch(self):
        prober = ScriptedProber()
        result = await self._manager(prober).run_batch([])
        self.assertEqual(result, [])
        self.assertEqual(self.progress_lines, [])

    async def test_progress_counts_every_endpoint(self):
        prober = ScriptedProber()
        endpoints = endpoints_for(*(f"10.0.1.{i}" for i in range(25)))
        progress = ProgressCounter(len(endpoints), self.progress_lines.append)
        await self._manager(prober).run_batch(endpoints, progress=progress)
        self.assertEqual(progress.count, 25)
        self.assertEqual(self.progress_lines[0], "0/25")
        self.assertEqual(self.progress_lines[-1], "24/25")

    async def test_concurrency_bounded_by_ten(self):
        for size in (0, 1, 10, 11, 1000):
            with self.subTest(size=size):
                prober = ScriptedProber(delay=0.001)
                limiter = ProbeLimiter(10)
                endpoints = endpoints_for(*(f"10.{i // 250}.{i % 250}.1" for i in range(size)))
                await self._manager(prober, limiter).run_batch(endpoints)
                self.assertLessEqual(prober.max_in_flight, 10)
                self.assertLessEqual(limiter.peak_in_flight, 10)
                self.assertEqual(len(prober.calls), size)
                self.assertEqual(limiter.in_flight, 0)

    async def test_default_limiter_capacity(self):
        manager = ProbeManager(ScriptedProber())
        self.assertEqual(manager.limiter.capacity, 10)

    async def test_metrics_track_outcomes(self):
        prober = ScriptedProber({
            "10.0.0.1": b"10.0.0.1 time=20ms",
            "10.0.0.2": OSError("spawn failed"),
        })
        manager = self._manager(prober)
        with self.assertLogs("core.probe_manager", level="ERROR"):
            await manager.run_batch(endpoints_for("10.0.0.1", "10.0.0.2", "10.0.0.3"))
        snapshot = manager.metrics.snapshot()
        self.assertEqual(snapshot["in_flight"], 0)
        self.assertEqual(snapshot["results"], {"ok": 1, "no_sample": 1, "error": 1})
        self.assertEqual(snapshot["latency_samples"], 1)


def _raise_for(address):
    if address == "10.0.0.1":
        raise ProbeOutputError(address, "1x")
    return timedelta(milliseconds=5)


if __name__ == "__main__":
    unittest.main()
