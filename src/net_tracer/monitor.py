from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, Dict

from . import config
from .gate import AlertGate
from .notify import Notifier
from .ping import IPAddress, Prober
from .window import Sample, SampleWindow

log = logging.getLogger(__name__)


class Monitor:
    """Probes one destination and raises rate-limited alerts."""

    def __init__(
        self,
        destination: IPAddress,
        prober: Prober,
        notifier: Notifier,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.destination = destination
        self.prober = prober
        self.notifier = notifier
        self.clock = clock

        start = clock()
        self.started_at = start
        self.window = SampleWindow(config.LOSS_WINDOW_SECONDS)
        self.latency_gate = AlertGate(config.LATENCY_COOLDOWN_SECONDS, start)
        self.error_gate = AlertGate(config.ERROR_COOLDOWN_SECONDS, start)
        self.loss_gate = AlertGate(config.LOSS_COOLDOWN_SECONDS, start)

        self.probes_sent = 0
        self.probes_lost = 0
        self.alerts_sent: Dict[str, int] = {"latency": 0, "error": 0, "loss": 0}

    async def run(self, stop_event: asyncio.Event):
        """Probe every sample period until the process is told to stop."""
        while not stop_event.is_set():
            await self.run_cycle()
            await asyncio.sleep(config.SAMPLE_PERIOD_SECONDS)

    async def run_cycle(self) -> Sample:
        now = self.clock()
        res = await self.prober.ping(self.destination)
        sample = Sample(now, res.rtt_ms if res.ok else None)
        self.window.insert(sample)

        self.probes_sent += 1
        if sample.lost:
            self.probes_lost += 1
        log.debug(
            "t=%.2f latency=%s window=%d/%d",
            now - self.started_at,
            "lost" if sample.lost else f"{sample.latency_ms} ms",
            self.window.loss_count(),
            self.window.size(),
        )

        # Latency and error are exclusive: a sample is either timed or lost.
        if sample.lost:
            if self.error_gate.is_eligible(now):
                await self._alert("error", f"Ping error: {res.error}")
                self.error_gate.fire(now)
        elif sample.latency_ms > config.HIGH_LATENCY_MS:
            if self.latency_gate.is_eligible(now):
                await self._alert("latency", f"High latency: {sample.latency_ms} ms")
                self.latency_gate.fire(now)

        total = self.window.size()
        if total >= config.MIN_SAMPLES_FOR_LOSS:
            pct = self.window.loss_percentage()
            if pct > config.LOSS_THRESHOLD_PCT and self.loss_gate.is_eligible(now):
                lost = self.window.loss_count()
                await self._alert(
                    "loss",
                    f"Packet loss last {config.LOSS_WINDOW_SECONDS:.0f}s: "
                    f"{pct}% ({lost} / {total})",
                )
                self.loss_gate.fire(now)

        return sample

    async def _alert(self, kind: str, message: str):
        log.info(message)
        self.alerts_sent[kind] += 1
        await notify_quietly(self.notifier, message)


async def notify_quietly(notifier: Notifier, message: str):
    """Show a notification; alerts are best-effort and never stop the loop."""
    try:
        await notifier.notify(message)
    except Exception as exc:
        log.debug("Notification failed: %s", exc)
