from __future__ import annotations

import asyncio
import contextlib
import ipaddress
import math
import re
import shutil
from typing import Optional, Protocol, Union

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]

PING_RTT_RE = re.compile(r"time([=<])\s*([0-9]*\.?[0-9]+)\s*ms")


class PingTransportError(RuntimeError):
    """Raised at startup when no usable ping transport is available."""


class PingResult:
    __slots__ = ("ok", "rtt_ms", "error")

    def __init__(self, ok: bool, rtt_ms: Optional[int], error: Optional[str]):
        self.ok = ok
        self.rtt_ms = rtt_ms
        self.error = error

    @classmethod
    def success(cls, rtt_ms: int) -> "PingResult":
        return cls(True, rtt_ms, None)

    @classmethod
    def failure(cls, error: str) -> "PingResult":
        return cls(False, None, error)

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"PingResult(ok={self.ok}, rtt_ms={self.rtt_ms}, error={self.error!r})"


class Prober(Protocol):
    async def ping(self, destination: IPAddress) -> PingResult: ...


def parse_ping_output(returncode: int, stdout: str) -> PingResult:
    """Turn the exit status and output of a single ``ping`` into a result.

    Round-trip times are truncated to whole milliseconds, so ``time=14.7``
    reads as 14 and ``time=0.045`` as 0. A ``time<N`` reading is below N
    and reads as N - 1, which makes ``time<1`` a 0 ms reply. A zero exit
    status without a parsable time is reported as a failure, since there is
    no latency to record.

    Failures carry the first diagnostic line ``ping`` printed (``ping: ...``
    or ``From ...``), ``timeout`` when the request simply went unanswered,
    and ``unreachable`` otherwise.
    """
    if returncode == 0:
        match = PING_RTT_RE.search(stdout)
        if match is None:
            return PingResult.failure("no round-trip time in reply")
        op, value = match.groups()
        rtt_ms = int(float(value))
        if op == "<":
            rtt_ms = max(0, math.ceil(float(value)) - 1)
        return PingResult.success(rtt_ms)

    for line in stdout.splitlines():
        line = line.strip()
        if line.startswith(("ping:", "From ")):
            return PingResult.failure(line)
    if "100% packet loss" in stdout:
        return PingResult.failure("timeout")
    return PingResult.failure("unreachable")


class SystemPinger:
    """Probes a host with the system ``ping`` command (Linux-focused).

    The executable is resolved once in ``create`` and reused for every probe.
    """

    def __init__(self, executable: str, timeout: float):
        self.executable = executable
        self.timeout = timeout

    @classmethod
    def create(cls, timeout: float) -> "SystemPinger":
        executable = shutil.which("ping")
        if executable is None:
            raise PingTransportError("'ping' executable not found on PATH")
        return cls(executable, timeout)

    def command(self, destination: IPAddress) -> list[str]:
        # -n : numeric output (avoid DNS reverse lookups slowing us)
        # -c 1 : send one packet
        # -w timeout : total deadline seconds
        args = [self.executable, "-n", "-c", "1", "-w", str(max(1, int(self.timeout)))]
        if destination.version == 6:
            args.append("-6")
        args.append(str(destination))
        return args

    async def ping(self, destination: IPAddress) -> PingResult:
        try:
            proc = await asyncio.create_subprocess_exec(
                *self.command(destination),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except OSError as exc:
            return PingResult.failure(str(exc))

        try:
            out_bytes = await asyncio.wait_for(
                proc.communicate(), timeout=self.timeout + 0.5
            )
        except asyncio.TimeoutError:
            with contextlib.suppress(ProcessLookupError):
                proc.kill()
            await proc.wait()
            return PingResult.failure("timeout")
        except asyncio.CancelledError:
            with contextlib.suppress(ProcessLookupError):
                proc.kill()
            await proc.wait()
            raise

        stdout = out_bytes[0].decode(errors="replace")
        return parse_ping_output(proc.returncode, stdout)
