import asyncio
import ipaddress

import pytest

from net_tracer import config
from net_tracer.notify import DesktopNotifier
from net_tracer.ping import PingTransportError, SystemPinger, parse_ping_output

REPLY = """PING 8.8.8.8 (8.8.8.8) 56(84) bytes of data.
64 bytes from 8.8.8.8: icmp_seq=1 ttl=117 time=14.7 ms

--- 8.8.8.8 ping statistics ---
1 packets transmitted, 1 received, 0% packet loss, time 0ms
"""

NO_REPLY = """PING 10.255.255.1 (10.255.255.1) 56(84) bytes of data.

--- 10.255.255.1 ping statistics ---
1 packets transmitted, 0 received, 100% packet loss, time 0ms
"""

UNREACHABLE = """PING 192.168.1.250 (192.168.1.250) 56(84) bytes of data.
From 192.168.1.10 icmp_seq=1 Destination Host Unreachable

--- 192.168.1.250 ping statistics ---
1 packets transmitted, 0 received, +1 errors, 100% packet loss, time 0ms
"""


def test_parse_successful_reply_truncates_to_whole_ms():
    res = parse_ping_output(0, REPLY)
    assert res.ok
    assert res.rtt_ms == 14
    assert res.error is None


def test_parse_sub_millisecond_replies_read_as_zero():
    res = parse_ping_output(0, "64 bytes from ::1: icmp_seq=1 ttl=64 time<1 ms")
    assert res.ok
    assert res.rtt_ms == 0
    assert parse_ping_output(0, "64 bytes from 127.0.0.1: icmp_seq=1 ttl=64 time=0.045 ms").rtt_ms == 0
    assert parse_ping_output(0, "reply from 10.0.0.1: time<5 ms").rtt_ms == 4


def test_parse_timeout_and_unreachable():
    assert parse_ping_output(1, NO_REPLY).error == "timeout"
    res = parse_ping_output(1, UNREACHABLE)
    assert not res.ok
    assert res.rtt_ms is None
    assert res.error == "From 192.168.1.10 icmp_seq=1 Destination Host Unreachable"
    assert parse_ping_output(1, "").error == "unreachable"


def test_parse_keeps_transport_error_text():
    res = parse_ping_output(2, "ping: socket: Operation not permitted\n")
    assert res.error == "ping: socket: Operation not permitted"
    res = parse_ping_output(2, "PING 8.8.8.8 (8.8.8.8) 56(84) bytes of data.\n  ping: sendmsg: Network is unreachable\n")
    assert res.error == "ping: sendmsg: Network is unreachable"


def test_parse_success_without_time_is_a_failure():
    res = parse_ping_output(0, "")
    assert not res.ok


def test_pinger_command_for_ipv4_and_ipv6():
    pinger = SystemPinger("/bin/ping", 1.0)
    assert pinger.command(ipaddress.ip_address("8.8.8.8")) == [
        "/bin/ping", "-n", "-c", "1", "-w", "1", "8.8.8.8",
    ]
    assert pinger.command(ipaddress.ip_address("::1"))[-2:] == ["-6", "::1"]


def test_pinger_requires_ping_executable(monkeypatch):
    monkeypatch.setattr("net_tracer.ping.shutil.which", lambda name: None)
    with pytest.raises(PingTransportError):
        SystemPinger.create(1.0)


def test_pinger_reports_spawn_failure_as_lost_probe():
    pinger = SystemPinger("/nonexistent/ping", 1.0)
    res = asyncio.run(pinger.ping(ipaddress.ip_address("8.8.8.8")))
    assert not res.ok
    assert res.error


def test_notification_command():
    notifier = DesktopNotifier("/usr/bin/notify-send")
    assert notifier.command("High latency: 150 ms") == [
        "/usr/bin/notify-send",
        "-t",
        str(config.NOTIFICATION_TIMEOUT_MS),
        config.NOTIFICATION_TITLE,
        "High latency: 150 ms",
    ]


def test_notification_failures_are_ignored(monkeypatch):
    asyncio.run(DesktopNotifier("/nonexistent/notify-send").notify("x"))

    monkeypatch.setattr("net_tracer.notify.shutil.which", lambda name: None)
    notifier = DesktopNotifier()
    assert notifier.executable is None
    asyncio.run(notifier.notify("x"))


class HangingProcess:
    def __init__(self):
        self.killed = False
        self.waited = False

    async def communicate(self):
        await asyncio.Event().wait()

    def kill(self):
        self.killed = True

    async def wait(self):
        self.waited = True
        return -9


def test_cancelled_ping_kills_the_child_process(monkeypatch):
    proc = HangingProcess()

    async def fake_exec(*args, **kwargs):
        return proc

    monkeypatch.setattr("net_tracer.ping.asyncio.create_subprocess_exec", fake_exec)
    pinger = SystemPinger("/bin/ping", 5.0)

    async def drive():
        task = asyncio.create_task(pinger.ping(ipaddress.ip_address("8.8.8.8")))
        await asyncio.sleep(0.05)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(drive())
    assert proc.killed
    assert proc.waited
