from __future__ import annotations

from rich import box
from rich.table import Table

from .monitor import Monitor


def format_duration(seconds: float) -> str:
    minutes, secs = divmod(int(seconds), 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}h {minutes:02d}m {secs:02d}s"
    if minutes:
        return f"{minutes}m {secs:02d}s"
    return f"{secs}s"


def build_summary(monitor: Monitor, now: float) -> Table:
    table = Table(
        title="NET TRACER summary",
        box=box.MINIMAL_DOUBLE_HEAD,
        show_header=False,
    )
    table.add_column("Field", style="bold")
    table.add_column("Value")

    window = monitor.window
    if window.size():
        window_str = (
            f"{window.loss_percentage()}% "
            f"({window.loss_count()} / {window.size()})"
        )
    else:
        window_str = "-"

    table.add_row("Destination", str(monitor.destination))
    table.add_row("Running for", format_duration(now - monitor.started_at))
    table.add_row("Probes sent", str(monitor.probes_sent))
    table.add_row("Probes lost", str(monitor.probes_lost))
    table.add_row("Loss in window", window_str)
    for kind, count in monitor.alerts_sent.items():
        table.add_row(f"{kind.capitalize()} alerts", str(count))
    return table
