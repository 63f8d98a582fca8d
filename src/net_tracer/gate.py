from __future__ import annotations


class AlertGate:
    """Cooldown for a single alert condition."""

    def __init__(self, cooldown: float, start: float):
        self.cooldown = cooldown
        # eligible immediately
        self.next_eligible_at = start

    def is_eligible(self, now: float) -> bool:
        return now >= self.next_eligible_at

    def fire(self, now: float) -> None:
        self.next_eligible_at = now + self.cooldown

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"AlertGate(cooldown={self.cooldown}, next_eligible_at={self.next_eligible_at})"
