from __future__ import annotations

import asyncio
import logging
import shutil
from typing import Optional, Protocol

from . import config

log = logging.getLogger(__name__)


class Notifier(Protocol):
    async def notify(self, message: str) -> None: ...


class DesktopNotifier:
    """Shows alerts through ``notify-send``. Every failure is ignored."""

    def __init__(self, executable: Optional[str] = None):
        self.executable = executable or shutil.which("notify-send")
        if self.executable is None:
            log.warning("notify-send not found, desktop alerts are disabled")

    def command(self, message: str) -> list[str]:
        return [
            self.executable or "notify-send",
            "-t",
            str(config.NOTIFICATION_TIMEOUT_MS),
            config.NOTIFICATION_TITLE,
            message,
        ]

    async def notify(self, message: str) -> None:
        if self.executable is None:
            log.debug("Notification not shown: %s", message)
            return
        try:
            proc = await asyncio.create_subprocess_exec(
                *self.command(message),
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
            returncode = await proc.wait()
        except OSError as exc:
            log.debug("Notification failed: %s", exc)
            return
        if returncode != 0:
            log.debug("notify-send exited with %s", returncode)
