"""madOS WLAN - Notification sinks.

Notifications are fire-and-forget: the sink never blocks the caller,
never reports delivery failures back and is never retried.
"""

import logging
import subprocess
from typing import List

from .interfaces import Notification, NotificationSink

log = logging.getLogger(__name__)

APP_NAME = 'madOS WLAN'


class NotifySendSink(NotificationSink):
    """Deliver notifications through the ``notify-send`` command."""

    def __init__(self, command: str = 'notify-send'):
        self.command = command
        self._disabled = False

    def build_command(self, notification: Notification) -> List[str]:
        cmd = [self.command, '--app-name', APP_NAME]
        if notification.icon:
            cmd += ['--icon', notification.icon]
        cmd.append(notification.title)
        if notification.body:
            cmd.append(notification.body)
        return cmd

    def notify(self, notification: Notification) -> None:
        if self._disabled:
            return
        try:
            subprocess.Popen(
                self.build_command(notification),
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as e:
            log.warning('notifications disabled, cannot run %s: %s', self.command, e)
            self._disabled = True


class LogSink(NotificationSink):
    """Write notifications to the log only."""

    def notify(self, notification: Notification) -> None:
        log.info('%s: %s', notification.title, notification.body)


class MemorySink(NotificationSink):
    """Keep every notification in a list."""

    def __init__(self):
        self.notifications: List[Notification] = []

    def notify(self, notification: Notification) -> None:
        self.notifications.append(notification)

    @property
    def titles(self) -> List[str]:
        return [n.title for n in self.notifications]
