"""madOS WLAN - Backend and sink factory.

Factory functions that pick real or simulated collaborators from the
settings, so tests and demos run without NetworkManager.
"""

import logging

from .config import Settings
from .notifications import LogSink, NotifySendSink

log = logging.getLogger(__name__)


def resolve_interface(settings: Settings) -> str:
    """Return the configured interface, or detect the first WiFi device.

    Raises:
        ToolUnavailableError: If detection needs the tool and it is missing.
        RuntimeError: If no wireless device exists.
    """
    if settings.interface:
        return settings.interface
    if settings.mode == 'test':
        return 'wlan0'

    from .backend import get_wifi_device

    device = get_wifi_device(settings.tool)
    if not device:
        raise RuntimeError('no wireless device found')
    log.debug('using wireless device %s', device)
    return device


def create_backend(settings: Settings, interface: str):
    """Create the backend for *settings*.

    Settings.mode 'test' (``MADOS_WLAN_MODE=test``) returns the mock
    backend delivering callbacks through the GLib main loop.
    """
    if settings.mode == 'test':
        from gi.repository import GLib
        from .mock_backend import MockBackend

        return MockBackend(schedule=GLib.idle_add)

    from .backend import NmcliBackend

    return NmcliBackend(interface, tool=settings.tool)


def create_sink(settings: Settings):
    """Desktop notifications unless disabled or running in test mode."""
    if not settings.notifications or settings.mode == 'test':
        return LogSink()
    return NotifySendSink()
