"""madOS WLAN - Headless service wiring.

Owns the registry, radio state, orchestrator and the periodic timers
that keep them fresh. Presentation layers (the CLI, a panel applet) read
``service.registry`` and call the orchestrator verbs.
"""

import logging
from typing import Optional

import gi
gi.require_version('GLib', '2.0')
from gi.repository import GLib

from .config import Settings, load_settings
from .factory import create_backend, create_sink, resolve_interface
from .monitor import StatusMonitor
from .orchestrator import CommandOrchestrator
from .registry import Registry
from .translations import detect_system_language

log = logging.getLogger(__name__)


class WlanService:
    """Live view of nearby networks plus the command orchestrator."""

    def __init__(self, settings: Optional[Settings] = None, backend=None,
                 sink=None, interface: Optional[str] = None):
        self.settings = settings or load_settings()
        self.interface = interface or resolve_interface(self.settings)
        self.backend = backend or create_backend(self.settings, self.interface)
        self.sink = sink or create_sink(self.settings)
        self.language = self.settings.language or detect_system_language()

        self.registry = Registry()
        self.monitor = StatusMonitor(self.backend)
        self.orchestrator = CommandOrchestrator(
            self.backend, self.registry, self.monitor, self.sink,
            interface=self.interface, language=self.language,
        )
        self._refresh_id = None
        self._status_id = None

    @property
    def radio_enabled(self) -> bool:
        return self.monitor.enabled

    def start(self, periodic: bool = True) -> None:
        """Run the first status query and refresh, then start the timers."""
        self.orchestrator.query_status()
        self.orchestrator.refresh(force=True)
        if periodic:
            self._refresh_id = GLib.timeout_add_seconds(
                self.settings.refresh_seconds, self._auto_refresh)
            self._status_id = GLib.timeout_add_seconds(
                self.settings.status_seconds, self._auto_status)

    def stop(self) -> None:
        """Remove the periodic timers."""
        if self._refresh_id:
            GLib.source_remove(self._refresh_id)
            self._refresh_id = None
        if self._status_id:
            GLib.source_remove(self._status_id)
            self._status_id = None

    def _auto_refresh(self):
        """Periodic network list refresh (GLib timeout callback)."""
        self.orchestrator.refresh()
        return True

    def _auto_status(self):
        """Periodic radio status poll (GLib timeout callback)."""
        self.orchestrator.query_status(force=False)
        return True
