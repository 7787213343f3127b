"""WLAN manager for the CLI - runs one orchestrator verb to completion."""

import logging

import gi
gi.require_version('GLib', '2.0')
from gi.repository import GLib

from ..app import WlanService
from ..config import CONNECT_TIMEOUT
from ..interfaces import OperationState, Verb

log = logging.getLogger(__name__)

# Milliseconds between checks for a settled orchestrator
_SETTLE_POLL_MS = 100


class WlanManager:
    """Drive the WlanService from a terminal.

    Every method starts one operation, spins a GLib main loop until the
    verb is idle again and the follow-up refresh has been applied, and
    returns the outcome.
    """

    def __init__(self, service=None):
        self._service = service

    @property
    def service(self) -> WlanService:
        if self._service is None:
            self._service = WlanService()
        return self._service

    @property
    def registry(self):
        return self.service.registry

    def _run_until_settled(self, verb, timeout=CONNECT_TIMEOUT + 15):
        orchestrator = self.service.orchestrator
        if orchestrator.settled(verb):
            return orchestrator.last_outcome(verb)

        loop = GLib.MainLoop()
        timed_out = []

        def _check():
            if orchestrator.settled(verb):
                loop.quit()
                return False
            return True

        def _expire():
            timed_out.append(True)
            loop.quit()
            return False

        GLib.timeout_add(_SETTLE_POLL_MS, _check)
        expire_id = GLib.timeout_add_seconds(timeout, _expire)
        loop.run()
        if not timed_out:
            GLib.source_remove(expire_id)
        else:
            log.warning('%s did not settle within %ss', verb.value, timeout)
            return OperationState.FAILED
        return orchestrator.last_outcome(verb)

    def scan(self):
        """Refresh the registry and return it sorted for display."""
        orchestrator = self.service.orchestrator
        orchestrator.query_status()
        orchestrator.refresh(force=True)
        self._run_until_settled(Verb.STATUS)
        return self.registry.sorted_for_display()

    def connect(self, ssid, password=None):
        self.service.orchestrator.connect(ssid, password)
        return self._run_until_settled(Verb.CONNECT)

    def disconnect(self):
        self.service.orchestrator.disconnect()
        return self._run_until_settled(Verb.DISCONNECT)

    def set_radio(self, enabled=None):
        self.service.orchestrator.query_status()
        self._run_until_settled(Verb.STATUS)
        self.service.orchestrator.toggle_radio(enabled)
        outcome = self._run_until_settled(Verb.RADIO)
        self._run_until_settled(Verb.STATUS)
        return outcome

    def rescan(self):
        self.service.orchestrator.rescan()
        return self._run_until_settled(Verb.RESCAN)

    def status(self):
        """Return (radio_enabled, active AccessPoint or None)."""
        self.scan()
        return self.service.radio_enabled, self.registry.active()

    @property
    def tool_available(self):
        return self.service.orchestrator.tool_available

    def watch(self, on_change):
        """Run the service forever, calling *on_change(registry, diff)*."""
        service = self.service
        service.registry.add_listener(on_change)
        service.start()
        loop = GLib.MainLoop()
        try:
            loop.run()
        except KeyboardInterrupt:
            pass
        finally:
            service.stop()
