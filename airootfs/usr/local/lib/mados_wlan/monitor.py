"""madOS WLAN - Radio status monitor."""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from .interfaces import AsyncBackendInterface, CommandResult
from .parser import parse_radio_status

log = logging.getLogger(__name__)


@dataclass
class RadioState:
    """Process-wide radio state."""
    enabled: bool = False


class StatusMonitor:
    """Keep a RadioState in sync with the tool's radio status query.

    Only an exact ``enabled`` answer counts as enabled; anything else,
    including a failed query, reads as disabled. There is no retry: the
    periodic timer and the orchestrator call :meth:`poll` again.
    """

    def __init__(self, backend: AsyncBackendInterface,
                 state: Optional[RadioState] = None):
        self._backend = backend
        self.state = state if state is not None else RadioState()
        self._pending = False
        self._listeners: List[Callable[[bool], None]] = []
        self._result_listeners: List[Callable[[CommandResult], None]] = []

    @property
    def enabled(self) -> bool:
        return self.state.enabled

    @property
    def polling(self) -> bool:
        return self._pending

    def add_listener(self, callback: Callable[[bool], None]) -> None:
        """Call *callback(enabled)* whenever the radio state changes."""
        self._listeners.append(callback)

    def add_result_listener(self, callback: Callable[[CommandResult], None]) -> None:
        """Call *callback(result)* after every completed query."""
        self._result_listeners.append(callback)

    def poll(self) -> bool:
        """Start a status query unless one is already in flight.

        Returns:
            True if a new query was started.
        """
        if self._pending:
            return False
        self._pending = True
        self._backend.async_radio_status(self._on_status)
        return True

    def apply(self, result: CommandResult) -> bool:
        """Update the state from a status query result and return it."""
        enabled = result.ok and parse_radio_status(result.stdout)
        if not result.ok:
            log.warning('radio status query failed (%s): %s', result.returncode,
                        result.launch_error or result.stderr)
        if enabled != self.state.enabled:
            self.state.enabled = enabled
            log.info('wireless radio %s', 'enabled' if enabled else 'disabled')
            for listener in list(self._listeners):
                listener(enabled)
        return enabled

    def _on_status(self, result: CommandResult) -> None:
        self._pending = False
        self.apply(result)
        for listener in list(self._result_listeners):
            listener(result)
