"""madOS WLAN - Command orchestration.

Serializes user intents (connect, disconnect, radio switch, rescan,
status query) against the asynchronous backend and keeps the registry in
sync afterwards. Each verb class runs its own small state machine::

    IDLE -> RUNNING -> SUCCEEDED | FAILED -> IDLE

Everything here runs on the main loop; backend callbacks are delivered
there too, so no locking is needed.

A new connect request supersedes a running one: the older process is not
killed, but its completion only kicks a refresh and never drives the
state machine or a notification. Overlapping disconnect or radio requests
are not superseded: each one reports its outcome. Every terminal state is
followed by a registry refresh, whatever the exit code.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from .config import ICON_CONNECTED, ICON_DISCONNECTED, ICON_ERROR, ICON_RADIO
from .dedup import deduplicate
from .interfaces import (
    AsyncBackendInterface,
    CommandResult,
    Notification,
    NotificationSink,
    OperationState,
    Verb,
)
from .monitor import StatusMonitor
from .parser import parse_scan_output
from .registry import Registry
from .translations import get_text

log = logging.getLogger(__name__)

StateListener = Callable[[Verb, OperationState], None]


@dataclass
class OutstandingOperation:
    """The running instance of one verb class."""
    verb: Verb
    token: int
    ssid: Optional[str] = None
    password: Optional[str] = None
    started: bool = False


class CommandOrchestrator:
    """Drive network operations and the refreshes that follow them.

    Args:
        backend: The asynchronous tool adapter.
        registry: Registry refreshed after every operation.
        monitor: Radio status monitor, re-polled after radio changes.
        sink: Notification sink for terminal states.
        interface: Name of the bound wireless interface (for messages).
        language: Translation language for notification texts.
    """

    def __init__(self, backend: AsyncBackendInterface, registry: Registry,
                 monitor: StatusMonitor, sink: NotificationSink,
                 interface: str = '', language: str = 'English'):
        self._backend = backend
        self.registry = registry
        self.monitor = monitor
        self._sink = sink
        self.interface = interface
        self.language = language

        self._states: Dict[Verb, OperationState] = {v: OperationState.IDLE for v in Verb}
        self._tokens: Dict[Verb, int] = {v: 0 for v in Verb}
        self._outstanding: Dict[Verb, OutstandingOperation] = {}
        self._last_results: Dict[Verb, CommandResult] = {}
        self._last_outcomes: Dict[Verb, OperationState] = {}
        self._listeners: List[StateListener] = []

        self.tool_available = True
        self._tool_error_reported = False
        self._scan_in_flight = False
        self._refresh_pending = False
        self._status_pending = False

        monitor.add_result_listener(self._on_status_result)
        monitor.add_listener(self._on_radio_changed)

    # -- Introspection -------------------------------------------------------

    def state(self, verb: Verb) -> OperationState:
        return self._states[verb]

    def outstanding(self, verb: Verb) -> Optional[OutstandingOperation]:
        return self._outstanding.get(verb)

    def last_result(self, verb: Verb) -> Optional[CommandResult]:
        """Result of the last authoritative completion of *verb*."""
        return self._last_results.get(verb)

    def last_outcome(self, verb: Verb) -> Optional[OperationState]:
        """SUCCEEDED or FAILED for the last authoritative completion."""
        return self._last_outcomes.get(verb)

    @property
    def refreshing(self) -> bool:
        return self._scan_in_flight or self._refresh_pending

    def settled(self, verb: Verb) -> bool:
        """True once *verb* is idle and no refresh is outstanding."""
        return self._states[verb] == OperationState.IDLE and not self.refreshing

    def add_state_listener(self, callback: StateListener) -> None:
        self._listeners.append(callback)

    # -- State machine helpers -----------------------------------------------

    def _set_state(self, verb: Verb, state: OperationState) -> None:
        self._states[verb] = state
        for listener in list(self._listeners):
            listener(verb, state)

    def _begin(self, verb: Verb, ssid: Optional[str] = None,
               password: Optional[str] = None) -> OutstandingOperation:
        self._tokens[verb] += 1
        operation = OutstandingOperation(verb, self._tokens[verb], ssid, password)
        self._outstanding[verb] = operation
        self._set_state(verb, OperationState.RUNNING)
        operation.started = True
        return operation

    def _is_current(self, operation: OutstandingOperation) -> bool:
        return self._tokens[operation.verb] == operation.token

    def _complete(self, operation: OutstandingOperation, result: CommandResult,
                  success: Optional[Notification], failure: Optional[Notification]) -> bool:
        """Finish *operation*; returns False if it had been superseded.

        Only connect is superseded. An older disconnect or radio switch
        still reports its outcome, while the state machine follows the
        latest instance of the verb.
        """
        verb = operation.verb
        latest = self._is_current(operation)
        if not latest and verb == Verb.CONNECT:
            log.info('ignoring superseded %s (%s) exit=%s',
                     verb.value, operation.ssid or '-', result.returncode)
            self.refresh(force=True)
            return False

        if latest:
            self._outstanding.pop(verb, None)
            self._last_results[verb] = result
            terminal = OperationState.SUCCEEDED if result.ok else OperationState.FAILED
            self._last_outcomes[verb] = terminal
            self._set_state(verb, terminal)

        if result.tool_missing:
            self._report_tool_error(result)
        else:
            self._mark_tool_ok()
            if result.ok:
                log.info('%s succeeded', verb.value)
                if success is not None:
                    self._sink.notify(success)
            else:
                log.warning('%s failed (exit %s): %s', verb.value,
                            result.returncode, result.stderr)
                if failure is not None:
                    self._sink.notify(failure)

        self.refresh(force=True)
        if latest:
            self._set_state(verb, OperationState.IDLE)
        return True

    def _report_tool_error(self, result: CommandResult) -> None:
        self.tool_available = False
        if self._tool_error_reported:
            return
        self._tool_error_reported = True
        log.error('network tool unavailable: %s', result.launch_error)
        self._sink.notify(Notification(
            self._t('tool_missing_title'),
            self._t('tool_missing_body', detail=result.launch_error),
            ICON_ERROR,
        ))

    def _mark_tool_ok(self) -> None:
        if not self.tool_available:
            log.info('network tool reachable again')
        self.tool_available = True
        self._tool_error_reported = False

    def _t(self, key, **kwargs) -> str:
        return get_text(key, self.language, **kwargs)

    def _detail(self, result: CommandResult) -> str:
        return result.stderr or self._t('unknown_error')

    # -- Verbs ---------------------------------------------------------------

    def connect(self, ssid: str, password: Optional[str] = None) -> OutstandingOperation:
        """Connect to *ssid*, superseding any connect still running.

        The password is passed to the tool only if non-empty.
        """
        if not ssid:
            raise ValueError('ssid must not be empty')

        previous = self._outstanding.get(Verb.CONNECT)
        if previous is not None:
            log.info('connect to %r supersedes pending connect to %r', ssid, previous.ssid)

        target = self.registry.get(ssid)
        if target is None:
            log.debug('connect target %r is not in the current scan', ssid)
        elif target.is_secure and not password:
            log.debug('connecting to secured %r without a password, relying on saved secrets', ssid)

        operation = self._begin(Verb.CONNECT, ssid, password or None)

        def _done(result: CommandResult) -> None:
            self._complete(
                operation, result,
                Notification(self._t('connected_title'),
                             self._t('connected_body', ssid=ssid), ICON_CONNECTED),
                Notification(self._t('connect_failed_title'),
                             self._t('connect_failed_body', ssid=ssid), ICON_ERROR),
            )

        self._backend.async_connect(ssid, password or None, _done)
        return operation

    def disconnect(self) -> OutstandingOperation:
        """Disconnect the bound interface."""
        operation = self._begin(Verb.DISCONNECT)
        iface = self.interface

        def _done(result: CommandResult) -> None:
            self._complete(
                operation, result,
                Notification(self._t('disconnected_title'),
                             self._t('disconnected_body', iface=iface), ICON_DISCONNECTED),
                Notification(self._t('disconnect_failed_title'),
                             self._t('disconnect_failed_body', iface=iface,
                                     detail=self._detail(result)), ICON_ERROR),
            )

        self._backend.async_disconnect(_done)
        return operation

    def toggle_radio(self, enabled: Optional[bool] = None) -> OutstandingOperation:
        """Switch the radio; with no argument, flip the current RadioState."""
        if enabled is None:
            enabled = not self.monitor.enabled
        operation = self._begin(Verb.RADIO)
        state = self._t('on' if enabled else 'off')

        def _done(result: CommandResult) -> None:
            if self._complete(
                operation, result,
                Notification(self._t('radio_on_title' if enabled else 'radio_off_title'),
                             self._t('radio_body', state=state), ICON_RADIO),
                Notification(self._t('radio_failed_title'),
                             self._t('radio_failed_body', state=state,
                                     detail=self._detail(result)), ICON_ERROR),
            ):
                self.query_status()

        self._backend.async_set_radio(enabled, _done)
        return operation

    def rescan(self) -> Optional[OutstandingOperation]:
        """Request a fresh scan; does nothing while one is running."""
        if self._states[Verb.RESCAN] == OperationState.RUNNING:
            log.debug('rescan already running')
            return None
        operation = self._begin(Verb.RESCAN)

        def _done(result: CommandResult) -> None:
            self._complete(
                operation, result,
                Notification(self._t('rescan_title'), self._t('rescan_body'), ICON_RADIO),
                Notification(self._t('rescan_failed_title'),
                             self._t('rescan_failed_body', detail=self._detail(result)),
                             ICON_ERROR),
            )

        self._backend.async_rescan(_done)
        return operation

    def query_status(self, force: bool = True) -> bool:
        """Re-query the radio status through the monitor.

        A forced request made while a query is in flight is coalesced
        into one more query after it.

        Returns:
            True if a query was started now.
        """
        if not force and not self.tool_available:
            return False
        if self._states[Verb.STATUS] == OperationState.RUNNING:
            if force:
                self._status_pending = True
            return False
        self._begin(Verb.STATUS)
        if not self.monitor.poll():
            # A query started elsewhere is in flight and may predate this one
            log.debug('status query already in flight, queueing another')
            self._status_pending = True
        return True

    def _on_status_result(self, result: CommandResult) -> None:
        if result.tool_missing:
            self._report_tool_error(result)
        elif result.ok:
            self._mark_tool_ok()
        if self._states[Verb.STATUS] != OperationState.RUNNING:
            return
        self._outstanding.pop(Verb.STATUS, None)
        self._last_results[Verb.STATUS] = result
        terminal = OperationState.SUCCEEDED if result.ok else OperationState.FAILED
        self._last_outcomes[Verb.STATUS] = terminal
        self._set_state(Verb.STATUS, terminal)
        self._set_state(Verb.STATUS, OperationState.IDLE)

        if self._status_pending:
            self._status_pending = False
            self.query_status()

    def _on_radio_changed(self, enabled: bool) -> None:
        # The network list is meaningless across a radio change
        self.refresh(force=True)

    # -- Registry refresh ----------------------------------------------------

    def refresh(self, force: bool = False) -> bool:
        """Run one reconciliation pass from a fresh scan listing.

        Refreshes requested while a scan is in flight are coalesced into
        one more pass after it. Without *force*, nothing happens once the
        tool has been found unavailable.

        Returns:
            True if a scan was started now.
        """
        if not force and not self.tool_available:
            return False
        if self._scan_in_flight:
            self._refresh_pending = True
            return False
        self._scan_in_flight = True
        self._backend.async_scan(self._on_scan_done)
        return True

    def _on_scan_done(self, result: CommandResult) -> None:
        self._scan_in_flight = False
        if result.tool_missing:
            self._report_tool_error(result)
        elif not result.ok:
            log.warning('scan failed (exit %s), keeping previous list: %s',
                        result.returncode, result.stderr)
        else:
            self._mark_tool_ok()
            self.apply_scan(result.stdout)

        if self._refresh_pending:
            self._refresh_pending = False
            self.refresh(force=True)

    def apply_scan(self, output: str):
        """Parse, deduplicate and reconcile one scan listing in one pass."""
        snapshot = deduplicate(parse_scan_output(output))
        return self.registry.reconcile(snapshot)
