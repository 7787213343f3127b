"""madOS WLAN - Mock backend for testing and demos.

Simulates a radio, a handful of access points and connection outcomes
without calling nmcli. Scan output is produced in the same escaped
colon-delimited format the real tool prints.
"""

import threading
from typing import Callable, Dict, List, Optional

from .interfaces import AsyncBackendInterface, CommandResult, ResultCallback


def _escape(value: str) -> str:
    return value.replace('\\', '\\\\').replace(':', '\\:')


class MockNetwork:
    """A simulated access point."""

    def __init__(self, ssid, strength, frequency=2412, bssid='',
                 security='WPA2', password=None):
        self.ssid = ssid
        self.strength = strength
        self.frequency = frequency
        self.bssid = bssid
        self.security = security
        self.password = password


DEFAULT_NETWORKS = [
    MockNetwork('madOS-Lab', 82, 5180, '02:00:00:00:00:01', 'WPA2', 'madoslab'),
    MockNetwork('madOS-Lab', 47, 2437, '02:00:00:00:00:02', 'WPA2', 'madoslab'),
    MockNetwork('CoffeeShop', 64, 2412, '02:00:00:00:00:03', '', None),
    MockNetwork('Neighbor 5G', 31, 5745, '02:00:00:00:00:04', 'WPA3', 'secret'),
]


class MockBackend(AsyncBackendInterface):
    """Mock implementation of the async backend contract.

    Args:
        networks: Simulated access points (defaults to a small demo set).
        schedule: Function used to deliver callbacks later, called as
            ``schedule(func, *args)``. When None, callbacks run
            synchronously.
    """

    def __init__(self, networks: Optional[List[MockNetwork]] = None,
                 schedule: Optional[Callable] = None):
        self._networks = list(DEFAULT_NETWORKS if networks is None else networks)
        self._schedule = schedule
        self._radio = True
        self._connected: Optional[str] = None
        self._lock = threading.Lock()
        self.calls: List[str] = []

    # -- Helpers -------------------------------------------------------------

    def _deliver(self, callback: ResultCallback, result: CommandResult) -> None:
        if self._schedule is None:
            callback(result)
            return

        def _idle():
            callback(result)
            return False

        self._schedule(_idle)

    def _known(self) -> Dict[str, MockNetwork]:
        known: Dict[str, MockNetwork] = {}
        for net in self._networks:
            known.setdefault(net.ssid, net)
        return known

    @property
    def radio_enabled(self) -> bool:
        return self._radio

    @property
    def connected_ssid(self) -> Optional[str]:
        return self._connected

    def scan_output(self) -> str:
        """Render the simulated networks as terse scan output."""
        if not self._radio:
            return ''
        lines = []
        for net in self._networks:
            active = 'yes' if net.ssid == self._connected else 'no'
            lines.append(':'.join([
                active, str(net.strength), f'{net.frequency} MHz',
                _escape(net.ssid), _escape(net.bssid), net.security,
            ]))
        return '\n'.join(lines) + ('\n' if lines else '')

    # -- AsyncBackendInterface -----------------------------------------------

    def async_scan(self, callback: ResultCallback) -> None:
        self.calls.append('scan')
        with self._lock:
            output = self.scan_output()
        self._deliver(callback, CommandResult(stdout=output))

    def async_connect(self, ssid: str, password: Optional[str],
                      callback: ResultCallback) -> None:
        self.calls.append(f'connect {ssid}')
        with self._lock:
            net = self._known().get(ssid)
            if not self._radio:
                result = CommandResult(returncode=10, stderr='Wi-Fi is disabled')
            elif net is None:
                result = CommandResult(returncode=10, stderr=f'No network with SSID {ssid!r} found')
            elif net.password and net.password != password:
                result = CommandResult(returncode=4, stderr='Secrets were required, but not provided')
            else:
                self._connected = ssid
                result = CommandResult(stdout=f'Device successfully activated with {ssid!r}.')
        self._deliver(callback, result)

    def async_disconnect(self, callback: ResultCallback) -> None:
        self.calls.append('disconnect')
        with self._lock:
            if self._connected is None:
                result = CommandResult(returncode=6, stderr='Device is not active')
            else:
                self._connected = None
                result = CommandResult(stdout='Device successfully disconnected.')
        self._deliver(callback, result)

    def async_set_radio(self, enabled: bool, callback: ResultCallback) -> None:
        self.calls.append(f'radio {"on" if enabled else "off"}')
        with self._lock:
            self._radio = enabled
            if not enabled:
                self._connected = None
        self._deliver(callback, CommandResult())

    def async_radio_status(self, callback: ResultCallback) -> None:
        self.calls.append('status')
        text = 'enabled\n' if self._radio else 'disabled\n'
        self._deliver(callback, CommandResult(stdout=text))

    def async_rescan(self, callback: ResultCallback) -> None:
        self.calls.append('rescan')
        if not self._radio:
            result = CommandResult(returncode=10, stderr='Wi-Fi is disabled')
        else:
            result = CommandResult()
        self._deliver(callback, result)
