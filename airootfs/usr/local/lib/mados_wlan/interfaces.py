"""madOS WLAN - Data types and abstract interfaces.

Defines the records exchanged between the parser, the registry and the
orchestrator, plus the contracts for the external tool backend and the
notification sink so they can be swapped for fakes in tests.
"""

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional


class Verb(enum.Enum):
    """Categories of network operation handled by the orchestrator."""
    CONNECT = 'connect'
    DISCONNECT = 'disconnect'
    RADIO = 'radio'
    RESCAN = 'rescan'
    STATUS = 'status'


class OperationState(enum.Enum):
    """Lifecycle of one verb class."""
    IDLE = 'idle'
    RUNNING = 'running'
    SUCCEEDED = 'succeeded'
    FAILED = 'failed'


@dataclass(frozen=True)
class ScanRecord:
    """One parsed scan line, before deduplication."""
    ssid: str
    active: bool = False
    strength: int = 0
    frequency: int = 0
    bssid: str = ''
    security: str = ''


class AccessPoint:
    """A visible wireless network, owned by the registry.

    The ssid is the identity and never changes; every other attribute is
    replaced in place by each reconciliation pass.
    """

    __slots__ = ('_ssid', 'bssid', 'strength', 'frequency', 'active', 'security')

    def __init__(self, ssid: str, bssid: str = '', strength: int = 0,
                 frequency: int = 0, active: bool = False, security: str = ''):
        self._ssid = ssid
        self.bssid = bssid
        self.strength = strength
        self.frequency = frequency
        self.active = active
        self.security = security

    @classmethod
    def from_record(cls, record: ScanRecord) -> 'AccessPoint':
        return cls(record.ssid, record.bssid, record.strength,
                   record.frequency, record.active, record.security)

    @property
    def ssid(self) -> str:
        return self._ssid

    @property
    def is_secure(self) -> bool:
        return bool(self.security)

    @property
    def band(self) -> str:
        """Return the frequency band label for a frequency in MHz."""
        if 2400 <= self.frequency < 2500:
            return '2.4 GHz'
        elif 5150 <= self.frequency < 5925:
            return '5 GHz'
        elif 5925 <= self.frequency <= 7125:
            return '6 GHz'
        return ''

    @property
    def signal_category(self) -> str:
        """Return a human-readable signal quality category."""
        if self.strength >= 80:
            return 'excellent'
        elif self.strength >= 60:
            return 'good'
        elif self.strength >= 40:
            return 'fair'
        elif self.strength >= 20:
            return 'weak'
        return 'none'

    @property
    def signal_bars(self) -> str:
        """Return a Unicode bar representation of signal strength."""
        if self.strength >= 80:
            return '████'   # full blocks
        elif self.strength >= 60:
            return '███░'
        elif self.strength >= 40:
            return '██░░'
        elif self.strength >= 20:
            return '█░░░'
        return '░░░░'

    def update_from(self, record: ScanRecord) -> bool:
        """Replace all attributes from *record*, keeping identity.

        Returns:
            True if any attribute value changed.
        """
        if record.ssid != self._ssid:
            raise ValueError(f'cannot update {self._ssid!r} from {record.ssid!r}')
        new = (record.bssid, record.strength, record.frequency,
               record.active, record.security)
        old = (self.bssid, self.strength, self.frequency,
               self.active, self.security)
        (self.bssid, self.strength, self.frequency,
         self.active, self.security) = new
        return new != old

    def __repr__(self):
        return (f'AccessPoint(ssid={self._ssid!r}, bssid={self.bssid!r}, '
                f'strength={self.strength}, frequency={self.frequency}, '
                f'active={self.active}, security={self.security!r})')


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one external tool invocation.

    ``launch_error`` is set only when the process could not be started at
    all; a process that ran and exited nonzero has it empty.
    """
    returncode: int = 0
    stdout: str = ''
    stderr: str = ''
    launch_error: str = ''

    @property
    def ok(self) -> bool:
        return not self.launch_error and self.returncode == 0

    @property
    def tool_missing(self) -> bool:
        return bool(self.launch_error)


@dataclass(frozen=True)
class Notification:
    """A (title, body, icon) triple for the notification sink."""
    title: str
    body: str = ''
    icon: str = ''


ResultCallback = Callable[[CommandResult], None]


class AsyncBackendInterface(ABC):
    """Contract for the external network tool.

    Every method returns immediately; *callback* is later invoked once,
    on the main loop, with the CommandResult.
    """

    @abstractmethod
    def async_scan(self, callback: ResultCallback) -> None:
        """List visible access points in the escaped colon format."""

    @abstractmethod
    def async_connect(self, ssid: str, password: Optional[str],
                      callback: ResultCallback) -> None:
        """Connect the bound interface to *ssid*."""

    @abstractmethod
    def async_disconnect(self, callback: ResultCallback) -> None:
        """Disconnect the bound interface."""

    @abstractmethod
    def async_set_radio(self, enabled: bool, callback: ResultCallback) -> None:
        """Switch the wireless radio on or off."""

    @abstractmethod
    def async_radio_status(self, callback: ResultCallback) -> None:
        """Query the radio state as free-form text."""

    @abstractmethod
    def async_rescan(self, callback: ResultCallback) -> None:
        """Ask the tool for a fresh scan."""


class NotificationSink(ABC):
    """One-way, fire-and-forget notification delivery."""

    @abstractmethod
    def notify(self, notification: Notification) -> None:
        """Deliver *notification*; must not block or raise."""
