"""madOS WLAN - live wireless network list and connection manager.

Keeps a deduplicated registry of nearby access points in sync with
NetworkManager and serializes connect/disconnect/radio/rescan requests.

Usage:
    from mados_wlan import WlanService

    service = WlanService()
    service.start()
    service.orchestrator.connect("MyNetwork", "password123")
"""

__version__ = "1.0.0"
__app_id__ = "mados-wlan"

# Core API (no GLib needed)
from .interfaces import (
    AccessPoint,
    CommandResult,
    Notification,
    OperationState,
    ScanRecord,
    Verb,
)
from .parser import parse_scan_line, parse_scan_output, split_escaped_line
from .dedup import deduplicate
from .registry import Registry, RegistryDiff
from .monitor import RadioState, StatusMonitor
from .orchestrator import CommandOrchestrator

__all__ = [
    '__version__',
    '__app_id__',
    'AccessPoint',
    'CommandResult',
    'Notification',
    'OperationState',
    'ScanRecord',
    'Verb',
    'parse_scan_line',
    'parse_scan_output',
    'split_escaped_line',
    'deduplicate',
    'Registry',
    'RegistryDiff',
    'RadioState',
    'StatusMonitor',
    'CommandOrchestrator',
]

# Service wiring (requires GLib)
try:
    from .app import WlanService
    __all__.append('WlanService')
except ImportError:
    pass
