"""madOS WLAN - Configuration constants and environment settings."""

import logging
import os
from dataclasses import dataclass
from typing import Optional

log = logging.getLogger(__name__)

# ========== EXTERNAL TOOL ==========
DEFAULT_TOOL = 'nmcli'

# Seconds before an invocation is abandoned and reported as failed
SCAN_TIMEOUT = 15
CONNECT_TIMEOUT = 45
COMMAND_TIMEOUT = 15

# Return code reported for an invocation that timed out
TIMEOUT_RETURNCODE = 124
# ===================================

# Auto-refresh cadence of the network list and radio status
REFRESH_INTERVAL_SECONDS = 10
STATUS_INTERVAL_SECONDS = 5

# Freedesktop icon names passed to the notification sink
ICON_CONNECTED = 'network-wireless-signal-excellent'
ICON_DISCONNECTED = 'network-wireless-offline'
ICON_ERROR = 'network-wireless-disconnected'
ICON_RADIO = 'network-wireless'

# Environment variables
ENV_IFACE = 'MADOS_WLAN_IFACE'
ENV_TOOL = 'MADOS_WLAN_TOOL'
ENV_REFRESH = 'MADOS_WLAN_REFRESH_SECONDS'
ENV_STATUS = 'MADOS_WLAN_STATUS_SECONDS'
ENV_MODE = 'MADOS_WLAN_MODE'
ENV_NOTIFY = 'MADOS_WLAN_NOTIFY'
ENV_LANG = 'MADOS_WLAN_LANG'


@dataclass
class Settings:
    """Runtime settings resolved from the environment."""
    interface: Optional[str] = None
    tool: str = DEFAULT_TOOL
    refresh_seconds: int = REFRESH_INTERVAL_SECONDS
    status_seconds: int = STATUS_INTERVAL_SECONDS
    mode: str = 'production'
    notifications: bool = True
    language: Optional[str] = None


def _env_int(environ, name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or raw == '':
        return default
    try:
        value = int(raw)
    except ValueError:
        log.warning('%s=%r is not an integer, using %d', name, raw, default)
        return default
    if value <= 0:
        log.warning('%s must be positive, using %d', name, default)
        return default
    return value


def load_settings(environ=None) -> Settings:
    """Build Settings from *environ* (defaults to ``os.environ``)."""
    if environ is None:
        environ = os.environ
    return Settings(
        interface=environ.get(ENV_IFACE) or None,
        tool=environ.get(ENV_TOOL) or DEFAULT_TOOL,
        refresh_seconds=_env_int(environ, ENV_REFRESH, REFRESH_INTERVAL_SECONDS),
        status_seconds=_env_int(environ, ENV_STATUS, STATUS_INTERVAL_SECONDS),
        mode=environ.get(ENV_MODE, 'production'),
        notifications=environ.get(ENV_NOTIFY, '1').lower() not in ('0', 'no', 'false', 'off'),
        language=environ.get(ENV_LANG) or None,
    )
