"""madOS WLAN - Network backend using NetworkManager (nmcli).

All network operations are performed by invoking nmcli as a subprocess.
Each invocation runs in a background thread so the GLib main loop stays
responsive; the CommandResult is marshalled back via GLib.idle_add, so
callbacks always run on the main loop.
"""

import logging
import subprocess
import threading
from typing import List, Optional

import gi
gi.require_version('GLib', '2.0')
from gi.repository import GLib

from .config import (
    CONNECT_TIMEOUT,
    COMMAND_TIMEOUT,
    DEFAULT_TOOL,
    SCAN_TIMEOUT,
    TIMEOUT_RETURNCODE,
)
from .interfaces import AsyncBackendInterface, CommandResult, ResultCallback

log = logging.getLogger(__name__)

# Terse-mode field list; order must match mados_wlan.parser
SCAN_FIELDS = 'ACTIVE,SIGNAL,FREQ,SSID,BSSID,SECURITY'


class ToolUnavailableError(RuntimeError):
    """The external network tool could not be launched at all."""


# ---------------------------------------------------------------------------
# Helper: run commands
# ---------------------------------------------------------------------------

def _run_command(cmd: List[str], timeout: int = 30) -> subprocess.CompletedProcess:
    """Execute a command and return the CompletedProcess result.

    Args:
        cmd: Command and arguments to execute.
        timeout: Maximum seconds to wait.

    Returns:
        A subprocess.CompletedProcess instance.

    Raises:
        FileNotFoundError: If the command is not installed.
        PermissionError: If the command is not executable.
        subprocess.TimeoutExpired: If the command times out.
    """
    return subprocess.run(
        cmd,
        capture_output=True,
        text=True,
        timeout=timeout,
    )


def execute(cmd: List[str], timeout: int = 30) -> CommandResult:
    """Run *cmd* and fold every outcome into a CommandResult.

    Never raises for launch failures or timeouts.
    """
    try:
        result = _run_command(cmd, timeout=timeout)
    except (FileNotFoundError, PermissionError) as e:
        log.error('cannot launch %s: %s', cmd[0], e)
        return CommandResult(returncode=127, launch_error=f'{cmd[0]}: {e.strerror or e}')
    except subprocess.TimeoutExpired:
        log.warning('%s timed out after %ss', ' '.join(cmd[:3]), timeout)
        return CommandResult(returncode=TIMEOUT_RETURNCODE,
                             stderr=f'timed out after {timeout}s')
    return CommandResult(
        returncode=result.returncode,
        stdout=result.stdout or '',
        stderr=(result.stderr or '').strip(),
    )


def get_wifi_device(tool: str = DEFAULT_TOOL) -> Optional[str]:
    """Return the first WiFi device name known to the tool, or None.

    Raises:
        ToolUnavailableError: If the tool cannot be launched.
    """
    result = execute([tool, '-t', '-f', 'DEVICE,TYPE', 'device'], timeout=COMMAND_TIMEOUT)
    if result.tool_missing:
        raise ToolUnavailableError(result.launch_error)
    if not result.ok:
        return None
    for line in result.stdout.splitlines():
        # Format: "wlan0:wifi"
        device, _, dev_type = line.rpartition(':')
        if dev_type == 'wifi' and device:
            return device
    return None


# ---------------------------------------------------------------------------
# nmcli backend
# ---------------------------------------------------------------------------

class NmcliBackend(AsyncBackendInterface):
    """Asynchronous nmcli adapter bound to one wireless interface.

    The interface is always passed explicitly so that hosts with several
    wireless devices never fall back to the tool's default choice.
    """

    def __init__(self, interface: str, tool: str = DEFAULT_TOOL):
        if not interface:
            raise ValueError('a wireless interface is required')
        self.interface = interface
        self.tool = tool

    # -- Command lines -------------------------------------------------------

    def scan_command(self) -> List[str]:
        return [self.tool, '-t', '-f', SCAN_FIELDS, 'device', 'wifi', 'list',
                'ifname', self.interface, '--rescan', 'no']

    def connect_command(self, ssid: str, password: Optional[str]) -> List[str]:
        cmd = [self.tool, 'device', 'wifi', 'connect', ssid]
        if password:
            cmd += ['password', password]
        cmd += ['ifname', self.interface]
        return cmd

    def disconnect_command(self) -> List[str]:
        return [self.tool, 'device', 'disconnect', self.interface]

    def radio_command(self, enabled: bool) -> List[str]:
        return [self.tool, 'radio', 'wifi', 'on' if enabled else 'off']

    def status_command(self) -> List[str]:
        return [self.tool, 'radio', 'wifi']

    def rescan_command(self) -> List[str]:
        return [self.tool, 'device', 'wifi', 'rescan', 'ifname', self.interface]

    # -- Async wrappers ------------------------------------------------------

    def _spawn(self, cmd: List[str], timeout: int, callback: ResultCallback) -> None:
        """Run *cmd* in a daemon thread and deliver the result on the main loop."""
        def _deliver(result):
            callback(result)
            return False

        def _worker():
            result = execute(cmd, timeout=timeout)
            GLib.idle_add(_deliver, result)

        thread = threading.Thread(target=_worker, daemon=True)
        thread.start()

    def async_scan(self, callback: ResultCallback) -> None:
        self._spawn(self.scan_command(), SCAN_TIMEOUT, callback)

    def async_connect(self, ssid: str, password: Optional[str],
                      callback: ResultCallback) -> None:
        self._spawn(self.connect_command(ssid, password), CONNECT_TIMEOUT, callback)

    def async_disconnect(self, callback: ResultCallback) -> None:
        self._spawn(self.disconnect_command(), COMMAND_TIMEOUT, callback)

    def async_set_radio(self, enabled: bool, callback: ResultCallback) -> None:
        self._spawn(self.radio_command(enabled), COMMAND_TIMEOUT, callback)

    def async_radio_status(self, callback: ResultCallback) -> None:
        self._spawn(self.status_command(), COMMAND_TIMEOUT, callback)

    def async_rescan(self, callback: ResultCallback) -> None:
        self._spawn(self.rescan_command(), SCAN_TIMEOUT, callback)
