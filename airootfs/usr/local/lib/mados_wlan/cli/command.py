"""CLI entry point for mados-wlan."""

import logging
import sys

from rich.logging import RichHandler

from ..backend import ToolUnavailableError
from ..interfaces import OperationState
from .manager import WlanManager

USAGE = """Usage: mados-wlan [-v] <command> [args]

Commands:
  scan                        List nearby networks
  connect <ssid> [password]   Connect to a network
  disconnect                  Disconnect the wireless interface
  radio on|off|toggle         Switch the wireless radio
  rescan                      Ask for a fresh scan
  status                      Show radio and connection status
  watch                       Keep the list fresh and print changes"""

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG = 2


def setup_logging(verbose=False):
    """Send log records to stderr through Rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(message)s',
        datefmt='[%X]',
        handlers=[RichHandler(rich_tracebacks=True, show_path=verbose)],
    )


def format_access_point(ap):
    marker = '*' if ap.active else ' '
    security = ap.security or 'open'
    band = f' {ap.band}' if ap.band else ''
    return f' {marker} {ap.signal_bars} {ap.strength:3d}%  {ap.ssid} [{security}]{band}'


def print_networks(networks):
    if networks:
        print(f"Found {len(networks)} network(s):")
        for ap in networks:
            print(format_access_point(ap))
    else:
        print("No networks found")


def _exit_code(manager, outcome):
    if not manager.tool_available:
        return EXIT_CONFIG
    return EXIT_OK if outcome == OperationState.SUCCEEDED else EXIT_FAILED


def run(argv, manager=None):
    """Execute one CLI command and return the process exit code."""
    args = list(argv)
    verbose = False
    while args and args[0] in ('-v', '--verbose'):
        verbose = True
        args.pop(0)

    if not args or args[0] in ('-h', '--help', 'help'):
        print(USAGE)
        return EXIT_OK

    setup_logging(verbose)
    command = args[0]
    manager = manager or WlanManager()

    try:
        if command == "scan":
            networks = manager.scan()
            if not manager.tool_available:
                return EXIT_CONFIG
            print_networks(networks)
            return EXIT_OK

        elif command == "connect":
            if len(args) < 2:
                print("Usage: mados-wlan connect <ssid> [password]")
                return EXIT_FAILED
            ssid = args[1]
            password = args[2] if len(args) > 2 else None
            outcome = manager.connect(ssid, password)
            print(f"Connected to {ssid}" if outcome == OperationState.SUCCEEDED
                  else f"Failed to connect to {ssid}")
            return _exit_code(manager, outcome)

        elif command == "disconnect":
            outcome = manager.disconnect()
            print("Disconnected" if outcome == OperationState.SUCCEEDED
                  else "Failed to disconnect")
            return _exit_code(manager, outcome)

        elif command == "radio":
            choice = args[1] if len(args) > 1 else 'toggle'
            if choice not in ('on', 'off', 'toggle'):
                print("Usage: mados-wlan radio on|off|toggle")
                return EXIT_FAILED
            enabled = None if choice == 'toggle' else choice == 'on'
            outcome = manager.set_radio(enabled)
            state = 'enabled' if manager.service.radio_enabled else 'disabled'
            print(f"Wi-Fi {state}")
            return _exit_code(manager, outcome)

        elif command == "rescan":
            outcome = manager.rescan()
            print_networks(manager.registry.sorted_for_display())
            return _exit_code(manager, outcome)

        elif command == "status":
            enabled, active = manager.status()
            if not manager.tool_available:
                return EXIT_CONFIG
            print(f"Wi-Fi: {'enabled' if enabled else 'disabled'}")
            print(f"Connected to: {active.ssid}" if active else "Not connected")
            return EXIT_OK

        elif command == "watch":
            def _on_change(registry, diff):
                print_networks(registry.sorted_for_display())
            manager.watch(_on_change)
            return EXIT_OK

        else:
            print(f"Unknown command: {command}")
            print(USAGE)
            return EXIT_FAILED

    except ToolUnavailableError as e:
        print(f"Network tool unavailable: {e}", file=sys.stderr)
        return EXIT_CONFIG
    except RuntimeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_CONFIG


def main():
    """CLI entry point."""
    sys.exit(run(sys.argv[1:]))


if __name__ == "__main__":
    main()
