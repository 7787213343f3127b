#!/usr/bin/env python3
"""
Tests for mados-wlan service wiring, configuration, notifications and CLI.

The service runs on the synchronous mock backend, so every operation has
fully settled by the time the call returns.
"""

import io
import unittest
from contextlib import redirect_stdout
from unittest.mock import MagicMock, patch

import test_helpers  # noqa: F401  (library path, gi mocks)

from mados_wlan.app import WlanService
from mados_wlan.cli.command import EXIT_CONFIG, EXIT_FAILED, EXIT_OK, run
from mados_wlan.cli.manager import WlanManager
from mados_wlan.config import Settings, load_settings
from mados_wlan.factory import create_backend, create_sink, resolve_interface
from mados_wlan.interfaces import CommandResult, Notification, OperationState, Verb
from mados_wlan.mock_backend import MockBackend
from mados_wlan.notifications import LogSink, MemorySink, NotifySendSink
from mados_wlan.translations import detect_system_language, get_text


def make_service(backend=None):
    return WlanService(
        settings=Settings(interface='wlan0', mode='test', language='English'),
        backend=backend or MockBackend(),
        sink=MemorySink(),
    )


# ═══════════════════════════════════════════════════════════════════════════
# Configuration
# ═══════════════════════════════════════════════════════════════════════════
class TestLoadSettings(unittest.TestCase):

    def test_defaults(self):
        settings = load_settings({})
        self.assertIsNone(settings.interface)
        self.assertEqual(settings.tool, 'nmcli')
        self.assertEqual(settings.refresh_seconds, 10)
        self.assertTrue(settings.notifications)

    def test_overrides(self):
        settings = load_settings({
            'MADOS_WLAN_IFACE': 'wlp3s0',
            'MADOS_WLAN_REFRESH_SECONDS': '30',
            'MADOS_WLAN_NOTIFY': 'off',
            'MADOS_WLAN_MODE': 'test',
        })
        self.assertEqual(settings.interface, 'wlp3s0')
        self.assertEqual(settings.refresh_seconds, 30)
        self.assertFalse(settings.notifications)
        self.assertEqual(settings.mode, 'test')

    def test_invalid_integers_fall_back(self):
        for raw in ('soon', '0', '-3'):
            with self.subTest(raw=raw):
                self.assertEqual(load_settings({'MADOS_WLAN_STATUS_SECONDS': raw}).status_seconds, 5)


class TestFactory(unittest.TestCase):

    def test_configured_interface_wins(self):
        self.assertEqual(resolve_interface(Settings(interface='wlan7')), 'wlan7')

    @patch('mados_wlan.backend.get_wifi_device', return_value=None)
    def test_no_device(self, mock_device):
        with self.assertRaises(RuntimeError):
            resolve_interface(Settings())

    def test_real_backend(self):
        backend = create_backend(Settings(tool='nmcli'), 'wlan0')
        self.assertEqual(backend.interface, 'wlan0')

    def test_test_mode_backend(self):
        self.assertIsInstance(create_backend(Settings(mode='test'), 'wlan0'), MockBackend)

    def test_sinks(self):
        self.assertIsInstance(create_sink(Settings()), NotifySendSink)
        self.assertIsInstance(create_sink(Settings(notifications=False)), LogSink)


# ═══════════════════════════════════════════════════════════════════════════
# Translations and notifications
# ═══════════════════════════════════════════════════════════════════════════
class TestTranslations(unittest.TestCase):

    def test_detect(self):
        self.assertEqual(detect_system_language('es_ES.UTF-8'), 'Español')
        self.assertEqual(detect_system_language('fr_FR.UTF-8'), 'English')

    def test_format_and_fallback(self):
        self.assertEqual(get_text('connected_body', 'English', ssid='X'),
                         'You are now connected to X.')
        self.assertEqual(get_text('missing_key', 'Español'), 'missing_key')


class TestNotifySendSink(unittest.TestCase):

    def test_command(self):
        cmd = NotifySendSink().build_command(Notification('Title', 'Body', 'icon-name'))
        self.assertEqual(cmd[0], 'notify-send')
        self.assertEqual(cmd[-2:], ['Title', 'Body'])
        self.assertIn('icon-name', cmd)

    @patch('mados_wlan.notifications.subprocess.Popen')
    def test_fire_and_forget(self, mock_popen):
        NotifySendSink().notify(Notification('Title'))
        mock_popen.assert_called_once()
        mock_popen.return_value.wait.assert_not_called()

    @patch('mados_wlan.notifications.subprocess.Popen', side_effect=FileNotFoundError)
    def test_missing_notify_send_disables(self, mock_popen):
        sink = NotifySendSink()
        sink.notify(Notification('a'))
        sink.notify(Notification('b'))
        self.assertEqual(mock_popen.call_count, 1)


# ═══════════════════════════════════════════════════════════════════════════
# Service
# ═══════════════════════════════════════════════════════════════════════════
class TestWlanService(unittest.TestCase):

    def test_start_populates_registry(self):
        service = make_service()
        service.start(periodic=False)
        self.assertTrue(service.radio_enabled)
        ssids = [ap.ssid for ap in service.registry]
        self.assertEqual(len(ssids), len(set(ssids)))
        self.assertIn('madOS-Lab', ssids)
        # The stronger of the two madOS-Lab radios is kept
        self.assertEqual(service.registry.get('madOS-Lab').strength, 82)

    def test_connect_flow(self):
        service = make_service()
        service.start(periodic=False)
        service.orchestrator.connect('CoffeeShop')
        self.assertEqual(service.registry.active().ssid, 'CoffeeShop')
        self.assertEqual(service.sink.titles, ['Connected'])

    def test_active_network_beats_stronger_radio(self):
        backend = MockBackend()
        service = make_service(backend)
        service.start(periodic=False)
        service.orchestrator.connect('madOS-Lab', 'madoslab')
        lab = service.registry.get('madOS-Lab')
        self.assertTrue(lab.active)
        self.assertEqual(service.registry.active(), lab)

    def test_radio_off_clears_registry(self):
        service = make_service()
        service.start(periodic=False)
        service.orchestrator.toggle_radio()
        self.assertFalse(service.radio_enabled)
        self.assertEqual(len(service.registry), 0)
        self.assertTrue(service.orchestrator.settled(Verb.RADIO))

    def test_periodic_timers(self):
        service = make_service()
        with patch('mados_wlan.app.GLib') as mock_glib:
            mock_glib.timeout_add_seconds.side_effect = [11, 12]
            service.start()
            intervals = [c[0][0] for c in mock_glib.timeout_add_seconds.call_args_list]
            self.assertEqual(intervals, [10, 5])
            service.stop()
            mock_glib.source_remove.assert_any_call(11)
            mock_glib.source_remove.assert_any_call(12)

    def test_auto_refresh_skipped_when_tool_missing(self):
        backend = MagicMock()
        backend.async_scan.side_effect = lambda cb: cb(
            CommandResult(returncode=127, launch_error='nmcli: not found'))
        backend.async_radio_status.side_effect = lambda cb: cb(
            CommandResult(returncode=127, launch_error='nmcli: not found'))
        service = make_service(backend)
        service.start(periodic=False)
        calls = backend.async_scan.call_count
        self.assertTrue(service._auto_refresh())
        self.assertTrue(service._auto_status())
        self.assertEqual(backend.async_scan.call_count, calls)
        self.assertEqual(service.sink.titles, ['Network tool unavailable'])


# ═══════════════════════════════════════════════════════════════════════════
# CLI
# ═══════════════════════════════════════════════════════════════════════════
class TestCommandLine(unittest.TestCase):

    def setUp(self):
        self.manager = WlanManager(make_service())

    def run_cli(self, *argv):
        out = io.StringIO()
        with redirect_stdout(out):
            code = run(list(argv), manager=self.manager)
        return code, out.getvalue()

    def test_help(self):
        code, out = self.run_cli()
        self.assertEqual(code, EXIT_OK)
        self.assertIn('Usage', out)

    def test_scan(self):
        code, out = self.run_cli('scan')
        self.assertEqual(code, EXIT_OK)
        self.assertIn('madOS-Lab', out)
        self.assertIn('CoffeeShop', out)

    def test_connect_success(self):
        code, out = self.run_cli('connect', 'CoffeeShop')
        self.assertEqual(code, EXIT_OK)
        self.assertIn('Connected to CoffeeShop', out)

    def test_connect_failure(self):
        code, out = self.run_cli('connect', 'madOS-Lab', 'wrong')
        self.assertEqual(code, EXIT_FAILED)
        self.assertEqual(self.manager.service.orchestrator.last_outcome(Verb.CONNECT),
                         OperationState.FAILED)

    def test_status(self):
        self.run_cli('connect', 'CoffeeShop')
        code, out = self.run_cli('status')
        self.assertEqual(code, EXIT_OK)
        self.assertIn('Wi-Fi: enabled', out)
        self.assertIn('Connected to: CoffeeShop', out)

    def test_radio_off(self):
        code, out = self.run_cli('radio', 'off')
        self.assertEqual(code, EXIT_OK)
        self.assertIn('Wi-Fi disabled', out)

    def test_unknown_command(self):
        code, _ = self.run_cli('fly')
        self.assertEqual(code, EXIT_FAILED)

    def test_tool_missing_exit_code(self):
        backend = MagicMock()
        missing = CommandResult(returncode=127, launch_error='nmcli: not found')
        for name in ('async_scan', 'async_radio_status'):
            getattr(backend, name).side_effect = lambda cb, r=missing: cb(r)
        self.manager = WlanManager(make_service(backend))
        code, _ = self.run_cli('scan')
        self.assertEqual(code, EXIT_CONFIG)


if __name__ == '__main__':
    unittest.main()
