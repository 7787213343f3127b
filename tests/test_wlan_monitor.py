#!/usr/bin/env python3
"""
Tests for the mados-wlan radio status monitor.
"""

import unittest

from test_helpers import ScriptedBackend

from mados_wlan.interfaces import CommandResult
from mados_wlan.monitor import RadioState, StatusMonitor


class TestStatusMonitor(unittest.TestCase):
    """Verify RadioState tracking from status query output."""

    def setUp(self):
        self.backend = ScriptedBackend()
        self.monitor = StatusMonitor(self.backend)
        self.changes = []
        self.monitor.add_listener(self.changes.append)

    def test_starts_disabled(self):
        self.assertFalse(self.monitor.enabled)

    def test_enabled_token(self):
        self.monitor.poll()
        self.backend.complete('status', CommandResult(stdout='enabled\n'))
        self.assertTrue(self.monitor.enabled)
        self.assertEqual(self.changes, [True])

    def test_anything_else_is_disabled(self):
        self.monitor.state.enabled = True
        self.monitor.poll()
        self.backend.complete('status', CommandResult(stdout='disabled\n'))
        self.assertFalse(self.monitor.enabled)
        self.assertEqual(self.changes, [False])

    def test_failed_query_reads_disabled(self):
        self.monitor.state.enabled = True
        self.monitor.poll()
        self.backend.complete('status', CommandResult(returncode=8, stdout='enabled'))
        self.assertFalse(self.monitor.enabled)

    def test_listeners_only_on_change(self):
        for _ in range(3):
            self.monitor.poll()
            self.backend.complete('status', CommandResult(stdout='enabled'))
        self.assertEqual(self.changes, [True])

    def test_poll_not_stacked(self):
        self.assertTrue(self.monitor.poll())
        self.assertTrue(self.monitor.polling)
        self.assertFalse(self.monitor.poll())
        self.assertEqual(len(self.backend.calls('status')), 1)
        self.backend.complete('status', CommandResult(stdout='enabled'))
        self.assertFalse(self.monitor.polling)

    def test_result_listener_sees_every_query(self):
        results = []
        self.monitor.add_result_listener(results.append)
        self.monitor.poll()
        self.backend.complete('status', CommandResult(stdout='enabled'))
        self.monitor.poll()
        self.backend.complete('status', CommandResult(stdout='enabled'))
        self.assertEqual(len(results), 2)

    def test_shared_state_object(self):
        state = RadioState(enabled=True)
        monitor = StatusMonitor(self.backend, state)
        monitor.apply(CommandResult(stdout='disabled'))
        self.assertFalse(state.enabled)


if __name__ == '__main__':
    unittest.main()
