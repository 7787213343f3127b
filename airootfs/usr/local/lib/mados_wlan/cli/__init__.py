"""Command-line interface for mados-wlan.

Runs orchestrator verbs from a terminal without any graphical
environment, on top of the headless WlanService.
"""

from .manager import WlanManager
from .command import main

__all__ = ['WlanManager', 'main']
