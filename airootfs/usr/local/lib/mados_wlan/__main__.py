#!/usr/bin/env python3
"""madOS WLAN - Entry point."""

from .cli.command import main


if __name__ == '__main__':
    main()
