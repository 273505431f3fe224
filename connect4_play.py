#!/usr/bin/env python3
"""Entry point for a terminal Connect-4 game against the computer."""

from connect4_tui.cli import main


if __name__ == "__main__":
    main()
