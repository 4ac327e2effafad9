"""headway CLI module.

Provides command-line tools to try out progress tracking and display.

Usage:
    python -m headway.cli demo
    python -m headway.cli demo --size 542MiB --show-speed --show-time-left
"""
