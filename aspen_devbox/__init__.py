"""The adb command line and helpers for running the Aspen Discovery Docker development environment."""

__version__ = "0.1.0"