"""Taskboard - task snapshot sync and calendar views."""

__version__ = "0.1.0"
