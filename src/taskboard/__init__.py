"""Taskboard: file-backed project and task tracker with a JSON HTTP API."""

__version__ = "0.1.0"
