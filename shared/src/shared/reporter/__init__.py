"""Logging facade shared by veilleur components."""

from shared.reporter.system_reporter import SystemReporter

__all__ = ["SystemReporter"]
