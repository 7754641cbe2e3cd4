"""Task Gganbu: a gamified daily task tracker."""

__version__ = "0.1.0"
