"""keyguide — context-aware keyboard shortcut lookup."""

__version__ = "0.1.0"
