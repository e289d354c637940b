"""Log drop service: upload log files, download them all as a ZIP archive."""

__version__ = "0.1.0"
