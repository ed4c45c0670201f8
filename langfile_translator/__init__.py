"""Translate PHP-style language files while keeping their structure intact."""

__version__ = "1.0.0"
