"""Clinic back-office desk: SQLite resource library and treatments, SMTP mail, serial title lookup and media helpers."""

__version__ = "0.1.0"