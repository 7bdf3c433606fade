"""Suggest Analyzer -- competitive keyword reports from Google autocomplete suggestions."""

__version__ = "1.0.0"
