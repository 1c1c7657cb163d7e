"""Textual widgets for the dashboard."""
