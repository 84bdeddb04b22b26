"""Logging and file helpers."""
