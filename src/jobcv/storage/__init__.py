"""Flat-file key-value storage for templates and UI state."""
