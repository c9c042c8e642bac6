"""Bundled base CV templates."""
