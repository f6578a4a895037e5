"""Utilities for persistql."""
