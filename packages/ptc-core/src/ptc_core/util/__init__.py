"""Utility helpers for ptc-core."""
