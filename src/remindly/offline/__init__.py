"""Offline asset cache (install / activate / fetch)."""
