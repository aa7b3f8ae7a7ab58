"""
Core utilities shared across the gallery.

This package hosts configuration helpers (env vars, paths) and the logging
setup. Services and routers read settings from here instead of touching
os.environ directly.
"""
