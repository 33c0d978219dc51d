"""
Utilities

Shared helpers (config file loading).
"""
