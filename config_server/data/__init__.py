"""
Data Layer

File-backed persistence for config server resources.
"""
