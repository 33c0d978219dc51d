"""
Config Server

A small HTTP resource store: JSON and text documents persisted as
individual files, addressed by validated identifiers, with a daily
rolling audit log.
"""

__version__ = "1.0.0"
