"""Filesystem exercise tools over a content-addressable file store."""

__version__ = "0.1.0"
