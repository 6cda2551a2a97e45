"""Container storage layer.

This module writes and reads self-describing Avro container files.
It owns stream handling for file paths and the standard streams.
"""
