"""Schema shape layer.

This module turns Avro schema documents into immutable shape trees.
It also answers the branch-resolution questions materialization asks.
"""
