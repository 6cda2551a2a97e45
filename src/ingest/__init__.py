"""JSON text ingestion.

This module reads newline-delimited JSON text and materializes each
document into records for the container writer.
"""
