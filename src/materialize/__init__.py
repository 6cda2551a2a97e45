"""Schema-guided JSON materialization.

This module converts parsed JSON values into schema-conformant records.
It reports field-level mismatches to a diagnostic sink instead of raising.
"""
