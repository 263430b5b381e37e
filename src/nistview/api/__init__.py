"""API layer: canonical query/transform surface for the CLI and export.

Key rules:

1. No network or filesystem access - the store loads, sinks deliver
2. Functions are pure and never reorder records
3. Return catalog models or composition wrappers only
"""
