"""
Models

This package defines the in-memory data structures used by the resolver service. Nothing here is persisted;
every request is resolved independently.

Key Models:
- resolution.py: ResolutionResult, the uniform response shape for both address and name lookups
- health.py: Health monitoring gauge backing the readiness probe

ResolutionResult serializes to the JSON shape clients consume:

    {"address": ..., "name": ..., "displayName": ..., "avatar": ..., "error": ...}

where ``error`` only appears when the upstream provider failed.
"""
