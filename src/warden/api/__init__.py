"""API module for Warden.

The api layer:
- Validates request bodies and renders response envelopes
- Forbidden: SQL, storage paths, authorization decisions
"""
