"""Record mutators and the toggle engine.

Each mutator validates input, consults the Policy Gate and writes through
the repository.
- Forbidden: HTTP concerns, storage access
"""
