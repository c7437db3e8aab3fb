"""Schema, session factory and repository.

Only this package issues SQL.
"""
