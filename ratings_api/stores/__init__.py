"""Data stores for persistence.

Stores handle:
- PostgreSQL: DB session, ORM operations

No business/authorization logic in stores - that belongs in services.
"""
