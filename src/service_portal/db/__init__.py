"""
service_portal.db

Persistence package (SQLAlchemy async).

Responsibilities:
- Provide ORM models, engine/session setup, the record store and repositories.
"""

# Package marker.
