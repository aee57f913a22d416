"""
service_portal.db.repositories

Repository package.

Responsibilities:
- Group data-access repositories, one per record family.
"""

# Package marker; repositories are imported directly from submodules.


# --- Module Notes -----------------------------------------------------------
# Repositories only flush. Commit/rollback and locking belong to `db.store`.
