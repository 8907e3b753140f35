"""
astroblog.db.repositories

Repository package.

Responsibilities:
- Group data-access repositories for posts, tags, comments and audit events.
"""

# Package marker; repositories are imported directly from submodules.


# --- Module Notes -----------------------------------------------------------
# Repositories flush but never commit; the request handler owns the transaction.
