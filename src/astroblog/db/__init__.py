"""
astroblog.db

Persistence package.

Responsibilities:
- ORM models, engine/session helpers, and repositories for blog content.
"""

# Package marker.
