"""
astroblog

Top-level package for the AstroBlog content API.

Responsibilities:
- Expose package version metadata.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"


# --- Module Notes -----------------------------------------------------------
# Keep this file minimal; importing `astroblog` must not configure logging or touch the DB.
