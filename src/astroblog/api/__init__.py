"""
astroblog.api

HTTP surface of astroblog.

Responsibilities:
- FastAPI app factory and router modules.
- Response envelope, error translation and request-scoped dependencies.
"""


# --- Module Notes -----------------------------------------------------------
# Routers stay thin: validate, authorize through `astroblog.auth`, delegate to repositories.
