"""
astroblog.observability

structlog setup and the middleware that stamps each request's log lines with
its request id.
"""
