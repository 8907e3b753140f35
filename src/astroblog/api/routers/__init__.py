"""
astroblog.api.routers

Router modules mounted by `astroblog.api.app.create_app`.
"""
