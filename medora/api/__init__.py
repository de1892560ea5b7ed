"""
HTTP layer: authentication, request dependencies and routers.
"""
