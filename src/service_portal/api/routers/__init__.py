"""
service_portal.api.routers

One router per resource family, plus health and dev helpers.
"""
