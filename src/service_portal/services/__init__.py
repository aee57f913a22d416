"""
service_portal.services

Service layer.

Responsibilities:
- Compose the authorization policy, record store and image pipeline per
  resource family. Routers call these and nothing below them.
"""

# Package marker.
