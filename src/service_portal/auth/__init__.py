"""
service_portal.auth

Authentication/authorization package.

Responsibilities:
- Resolve the caller's identity through the external identity provider.
- Keep the identity cache fresh on every authenticated request.
- Pure group-based authorization checks.
"""

# Package marker.
