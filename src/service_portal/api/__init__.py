"""
service_portal.api

API package for the Service Portal.

Responsibilities:
- FastAPI app factory and router modules.
- API-layer dependency wiring, error rendering and request/response models.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The API layer stays thin: request parsing + identity + delegation to services.
