"""
service_portal.storage

Blob storage and image ingestion.
"""
