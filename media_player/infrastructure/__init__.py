"""
Infrastructure layer - external service integrations.

- storage: Object storage (S3-compatible, MinIO)

These wrappers translate between external formats and our domain models.
"""
