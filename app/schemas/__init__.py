"""
schemas/ — Pydantic request/response models

Provides payload parsing, auto-generated OpenAPI docs, and the
shared error response shape.
"""
