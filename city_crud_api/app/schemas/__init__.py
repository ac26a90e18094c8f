"""
Pydantic schema definitions for API payloads.

Schemas are separated from the store's record type to decouple the API
representation from persistence.
"""
