"""
Pydantic schema definitions for API payloads.

Schemas are separated from store records to decouple the API
representation from persistence.
"""
