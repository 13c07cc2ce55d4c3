"""Pydantic Schemas - request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (request bodies, JSON responses)
    - Domain enums from core/ used for category and status fields
"""
