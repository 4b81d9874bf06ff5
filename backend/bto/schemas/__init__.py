"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (user input, API responses)
    - Domain enums from core/ used for enum fields

Design Decisions:
    - Separate from core entities: schemas are API contracts, entities are the graph
"""
