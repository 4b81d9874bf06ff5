"""Core Layer — entity graph, load pipeline, rules and state machines.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/ or schemas/
    - No IO: records arrive as plain dicts through the RecordSource protocol

Design Decisions:
    - Functional core separated from imperative shell (ADR: ExMA impureim sandwich)
"""
