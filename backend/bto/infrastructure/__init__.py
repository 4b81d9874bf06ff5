"""Infrastructure Layer — record files and cross-cutting concerns.

Invariants:
    - Infrastructure never holds business rules
    - File IO confined to record_files.py

Design Decisions:
    - CSV on disk is the only persistence (whole-file rewrite, no transactions)
"""
