"""Services Layer — operation handlers per role.

Invariants:
    - Handlers split by actor (applicant, officer, manager, enquiry)
    - Every mutating handler returns a result dict; business rejections never raise

Design Decisions:
    - One handler file per actor for locality (ADR: ExMA no god objects)
"""
