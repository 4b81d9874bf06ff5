"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell: dependency arrows point inward only
    - A RecordSource enumeration is restartable: Phase 2 re-reads what Phase 1 read
    - Records are plain dicts of column -> raw string

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy (ADR: ExMA anti-pattern)
    - Sync, not async: the loader is a single pass at startup with no suspension points
"""

from collections.abc import Iterable
from typing import Protocol

from bto.core.domain_types import RecordKind


class RecordSource(Protocol):
    """Contract for the flat-record collaborator: implemented by the shell."""
    def records(self, kind: RecordKind) -> Iterable[dict[str, str]]: ...


class RecordSink(Protocol):
    """Contract for whole-file write-back: implemented by the shell."""
    def write(self, kind: RecordKind, rows: list[dict[str, str]]) -> None: ...


class InMemoryRecordSource:
    """RecordSource over already-parsed rows (tests, fixtures, imports)."""

    def __init__(self, rows: dict[RecordKind, list[dict[str, str]]] | None = None):
        self._rows = rows or {}

    def records(self, kind: RecordKind) -> Iterable[dict[str, str]]:
        return list(self._rows.get(kind, []))
