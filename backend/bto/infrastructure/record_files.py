"""Record Files — CSV record source and whole-file record writer.

Invariants:
    - One CSV file per record kind, header row = record_format.COLUMNS[kind]
    - A missing file reads as zero records (fresh data directory)
    - records() re-opens the file on every call: Phase 2 re-reads what Phase 1 read
    - write() replaces the whole file via a temp file + os.replace (no partial files)

Design Decisions:
    - csv.DictReader/DictWriter: quoting of commas/newlines in enquiry text handled
      by the csv module, not by hand
    - OSError mapped to RecordFileError so the API error handler can render it
"""

import csv
import logging
import os
import tempfile
from collections.abc import Iterable
from pathlib import Path

from bto.core.domain_types import RecordKind
from bto.core.errors import BtoError, ErrorCategory, ErrorSeverity
from bto.core.housing_graph import HousingGraph
from bto.core.record_format import COLUMNS
from bto.core.serialize_records import write_graph

logger = logging.getLogger(__name__)

DEFAULT_FILE_NAMES: dict[RecordKind, str] = {
    RecordKind.APPLICANT: "applicants.csv",
    RecordKind.OFFICER: "officers.csv",
    RecordKind.MANAGER: "managers.csv",
    RecordKind.PROJECT: "projects.csv",
    RecordKind.APPLICATION: "applications.csv",
    RecordKind.ENQUIRY: "enquiries.csv",
}


class RecordFileError(BtoError):
    """Reading or writing a record file failed."""
    def __init__(self, message: str, operation: str):
        super().__init__(
            f"Record file {operation} failed: {message}",
            "RECORD_FILE_ERROR", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, None, 503,
        )
        self.operation = operation


class CsvRecordFiles:
    """RecordSource + RecordSink over a directory of CSV files."""

    def __init__(self, data_dir: str | Path, file_names: dict[RecordKind, str] | None = None):
        self.data_dir = Path(data_dir)
        self.file_names = {**DEFAULT_FILE_NAMES, **(file_names or {})}

    def path_for(self, kind: RecordKind) -> Path:
        return self.data_dir / self.file_names[kind]

    def records(self, kind: RecordKind) -> Iterable[dict[str, str]]:
        path = self.path_for(kind)
        if not path.exists():
            logger.info(f"No {kind.value} file at {path}; reading zero records")
            return []
        try:
            with path.open(newline="", encoding="utf-8") as f:
                return [dict(row) for row in csv.DictReader(f)]
        except (OSError, csv.Error) as e:
            raise RecordFileError(str(e), f"read {path.name}")

    def write(self, kind: RecordKind, rows: list[dict[str, str]]) -> None:
        path = self.path_for(kind)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.data_dir, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", newline="", encoding="utf-8") as f:
                writer = csv.DictWriter(f, fieldnames=COLUMNS[kind])
                writer.writeheader()
                writer.writerows(rows)
            os.replace(tmp_name, path)
        except OSError as e:
            Path(tmp_name).unlink(missing_ok=True)
            raise RecordFileError(str(e), f"write {path.name}")

    def save_graph(self, graph: HousingGraph) -> None:
        """Rewrite every record file from the graph."""
        write_graph(graph, self)
        logger.info(f"Saved records to {self.data_dir}")
