"""Record Files — tests for the CSV record source and writer.

Tests cover:
    - A missing data directory reads as zero records
    - save_graph writes one CSV per kind with the column header
    - CSV round-trip: load -> save -> load reproduces the graph
    - Free text with commas, quotes and newlines survives
    - Configured file names are honoured
"""

import csv

from bto.core.domain_types import RecordKind
from bto.core.entities import Enquiry
from bto.core.load_pipeline import load_graph
from bto.core.record_format import COLUMNS
from bto.core.serialize_records import serialize_graph
from bto.infrastructure.record_files import CsvRecordFiles


def test_missing_files_read_empty(tmp_path):
    files = CsvRecordFiles(tmp_path / "nothing-here")
    assert list(files.records(RecordKind.PROJECT)) == []
    graph = load_graph(files)
    assert len(graph.users) == 0


def test_save_writes_headers(tmp_path, graph):
    files = CsvRecordFiles(tmp_path)
    files.save_graph(graph)
    for kind in RecordKind:
        with files.path_for(kind).open(newline="", encoding="utf-8") as f:
            header = next(csv.reader(f))
        assert tuple(header) == COLUMNS[kind]


def test_csv_round_trip(tmp_path, graph):
    graph.enquiries.put("E1", Enquiry(
        id="E1", user_id="U1", project_id="P1",
        message='Is the "2-Room" unit, with balcony,\nstill available?',
    ))
    files = CsvRecordFiles(tmp_path)
    files.save_graph(graph)

    reloaded = load_graph(files)

    assert reloaded.diagnostics == []
    assert serialize_graph(reloaded) == serialize_graph(graph)
    assert reloaded.enquiries.get("E1").message.endswith("balcony,\nstill available?")


def test_records_are_re_readable(tmp_path, graph):
    files = CsvRecordFiles(tmp_path)
    files.save_graph(graph)
    first = list(files.records(RecordKind.APPLICANT))
    assert list(files.records(RecordKind.APPLICANT)) == first
    assert [row["id"] for row in first] == ["U1", "U2", "U3"]


def test_custom_file_names(tmp_path, graph):
    files = CsvRecordFiles(tmp_path, {RecordKind.PROJECT: "bto_projects.csv"})
    files.save_graph(graph)
    assert (tmp_path / "bto_projects.csv").exists()
    assert not (tmp_path / "projects.csv").exists()
    assert (tmp_path / "applicants.csv").exists()


def test_save_leaves_no_temp_files(tmp_path, graph):
    CsvRecordFiles(tmp_path).save_graph(graph)
    assert sorted(p.name for p in tmp_path.iterdir()) == sorted(
        ["applicants.csv", "officers.csv", "managers.csv",
         "projects.csv", "applications.csv", "enquiries.csv"],
    )
