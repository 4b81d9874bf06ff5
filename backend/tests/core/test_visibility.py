"""Visibility Filter — tests for role-scoped views.

Tests cover:
    - Applicants see visible projects with an eligible type, plus their applied project
    - Officers never see prohibited projects, except the one they applied for
    - Managers see every project, and only applications to projects they own
    - Officers see applications and enquiries of joined projects
"""

from bto.core.domain_types import ApplicationKind, FlatType
from bto.core.entities import Enquiry
from bto.core.visibility import (
    applications_for, enquiries_for, handled_projects_for, projects_for,
)


def _ids(entities) -> list[str]:
    return [e.id for e in entities]


def test_single_30_sees_no_projects(graph):
    assert projects_for(graph, graph.users.get("U3")) == []


def test_single_35_sees_projects_with_two_room(graph):
    assert _ids(projects_for(graph, graph.users.get("U1"))) == ["P1", "P2"]
    graph.projects.get("P2").flat_units[FlatType.TWO_ROOM] = 0
    assert _ids(projects_for(graph, graph.users.get("U1"))) == ["P1"]


def test_hidden_project_invisible_unless_applied(graph):
    user = graph.users.get("U2")
    graph.projects.get("P1").visible = False
    assert _ids(projects_for(graph, user)) == ["P2"]
    user.applicant_state.record_application("P1", "A-0001")
    assert _ids(projects_for(graph, user)) == ["P1", "P2"]


def test_officer_never_sees_prohibited(graph):
    officer = graph.users.get("O2")
    officer.officer_state.add_registration("P1", "A-0001")
    assert _ids(projects_for(graph, officer)) == ["P2"]


def test_manager_sees_all_projects(graph):
    graph.projects.get("P2").visible = False
    assert _ids(projects_for(graph, graph.users.get("M1"))) == ["P1", "P2"]


def test_handled_projects(graph):
    assert _ids(handled_projects_for(graph, graph.users.get("M2"))) == ["P2"]
    officer = graph.users.get("O1")
    graph.link_officer(officer, graph.projects.get("P1"))
    assert _ids(handled_projects_for(graph, officer)) == ["P1"]
    assert handled_projects_for(graph, graph.users.get("U1")) == []


def test_application_views(graph):
    a1 = graph.add_application(ApplicationKind.BTO, "U1", "P1", flat_type=FlatType.TWO_ROOM)
    a2 = graph.add_application(ApplicationKind.BTO, "U2", "P2", flat_type=FlatType.TWO_ROOM)
    a3 = graph.add_application(ApplicationKind.REGISTRATION, "O1", "P2")
    officer = graph.users.get("O2")
    graph.link_officer(officer, graph.projects.get("P1"))

    assert _ids(applications_for(graph, graph.users.get("U1"))) == [a1.id]
    assert _ids(applications_for(graph, graph.users.get("M1"))) == [a1.id]
    assert _ids(applications_for(graph, graph.users.get("M2"))) == [a2.id, a3.id]
    assert _ids(applications_for(graph, graph.users.get("O1"))) == [a3.id]
    assert _ids(applications_for(graph, officer)) == [a1.id]


def test_enquiry_views(graph):
    for enquiry in (
        Enquiry(id="E1", user_id="U1", project_id="P1", message="q1"),
        Enquiry(id="E2", user_id="U2", project_id="P2", message="q2"),
        Enquiry(id="E3", user_id="O1", project_id="P2", message="q3"),
    ):
        graph.enquiries.put(enquiry.id, enquiry)
    graph.link_officer(graph.users.get("O1"), graph.projects.get("P1"))

    assert _ids(enquiries_for(graph, graph.users.get("U1"))) == ["E1"]
    assert _ids(enquiries_for(graph, graph.users.get("O1"))) == ["E1", "E3"]
    assert _ids(enquiries_for(graph, graph.users.get("M2"))) == ["E1", "E2", "E3"]
