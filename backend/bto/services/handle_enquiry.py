"""Enquiry Handlers — submit, edit, delete and reply.

Invariants:
    - Any user may file an enquiry on a project they can see
    - Only the filer edits or deletes, and only before a reply exists
    - Only an official of the project (owning manager or joined officer) replies

Design Decisions:
    - "Can see" reuses visibility.projects_for so the enquiry rules never
      drift from the project listing
"""

import logging

from bto.core.enforce_operations import check_project_official, validate_enquiry_change
from bto.core.domain_types import ID_PREFIXES, RecordKind
from bto.core.entities import Enquiry
from bto.core.housing_graph import HousingGraph
from bto.core.results import ok, rejected
from bto.core.visibility import handled_projects_for, projects_for
from bto.services.lookup_helpers import find_enquiry, find_project, find_user

logger = logging.getLogger(__name__)


class EnquiryHandlers:
    """Enquiry lifecycle over the shared graph."""

    def __init__(self, graph: HousingGraph):
        self.graph = graph

    def submit(self, user_id: str, project_id: str, message: str) -> dict:
        user, error = find_user(self.graph, user_id)
        if error:
            return error
        project, error = find_project(self.graph, project_id)
        if error:
            return error
        reachable = projects_for(self.graph, user) + handled_projects_for(self.graph, user)
        if project not in reachable:
            return rejected("PROJECT_NOT_VISIBLE", f"Project {project_id} is not visible to you.")

        enquiry = Enquiry(
            id=self.graph.enquiries.next_id(ID_PREFIXES[RecordKind.ENQUIRY]),
            user_id=user.id, project_id=project.id, message=message,
        )
        self.graph.enquiries.put(enquiry.id, enquiry)
        logger.info(f"Enquiry {enquiry.id} filed", extra={"user_id": user.id, "project_id": project.id})
        return ok(enquiry_id=enquiry.id)

    def edit(self, user_id: str, enquiry_id: str, message: str) -> dict:
        user, enquiry, error = self._lookup(user_id, enquiry_id)
        error = error or validate_enquiry_change(user, enquiry)
        if error:
            return error
        enquiry.message = message
        return ok(enquiry_id=enquiry.id)

    def delete(self, user_id: str, enquiry_id: str) -> dict:
        user, enquiry, error = self._lookup(user_id, enquiry_id)
        error = error or validate_enquiry_change(user, enquiry)
        if error:
            return error
        self.graph.enquiries.remove(enquiry.id)
        return ok(enquiry_id=enquiry.id)

    def reply(self, official_id: str, enquiry_id: str, reply: str) -> dict:
        official, enquiry, error = self._lookup(official_id, enquiry_id)
        if error:
            return error
        project = self.graph.projects.get(enquiry.project_id)
        error = check_project_official(official, project)
        if error:
            return error
        enquiry.reply = reply
        enquiry.replied_by = official.id
        logger.info(f"Enquiry {enquiry.id} answered", extra={"user_id": official.id})
        return ok(enquiry_id=enquiry.id)

    def _lookup(self, user_id: str, enquiry_id: str):
        user, error = find_user(self.graph, user_id)
        if error:
            return None, None, error
        enquiry, error = find_enquiry(self.graph, enquiry_id)
        return user, enquiry, error
