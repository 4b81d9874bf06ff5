"""Enquiry Routes — list, file, edit, delete, reply."""

from fastapi import APIRouter, Depends, Request, status

from bto.api.dependencies import commit, current_user, get_graph
from bto.core.entities import User
from bto.core.housing_graph import HousingGraph
from bto.core.visibility import enquiries_for
from bto.schemas.requests import EnquiryCreate, EnquiryEdit, EnquiryReply
from bto.schemas.views import EnquiryView
from bto.services.handle_enquiry import EnquiryHandlers

router = APIRouter(prefix="/api/v1/enquiries", tags=["enquiries"])


@router.get("", response_model=list[EnquiryView])
async def list_enquiries(
    user: User = Depends(current_user), graph: HousingGraph = Depends(get_graph),
):
    return [EnquiryView.from_entity(e) for e in enquiries_for(graph, user)]


@router.post("", status_code=status.HTTP_201_CREATED)
async def submit_enquiry(
    body: EnquiryCreate, request: Request,
    user: User = Depends(current_user), graph: HousingGraph = Depends(get_graph),
):
    return commit(request, EnquiryHandlers(graph).submit(user.id, body.project_id, body.message))


@router.patch("/{enquiry_id}")
async def edit_enquiry(
    enquiry_id: str, body: EnquiryEdit, request: Request,
    user: User = Depends(current_user), graph: HousingGraph = Depends(get_graph),
):
    return commit(request, EnquiryHandlers(graph).edit(user.id, enquiry_id, body.message))


@router.delete("/{enquiry_id}")
async def delete_enquiry(
    enquiry_id: str, request: Request,
    user: User = Depends(current_user), graph: HousingGraph = Depends(get_graph),
):
    return commit(request, EnquiryHandlers(graph).delete(user.id, enquiry_id))


@router.post("/{enquiry_id}/reply")
async def reply_enquiry(
    enquiry_id: str, body: EnquiryReply, request: Request,
    user: User = Depends(current_user), graph: HousingGraph = Depends(get_graph),
):
    return commit(request, EnquiryHandlers(graph).reply(user.id, enquiry_id, body.reply))
