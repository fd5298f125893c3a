"""Link API routes (owner only).

Mounted under /api/v1 with get_current_user applied at include time.
Handlers read the caller's id from the same dependency and pass it to
the service; the request body never decides ownership.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from linkbio.auth.dependencies import get_current_user
from linkbio.auth.jwt import CurrentIdentity
from linkbio.db.engine import get_db
from linkbio.schemas.link import (
    LinkCreate,
    LinkEnvelope,
    LinkRead,
    LinkUpdate,
    MessageResponse,
)
from linkbio.services.link_service import LinkService

router = APIRouter(prefix="/links")


def _svc(db: AsyncSession = Depends(get_db)) -> LinkService:
    return LinkService(db)


@router.post("", response_model=LinkEnvelope, status_code=201)
async def create_link(
    body: LinkCreate,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: LinkService = Depends(_svc),
):
    link = await svc.create_link(
        user_id=identity.user_id,
        title=body.title,
        url=body.url,
        order=body.order,
    )
    return LinkEnvelope(message="Link created", link=LinkRead.model_validate(link))


@router.get("", response_model=list[LinkRead])
async def list_links(
    identity: CurrentIdentity = Depends(get_current_user),
    svc: LinkService = Depends(_svc),
):
    """The caller's links ordered by `order`, then creation time."""
    return await svc.list_links(identity.user_id)


@router.put("/{link_id}", response_model=LinkEnvelope)
async def update_link(
    link_id: int,
    body: LinkUpdate,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: LinkService = Depends(_svc),
):
    """Partial update: omitted fields keep their current values."""
    link = await svc.update_link(
        link_id=link_id,
        user_id=identity.user_id,
        title=body.title,
        url=body.url,
        order=body.order,
    )
    return LinkEnvelope(message="Link updated", link=LinkRead.model_validate(link))


@router.delete("/{link_id}", response_model=MessageResponse)
async def delete_link(
    link_id: int,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: LinkService = Depends(_svc),
):
    await svc.delete_link(link_id=link_id, user_id=identity.user_id)
    return MessageResponse(message="Link deleted")
