"""Public routes — click redirect and profile page. No auth.

The profile route is a catch-all on the first path segment, so this
router must be mounted last.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from linkbio.db.engine import get_db
from linkbio.errors import NotFoundError
from linkbio.schemas.link import PublicLink, PublicProfile
from linkbio.services.link_service import LinkService
from linkbio.services.user_service import UserService

router = APIRouter()


@router.get("/click/{link_id}", status_code=301, response_class=RedirectResponse)
async def follow_link(link_id: int, db: AsyncSession = Depends(get_db)):
    """Count the click and send the visitor to the link target."""
    url = await LinkService(db).register_click(link_id)
    return RedirectResponse(url=url, status_code=301)


@router.get("/{username}", response_model=PublicProfile)
async def get_profile(username: str, db: AsyncSession = Depends(get_db)):
    """A user's public page: name, picture and links (no owner ids)."""
    user = await UserService(db).get_by_username(username)
    if user is None:
        raise NotFoundError("User not found")

    links = await LinkService(db).list_links(user.id)
    return PublicProfile(
        username=user.username,
        profile_picture_url=user.profile_picture_url,
        links=[PublicLink.model_validate(link) for link in links],
    )
