"""Link service — owner-scoped CRUD plus the public click counter.

Every owner operation puts user_id into the WHERE clause of the one
statement that reads or writes the row, so a link belonging to someone
else behaves exactly like a link that does not exist.
"""

from urllib.parse import urlparse

import structlog
from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from linkbio.db.models import Link
from linkbio.errors import BadRequestError, NotFoundError

logger = structlog.get_logger()


class LinkNotFoundError(NotFoundError):
    message = "Link not found"


WEB_SCHEMES = ("http", "https")
# Contact links carry their target in the path: mailto:a@x.com, tel:+15551234
CONTACT_SCHEMES = ("mailto", "tel")


def _check_url(url: str) -> None:
    parsed = urlparse(url)
    scheme = parsed.scheme.lower()
    if scheme in WEB_SCHEMES and parsed.netloc:
        return
    if scheme in CONTACT_SCHEMES and parsed.path:
        return
    raise BadRequestError(
        "URL must be an http(s) address or a mailto: or tel: link"
    )


class LinkService:
    """Business logic for a user's links."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_link(
        self,
        user_id: int,
        title: str | None,
        url: str | None,
        order: int | None = None,
    ) -> Link:
        if not title or not url:
            raise BadRequestError("Title and URL are required")
        _check_url(url)

        link = Link(user_id=user_id, title=title, url=url, order=order or 0)
        self.db.add(link)
        await self.db.commit()
        await self.db.refresh(link)
        logger.info("links.created", user_id=user_id, link_id=link.id)
        return link

    async def list_links(self, user_id: int) -> list[Link]:
        """All links of one user, by display order then age."""
        result = await self.db.execute(
            select(Link)
            .where(Link.user_id == user_id)
            .order_by(Link.order.asc(), Link.created_at.asc(), Link.id.asc())
        )
        return list(result.scalars().all())

    async def update_link(
        self,
        link_id: int,
        user_id: int,
        title: str | None = None,
        url: str | None = None,
        order: int | None = None,
    ) -> Link:
        """Change the supplied fields and leave the rest untouched."""
        values: dict = {}
        if title:
            values["title"] = title
        if url:
            _check_url(url)
            values["url"] = url
        if order is not None:
            values["order"] = order
        if not values:
            raise BadRequestError(
                "At least one of title, url or order is required"
            )

        result = await self.db.execute(
            update(Link)
            .where(Link.id == link_id, Link.user_id == user_id)
            .values(**values)
            .returning(Link)
        )
        link = result.scalars().first()
        if link is None:
            await self.db.rollback()
            raise LinkNotFoundError()

        await self.db.commit()
        logger.info(
            "links.updated", user_id=user_id, link_id=link_id, fields=sorted(values)
        )
        return link

    async def delete_link(self, link_id: int, user_id: int) -> None:
        result = await self.db.execute(
            delete(Link)
            .where(Link.id == link_id, Link.user_id == user_id)
            .returning(Link.id)
            .execution_options(synchronize_session=False)
        )
        if result.scalar_one_or_none() is None:
            await self.db.rollback()
            raise LinkNotFoundError()

        await self.db.commit()
        logger.info("links.deleted", user_id=user_id, link_id=link_id)

    async def register_click(self, link_id: int) -> str:
        """Bump the click counter and return the target URL.

        Single UPDATE ... RETURNING so concurrent clicks never lose an
        increment.
        """
        result = await self.db.execute(
            update(Link)
            .where(Link.id == link_id)
            .values(click_count=Link.click_count + 1)
            .returning(Link.url)
            .execution_options(synchronize_session=False)
        )
        url = result.scalar_one_or_none()
        if url is None:
            await self.db.rollback()
            raise LinkNotFoundError()

        await self.db.commit()
        return url
