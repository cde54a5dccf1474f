"""
Feed domain service - Users eligible to be shown to a viewer.

A user never sees themselves, nor anyone they share a connection with
in either direction, whatever its status. Once any decision has been
recorded between two users, neither reappears in the other's feed.
"""

from dataclasses import dataclass
from uuid import UUID

from .exceptions import NotFound
from .models import User
from .ports import ConnectionRepository, UserRepository

DEFAULT_PAGE = 1
MAX_FEED_LIMIT = 5


@dataclass
class FeedService:
    """Domain service computing a viewer's paginated feed."""

    users: UserRepository
    connections: ConnectionRepository
    max_limit: int = MAX_FEED_LIMIT

    def get_feed(self, caller_id: UUID, page: int = DEFAULT_PAGE, limit: int | None = None) -> list[User]:
        """
        Return one page of the caller's feed.

        Pagination is clamped rather than rejected: page < 1 reads as 1,
        limit is held between 1 and max_limit, and a missing limit means
        max_limit. A page that starts past the last stored user is empty
        and never reaches list_excluding, whatever the page number.

        Raises:
            NotFound: If the caller does not exist
        """
        page, limit = self.paginate(page, limit)

        if self.users.get(caller_id) is None:
            raise NotFound("User not found")

        offset = (page - 1) * limit
        if offset >= self.users.count():
            return []

        excluded = self.exclusion_set(caller_id)
        return self.users.list_excluding(excluded, offset=offset, limit=limit)

    def exclusion_set(self, caller_id: UUID) -> set[UUID]:
        """Caller plus both ends of every connection involving the caller."""
        excluded = {caller_id}
        for connection in self.connections.list_involving(caller_id):
            excluded.add(connection.from_user_id)
            excluded.add(connection.to_user_id)
        return excluded

    def paginate(self, page: int, limit: int | None) -> tuple[int, int]:
        if limit is None:
            limit = self.max_limit
        return max(page, 1), min(max(limit, 1), self.max_limit)
