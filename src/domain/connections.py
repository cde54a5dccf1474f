"""
Connection domain service - Swipe and review lifecycle.

A swipe creates a directed connection from the caller to another user
with status INTERESTED or IGNORED. Only the recipient of an INTERESTED
connection may review it, moving it to ACCEPTED or REJECTED. Every other
state is terminal.

Uniqueness: at most one connection exists per unordered pair of users.
The service checks both directions before inserting, and the repository
enforces the same rule at write time for concurrent swipes.
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from .exceptions import Conflict, Forbidden, InvalidArgument, InvalidState, NotFound
from .models import (
    REVIEW_STATUSES,
    SWIPE_STATUSES,
    Connection,
    ConnectionStatus,
    User,
    parse_status,
)
from .ports import ConnectionRepository, UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SwipeResult:
    """Outcome of a successful swipe."""

    connection: Connection
    message: str


@dataclass(frozen=True)
class ReceivedRequest:
    """A pending request together with the user who sent it."""

    connection: Connection
    sender: User


@dataclass
class ConnectionService:
    """
    Domain service for connection requests.

    Orchestrates swipe/review validation against the identity and
    relationship stores.
    """

    users: UserRepository
    connections: ConnectionRepository

    def swipe(self, caller_id: UUID, target_id: UUID, status: str) -> SwipeResult:
        """
        Record the caller's decision about another user.

        Args:
            caller_id: Authenticated user making the choice
            target_id: User being swiped on
            status: "interested" or "ignored"

        Returns:
            SwipeResult with the created connection and a summary message

        Raises:
            InvalidArgument: Bad status or caller swiping on themselves
            NotFound: Caller or target does not exist
            Conflict: A connection already exists between the two users
        """
        chosen = parse_status(status, SWIPE_STATUSES)

        if caller_id == target_id:
            raise InvalidArgument("Cannot choose yourself")

        caller = self.users.get(caller_id)
        target = self.users.get(target_id)
        if caller is None or target is None:
            raise NotFound("User not found")

        if self.connections.find_between(caller_id, target_id) is not None:
            raise Conflict("You have already made a choice for this user")

        connection = self.connections.add(caller_id, target_id, chosen)
        if connection is None:
            # Lost a race against a concurrent swipe on the same pair
            raise Conflict("You have already made a choice for this user")

        logger.info("Swipe recorded: %s -> %s (%s)", caller_id, target_id, chosen.value)
        return SwipeResult(
            connection=connection,
            message=f"{caller.first_name} is {chosen.value} in {target.first_name}",
        )

    def review(self, caller_id: UUID, request_id: UUID, status: str) -> Connection:
        """
        Accept or reject a pending request sent to the caller.

        Raises:
            InvalidArgument: Bad status
            NotFound: No connection with that id
            Forbidden: Caller is not the recipient
            InvalidState: Connection is not INTERESTED
        """
        decision = parse_status(status, REVIEW_STATUSES)

        connection = self.connections.get(request_id)
        if connection is None:
            raise NotFound("Connection not found")

        if connection.to_user_id != caller_id:
            raise Forbidden("You are not authorized to review this connection")

        if connection.status != ConnectionStatus.INTERESTED:
            raise InvalidState("You can only review connections in 'interested' status")

        updated = self.connections.transition(request_id, ConnectionStatus.INTERESTED, decision)
        if updated is None:
            raise InvalidState("You can only review connections in 'interested' status")

        logger.info("Connection %s %s by %s", request_id, decision.value, caller_id)
        return updated

    def received_requests(self, caller_id: UUID) -> list[ReceivedRequest]:
        """List pending requests sent to the caller, with each sender's profile."""
        self._require_user(caller_id)

        pending = self.connections.list_received(caller_id, ConnectionStatus.INTERESTED)
        senders = self.users.get_many(c.from_user_id for c in pending)
        return [
            ReceivedRequest(connection=c, sender=senders[c.from_user_id])
            for c in pending
            if c.from_user_id in senders
        ]

    def my_connections(self, caller_id: UUID) -> list[User]:
        """List the counterparts of every accepted connection of the caller."""
        self._require_user(caller_id)

        accepted = self.connections.list_with_status(caller_id, ConnectionStatus.ACCEPTED)
        counterpart_ids = [c.counterpart(caller_id) for c in accepted]
        counterparts = self.users.get_many(counterpart_ids)
        return [counterparts[uid] for uid in counterpart_ids if uid in counterparts]

    def _require_user(self, user_id: UUID) -> User:
        user = self.users.get(user_id)
        if user is None:
            raise NotFound("User not found")
        return user
