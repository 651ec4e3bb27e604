"""
Duplicate submission policy.

Pure decision functions without I/O: the caller passes in what it knows about
the pending queue (`MutationQueue.list()`) and the remote state, and checks
the answer *before* enqueueing. The queue itself never rejects an enqueue on
policy grounds.
"""

from typing import Iterable, Sequence

from sitqueue.core.conventions import ids
from sitqueue.exceptions import InvalidLocationError, NotAuthenticatedError
from sitqueue.helpers.geo import distance_in_feet
from sitqueue.model import (
    AddAttachment,
    Attachment,
    Location,
    MutationRecord,
    ReplaceAttachment,
    Sit,
)

DEFAULT_ALLOWANCE = 1
"""Pending AddAttachment records tolerated per collection and actor"""

DEFAULT_PROXIMITY_FEET = 100.0


def ensure_actor(actor_id: str | None) -> str:
    """
    Raises:
        NotAuthenticatedError: If there is no actor identity
    """
    if not actor_id:
        raise NotAuthenticatedError()
    return actor_id


def count_pending_additions(
    pending: Iterable[MutationRecord], collection_id: str, actor_id: str
) -> int:
    return sum(
        1
        for record in pending
        if isinstance(record, AddAttachment)
        and record.collection_id == collection_id
        and record.actor_id == actor_id
    )


def can_add_attachment(
    collection_id: str,
    actor_id: str,
    pending: Iterable[MutationRecord] = (),
    existing: Sequence[Attachment] | None = None,
    allowance: int = DEFAULT_ALLOWANCE,
) -> bool:
    """
    Check if the actor may add a photo to the given collection.

    Not allowed if the actor already has a remote attachment there (when
    `existing` is known), or if more than `allowance` AddAttachment records
    of the actor for that collection are pending already. With the default
    allowance a second pending submission is tolerated, a third is not.

    Args:
        collection_id: The sit's attachment collection
        actor_id: The user adding the photo
        pending: The current queue contents
        existing: Remote attachments of the collection, if known
        allowance: Tolerated number of pending additions

    Raises:
        NotAuthenticatedError: If there is no actor
    """
    ensure_actor(actor_id)
    if existing is not None:
        if any(attachment.actor_id == actor_id for attachment in existing):
            return False
    return count_pending_additions(pending, collection_id, actor_id) <= allowance


def can_replace_attachment(
    attachment_id: str,
    actor_id: str,
    is_known_owner: bool | None = None,
    pending: Iterable[MutationRecord] = (),
) -> bool:
    """
    Check if the actor may replace the given photo.

    Local-only attachments (`temp_` ids) can always be replaced. Otherwise the
    known ownership decides, then the owner of a pending replacement of the
    same attachment. Without any ownership information this is permissive.

    Raises:
        NotAuthenticatedError: If there is no actor
    """
    ensure_actor(actor_id)
    if ids.is_local(attachment_id):
        return True
    if is_known_owner is not None:
        return is_known_owner
    for record in pending:
        if (
            isinstance(record, ReplaceAttachment)
            and record.attachment_id == attachment_id
        ):
            return record.actor_id == actor_id
    return True


def can_create_at(
    location: Location | None,
    actor_id: str,
    nearby: Sequence[Sit] | None = None,
    threshold_feet: float = DEFAULT_PROXIMITY_FEET,
) -> bool:
    """
    Check if a new sit can be created at the location: no known sit may be
    within `threshold_feet`. Any signed in actor gets the same answer.

    Raises:
        NotAuthenticatedError: If there is no actor
        InvalidLocationError: If there is no location
    """
    ensure_actor(actor_id)
    if location is None:
        raise InvalidLocationError()
    for sit in nearby or ():
        if distance_in_feet(location, sit.location) <= threshold_feet:
            return False
    return True


class DedupGuard:
    """
    The checks above bound to configured limits, see
    `sitqueue.factories.make_guard`
    """

    def __init__(
        self,
        allowance: int = DEFAULT_ALLOWANCE,
        proximity_feet: float = DEFAULT_PROXIMITY_FEET,
    ) -> None:
        self.allowance = allowance
        self.proximity_feet = proximity_feet

    def can_add_attachment(
        self,
        collection_id: str,
        actor_id: str,
        pending: Iterable[MutationRecord] = (),
        existing: Sequence[Attachment] | None = None,
    ) -> bool:
        return can_add_attachment(
            collection_id, actor_id, pending, existing, allowance=self.allowance
        )

    def can_replace_attachment(
        self,
        attachment_id: str,
        actor_id: str,
        is_known_owner: bool | None = None,
        pending: Iterable[MutationRecord] = (),
    ) -> bool:
        return can_replace_attachment(attachment_id, actor_id, is_known_owner, pending)

    def can_create_at(
        self,
        location: Location | None,
        actor_id: str,
        nearby: Sequence[Sit] | None = None,
    ) -> bool:
        return can_create_at(
            location, actor_id, nearby, threshold_feet=self.proximity_feet
        )

    def __repr__(self) -> str:
        return (
            f"<{self.__class__.__name__}(allowance={self.allowance}, "
            f"proximity_feet={self.proximity_feet})>"
        )
