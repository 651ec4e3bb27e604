from enum import StrEnum
from typing import Annotated, Literal, TypeAlias, assert_never

from pydantic import Field, TypeAdapter

from sitqueue.model.base import Model
from sitqueue.model.photo import PhotoPayload


class MutationKind(StrEnum):
    CREATE_RESOURCE = "CreateResource"
    ADD_ATTACHMENT = "AddAttachment"
    REPLACE_ATTACHMENT = "ReplaceAttachment"
    DELETE_ATTACHMENT = "DeleteAttachment"


class BaseRecord(Model):
    """Fields shared by all queued mutations"""

    id: str = Field(min_length=1)
    """unique, creation ordered identifier"""
    actor_id: str = Field(min_length=1)
    """the user who issued the mutation"""
    created_at: int
    """epoch milliseconds"""


class CreateResource(BaseRecord):
    """Create a new sit with its first photo"""

    kind: Literal["CreateResource"] = "CreateResource"
    actor_name: str
    photo: PhotoPayload


class AddAttachment(BaseRecord):
    """Add a photo to an existing sit's collection"""

    kind: Literal["AddAttachment"] = "AddAttachment"
    collection_id: str = Field(min_length=1)
    actor_name: str
    photo: PhotoPayload


class ReplaceAttachment(BaseRecord):
    """Replace an existing photo"""

    kind: Literal["ReplaceAttachment"] = "ReplaceAttachment"
    collection_id: str = Field(min_length=1)
    attachment_id: str = Field(min_length=1)
    actor_name: str
    photo: PhotoPayload


class DeleteAttachment(BaseRecord):
    """Delete a photo"""

    kind: Literal["DeleteAttachment"] = "DeleteAttachment"
    attachment_id: str = Field(min_length=1)


MutationRecord: TypeAlias = Annotated[
    CreateResource | AddAttachment | ReplaceAttachment | DeleteAttachment,
    Field(discriminator="kind"),
]

RecordAdapter: TypeAdapter[MutationRecord] = TypeAdapter(MutationRecord)


def payload_of(record: MutationRecord) -> PhotoPayload | None:
    """Get the photo payload a record carries, if its kind has one"""
    match record:
        case CreateResource() | AddAttachment() | ReplaceAttachment():
            return record.photo
        case DeleteAttachment():
            return None
        case _:
            assert_never(record)


def with_payload_data(record: MutationRecord, data: str) -> MutationRecord:
    """Get a copy of the record with its photo data replaced"""
    match record:
        case CreateResource() | AddAttachment() | ReplaceAttachment():
            return record.model_copy(update={"photo": record.photo.with_data(data)})
        case DeleteAttachment():
            raise ValueError(f"Record `{record.id}` has no payload")
        case _:
            assert_never(record)
