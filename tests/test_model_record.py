import pytest
from pydantic import ValidationError

from sitqueue.model import (
    AddAttachment,
    CreateResource,
    DeleteAttachment,
    MutationKind,
    QueueDocument,
    RecordAdapter,
    ReplaceAttachment,
    payload_of,
    with_payload_data,
)

from tests.shared import JANE, PHOTO

CREATE = {
    "id": "pending_1700000000000_abc1234",
    "kind": "CreateResource",
    "actorId": JANE,
    "actorName": "Jane",
    "createdAt": 1700000000000,
    "photo": {"data": "file:pending_1700000000000_abc1234", "width": 4, "height": 3},
}


def test_model_record_discriminated():
    record = RecordAdapter.validate_python(CREATE)
    assert isinstance(record, CreateResource)
    assert record.kind == MutationKind.CREATE_RESOURCE
    assert record.actor_id == JANE
    assert record.photo.width == 4

    record = RecordAdapter.validate_python(
        {
            "id": "pending_1_a",
            "kind": "DeleteAttachment",
            "actorId": JANE,
            "createdAt": 1,
            "attachmentId": "att_1",
        }
    )
    assert isinstance(record, DeleteAttachment)

    # snake case accepted as well
    record = RecordAdapter.validate_python(
        {
            "id": "pending_1_a",
            "kind": "AddAttachment",
            "actor_id": JANE,
            "actor_name": "Jane",
            "created_at": 1,
            "collection_id": "col_1",
            "photo": PHOTO.model_dump(),
        }
    )
    assert isinstance(record, AddAttachment)

    with pytest.raises(ValidationError):
        RecordAdapter.validate_python({**CREATE, "kind": "UpdateSit"})
    with pytest.raises(ValidationError):
        RecordAdapter.validate_python({**CREATE, "photo": None})
    with pytest.raises(ValidationError):
        RecordAdapter.validate_python({**CREATE, "actorId": ""})


def test_model_record_serialize():
    record = RecordAdapter.validate_python(CREATE)
    data = RecordAdapter.dump_python(record, by_alias=True)
    assert data == CREATE

    doc = QueueDocument(records=[record])
    assert doc.model_dump(by_alias=True) == {"version": 1, "records": [CREATE]}


def test_model_record_payload():
    record = RecordAdapter.validate_python(CREATE)
    assert payload_of(record) == record.photo
    updated = with_payload_data(record, "data:image/jpeg;base64,abc")
    assert updated.photo.data == "data:image/jpeg;base64,abc"
    assert updated.photo.width == record.photo.width
    # records are immutable
    assert record.photo.data == CREATE["photo"]["data"]
    with pytest.raises(ValidationError):
        record.actor_name = "John"

    replace = ReplaceAttachment(
        id="pending_1_a",
        actor_id=JANE,
        created_at=1,
        collection_id="col_1",
        attachment_id="att_1",
        actor_name="Jane",
        photo=PHOTO,
    )
    assert payload_of(replace) == PHOTO

    delete = DeleteAttachment(
        id="pending_1_b", actor_id=JANE, created_at=1, attachment_id="att_1"
    )
    assert payload_of(delete) is None
    with pytest.raises(ValueError):
        with_payload_data(delete, "foo")
