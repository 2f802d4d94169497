"""GUID generation and brace-wrapped rendering."""

import uuid


def new_guid() -> uuid.UUID:
    return uuid.uuid4()


def format_guid(value: uuid.UUID | str | None = None) -> str:
    if value is None:
        value = new_guid()
    elif not isinstance(value, uuid.UUID):
        value = uuid.UUID(str(value).strip())

    return "{" + str(value) + "}"
