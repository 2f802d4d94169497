"""Pydantic models for measures, providers and generated documents."""

import re
import uuid

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Characters outside the XML 1.0 Char production.
INVALID_XML_CHARS = re.compile("[^\t\n\r\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")


def check_xml_text(value: str) -> str:
    match = INVALID_XML_CHARS.search(value)
    if match:
        raise ValueError(f"character {match.group()!r} at position {match.start()} is not allowed in XML")
    return value


class Measure(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)

    name: str = Field(alias="Name")
    start: str = Field(alias="Start")
    stop: str = Field(alias="Stop")

    @field_validator("name", "start", "stop")
    @classmethod
    def _xml_text(cls, value: str) -> str:
        return check_xml_text(value)


class Provider(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)

    name: str = Field(alias="Name", min_length=1)
    provider: uuid.UUID = Field(alias="Provider")
    id: int = Field(alias="Id", ge=0)
    version: int = Field(alias="Version", ge=0)
    field_name: str = Field(alias="FieldName", min_length=1)

    @field_validator("name", "field_name")
    @classmethod
    def _xml_text(cls, value: str) -> str:
        return check_xml_text(value)

    @field_validator("provider", mode="before")
    @classmethod
    def _strip_braces(cls, value):
        if isinstance(value, str):
            value = value.strip()
            if value.startswith("{") and value.endswith("}"):
                value = value[1:-1]
        return value


class AssignedMeasure(BaseModel):
    """A measure paired with the GUID its region carries in every document."""

    model_config = ConfigDict(frozen=True)

    measure: Measure
    guid: uuid.UUID


class RegionRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    root_name: str = Field(min_length=1)
    measures: list[Measure] = Field(min_length=1)
    providers: list[Provider] = Field(min_length=1)

    @field_validator("root_name")
    @classmethod
    def _root_name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("root name must not be blank")
        return check_xml_text(value)


class RenderedDocument(BaseModel):
    model_config = ConfigDict(frozen=True)

    provider: Provider
    file_name: str
    content: bytes
