"""Pydantic models describing object-storage ``/entities`` listing pages."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class StorageBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class EntityPayload(StorageBaseModel):
    id: str
    gnos_id: str = Field(alias="gnosId")
    file_name: str = Field(alias="fileName")
    project_code: str | None = Field(default=None, alias="projectCode")
    access: str | None = None
    file_size: int | None = Field(default=None, alias="fileSize")
    file_md5sum: str | None = Field(default=None, alias="fileMd5sum")
    created_time: datetime | None = Field(default=None, alias="createdTime")

    _normalize_optional = field_validator(
        "project_code", "access", "file_size", "file_md5sum", mode="before"
    )(_blank_to_none)

    @field_validator("created_time", mode="before")
    @classmethod
    def _parse_epoch_millis(cls, value: object) -> object:
        if isinstance(value, int | float):
            return datetime.fromtimestamp(value / 1000, tz=UTC)
        return _blank_to_none(value)


class EntityPage(StorageBaseModel):
    content: list[Mapping[str, object]] = Field(default_factory=list[Mapping[str, object]])
    number: int = 0
    total_pages: int | None = Field(default=None, alias="totalPages")
    last: bool | None = None

    @property
    def is_last(self) -> bool:
        if self.last is not None:
            return self.last
        if self.total_pages is not None:
            return self.number + 1 >= self.total_pages
        return not self.content


EntityInput = EntityPayload | Mapping[str, object]
