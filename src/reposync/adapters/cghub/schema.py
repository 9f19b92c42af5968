"""Pydantic models describing CGHub ``analysisDetail`` payloads."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime  # noqa: TC003  # resolved at runtime by pydantic
from typing import cast

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def _as_list(value: object) -> object:
    # Single-element collections come back as a bare object.
    if value is None:
        return []
    if isinstance(value, Mapping):
        return [value]
    return value


class CGHubBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ChecksumPayload(CGHubBaseModel):
    type: str | None = None
    value: str | None = Field(default=None, alias="#text")

    @model_validator(mode="before")
    @classmethod
    def _normalize_plain_checksum(cls, value: object) -> object:
        if isinstance(value, str):
            return {"#text": value}
        return value

    _normalize_value = field_validator("value", mode="before")(_blank_to_none)


class FilePayload(CGHubBaseModel):
    filename: str
    filesize: int | None = None
    checksum: ChecksumPayload | None = None

    _normalize_filesize = field_validator("filesize", mode="before")(_blank_to_none)

    @property
    def md5sum(self) -> str | None:
        if self.checksum is None or self.checksum.value is None:
            return None
        if self.checksum.type and self.checksum.type.upper() != "MD5":
            return None
        return self.checksum.value.lower()


class AnalysisDetail(CGHubBaseModel):
    analysis_id: str
    state: str | None = None
    disease_abbr: str | None = None
    participant_id: str | None = None
    analyte_code: str | None = None
    library_strategy: str | None = None
    last_modified: datetime | None = None
    files: list[FilePayload] = Field(default_factory=list[FilePayload])

    _normalize_optional = field_validator(
        "disease_abbr",
        "participant_id",
        "analyte_code",
        "library_strategy",
        "last_modified",
        mode="before",
    )(_blank_to_none)

    @field_validator("files", mode="before")
    @classmethod
    def _unwrap_files(cls, value: object) -> object:
        if isinstance(value, Mapping) and "file" in value:
            return _as_list(cast(Mapping[str, object], value)["file"])
        return _as_list(value)


class ResultSet(CGHubBaseModel):
    hits: int | None = None
    results: list[Mapping[str, object]] = Field(
        default_factory=list[Mapping[str, object]], alias="Result"
    )

    _unwrap_results = field_validator("results", mode="before")(_as_list)


class AnalysisDetailResponse(CGHubBaseModel):
    """Envelope of one ``analysisDetail`` query.

    Results are kept raw so a single malformed analysis can be skipped by the
    translator without rejecting the whole disease code.
    """

    result_set: ResultSet = Field(alias="ResultSet")


AnalysisDetailInput = AnalysisDetail | Mapping[str, object]
