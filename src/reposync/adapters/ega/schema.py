"""Pydantic models describing EGA access API payloads."""

from __future__ import annotations

from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

SESSION_EXPIRED_CODE = 991
OK_CODE = 200


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class EGABaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ResponseHeader(EGABaseModel):
    code: int
    user_message: str | None = Field(default=None, alias="userMessage")
    developer_message: str | None = Field(default=None, alias="developerMessage")

    @field_validator("code", mode="before")
    @classmethod
    def _parse_code(cls, value: int | str) -> int:
        return int(value)

    @property
    def session_expired(self) -> bool:
        return self.code == SESSION_EXPIRED_CODE

    @property
    def ok(self) -> bool:
        return self.code == OK_CODE


class ResponseBody(EGABaseModel):
    num_total_results: int | None = Field(default=None, alias="numTotalResults")
    result: list[object] = Field(default_factory=list[object])

    @field_validator("result", mode="before")
    @classmethod
    def _as_list(cls, value: object) -> object:
        if value is None:
            return []
        if isinstance(value, Mapping | str):
            return [value]
        return value


class EGAResponse(EGABaseModel):
    header: ResponseHeader
    response: ResponseBody = Field(default_factory=ResponseBody)

    @property
    def session_id(self) -> str | None:
        """Session token of a login response: the second ``result`` entry."""

        results = self.response.result
        if len(results) < 2 or not isinstance(results[1], str):
            return None
        return results[1] or None


class EGAFilePayload(EGABaseModel):
    file_id: str = Field(alias="fileID")
    file_name: str = Field(alias="fileName")
    file_size: int | None = Field(default=None, alias="fileSize")
    file_md5: str | None = Field(default=None, alias="unencryptedChecksum")
    file_status: str | None = Field(default=None, alias="fileStatus")
    dataset_id: str | None = Field(default=None, alias="fileDataset")
    analysis_id: str | None = Field(default=None, alias="analysisId")
    submitter_donor_id: str | None = Field(default=None, alias="submitterDonorId")
    project_code: str | None = Field(default=None, alias="projectCode")
    library_strategy: str | None = Field(default=None, alias="libraryStrategy")

    _normalize_optional = field_validator(
        "file_size",
        "file_md5",
        "file_status",
        "dataset_id",
        "analysis_id",
        "submitter_donor_id",
        "project_code",
        "library_strategy",
        mode="before",
    )(_blank_to_none)


EGAFileInput = EGAFilePayload | Mapping[str, object]
