"""CouchDB response schemas."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CouchDBBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class CouchDBErrorBody(CouchDBBaseModel):
    error: str = "unknown_error"
    reason: str | None = None


class WriteResponse(CouchDBBaseModel):
    ok: bool = True
    id: str
    rev: str


class BulkDocsRow(CouchDBBaseModel):
    id: str | None = None
    ok: bool = False
    rev: str | None = None
    error: str | None = None
    reason: str | None = None


class AllDocsRow(CouchDBBaseModel):
    key: str
    id: str | None = None
    value: dict[str, Any] | None = None
    doc: dict[str, Any] | None = None
    error: str | None = None


class AllDocsResponse(CouchDBBaseModel):
    total_rows: int | None = None
    offset: int | None = None
    rows: list[AllDocsRow] = Field(default_factory=list[AllDocsRow])


class ViewResultRow(CouchDBBaseModel):
    id: str | None = None
    key: Any = None
    value: Any = None
    doc: dict[str, Any] | None = None


class ViewResult(CouchDBBaseModel):
    total_rows: int | None = None
    offset: int | None = None
    rows: list[ViewResultRow] = Field(default_factory=list[ViewResultRow])


class DesignDocument(CouchDBBaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str = Field(alias="_id")
    rev: str | None = Field(default=None, alias="_rev")
    language: str = "javascript"
    views: dict[str, Any] = Field(default_factory=dict[str, Any])
    lists: dict[str, str] = Field(default_factory=dict[str, str])

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
