"""CouchDB implementation of the document store port."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from settee.domain.errors import StoreConflict, StoreError
from settee.domain.model import ID_KEY, REVISION_KEY
from settee.domain.ports import BatchResult, LoadedRow, WriteAck

from .codec import DocumentCodec
from .schema import (
    AllDocsResponse,
    BulkDocsRow,
    CouchDBBaseModel,
    CouchDBErrorBody,
    WriteResponse,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from settee.adapters.http_resilience import ResilientClient
    from settee.domain.ports import SerializedDocument

log = getLogger(__name__)

DESIGN_PREFIX = "_design/"


class CouchDBClient:
    """Talks to one CouchDB database.

    Paths are relative to the database URL configured on the HTTP client.
    HTTP 409 becomes ``StoreConflict``; every other failure is a ``StoreError``.
    """

    def __init__(self, http: ResilientClient, *, codec: DocumentCodec | None = None) -> None:
        self._http = http
        self._codec = codec or DocumentCodec()

    @property
    def location(self) -> str:
        return str(self._http.base_url).rstrip("/")

    @property
    def http(self) -> ResilientClient:
        return self._http

    def get(self, doc_id: str) -> object | None:
        response = self._http.get(document_path(doc_id))
        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        payload = self._payload(response)
        return self._codec.decode(payload)

    def get_raw(self, doc_id: str) -> dict[str, Any] | None:
        """Fetch a stored JSON body without decoding it."""
        response = self._http.get(document_path(doc_id))
        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        return self._payload(response)

    def bulk_load(self, doc_ids: Sequence[str]) -> list[LoadedRow]:
        response = self._http.post(
            "_all_docs",
            params={"include_docs": "true"},
            json={"keys": list(doc_ids)},
        )
        result = self._parse(AllDocsResponse, self._payload(response))
        return [
            LoadedRow(
                id=row.key,
                document=self._codec.decode(row.doc) if row.doc is not None else None,
            )
            for row in result.rows
        ]

    def write_new(self, document: SerializedDocument) -> WriteAck:
        if ID_KEY in document:
            response = self._http.put(document_path(document[ID_KEY]), json=dict(document))
        else:
            response = self._http.post("", json=dict(document))
        ack = self._parse(WriteResponse, self._payload(response))
        return WriteAck(id=ack.id, revision=ack.rev)

    def write_existing(self, document: SerializedDocument) -> WriteAck:
        doc_id = document.get(ID_KEY)
        if not doc_id:
            raise ValueError("Can't update a document without an id")
        response = self._http.put(document_path(doc_id), json=dict(document))
        ack = self._parse(WriteResponse, self._payload(response))
        return WriteAck(id=ack.id, revision=ack.rev)

    def bulk_write(self, documents: Sequence[SerializedDocument]) -> list[BatchResult]:
        response = self._http.post("_bulk_docs", json={"docs": [dict(d) for d in documents]})
        payload = self._payload(response)
        if not isinstance(payload, list):
            raise StoreError("Unexpected _bulk_docs response payload")
        rows = [self._parse(BulkDocsRow, row) for row in payload]
        return [
            BatchResult(
                id=row.id,
                ok=row.ok and row.error is None,
                revision=row.rev,
                error=row.error,
                reason=row.reason,
            )
            for row in rows
        ]

    def delete(self, document: SerializedDocument) -> None:
        doc_id = document.get(ID_KEY)
        revision = document.get(REVISION_KEY)
        if not doc_id or not revision:
            raise ValueError("Can't delete a document without id and revision")
        response = self._http.delete(document_path(doc_id), params={"rev": revision})
        self._payload(response)

    def put_raw(self, doc_id: str, body: dict[str, Any]) -> WriteAck:
        response = self._http.put(document_path(doc_id), json=body)
        ack = self._parse(WriteResponse, self._payload(response))
        return WriteAck(id=ack.id, revision=ack.rev)

    def request_json(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: object | None = None,
    ) -> Any:
        response = self._http.request(method, path, params=params, json=json)
        return self._payload(response)

    def _payload(self, response: httpx.Response) -> Any:
        if response.status_code == httpx.codes.CONFLICT:
            body = _error_body(response)
            raise StoreConflict(
                f"{body.error}: {body.reason or 'Document update conflict.'}",
                status_code=response.status_code,
            )
        if response.is_error:
            body = _error_body(response)
            log.error(
                "CouchDB %s %s failed with %s: %s",
                response.request.method,
                response.request.url,
                response.status_code,
                body.reason or body.error,
            )
            raise StoreError(
                f"{body.error}: {body.reason or response.reason_phrase}",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise StoreError("CouchDB returned a non-JSON body") from exc

    @staticmethod
    def _parse[M: CouchDBBaseModel](model: type[M], payload: object) -> M:
        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            raise StoreError(f"Unexpected CouchDB {model.__name__} payload") from exc


def document_path(doc_id: str) -> str:
    """Escape an id for use in a URL path; design document ids keep their slash."""
    if doc_id.startswith(DESIGN_PREFIX):
        return DESIGN_PREFIX + quote(doc_id.removeprefix(DESIGN_PREFIX), safe="")
    return quote(doc_id, safe="")


def _error_body(response: httpx.Response) -> CouchDBErrorBody:
    try:
        return CouchDBErrorBody.model_validate(response.json())
    except (ValueError, ValidationError):
        return CouchDBErrorBody(error=response.reason_phrase or "error")
