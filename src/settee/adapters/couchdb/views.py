"""View execution against CouchDB design documents."""

from __future__ import annotations

import json
from logging import getLogger
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from settee.domain.errors import StoreError
from settee.domain.ports import ViewResponse, ViewRow

from .client import DESIGN_PREFIX
from .schema import DesignDocument, ViewResult

if TYPE_CHECKING:
    from collections.abc import Mapping

    from settee.domain.views import ViewSpec

    from .client import CouchDBClient
    from .codec import DocumentCodec

log = getLogger(__name__)

# parameters CouchDB expects as JSON values in the query string
JSON_PARAMETERS = frozenset({"key", "startkey", "endkey", "start_key", "end_key"})


class CouchDBViewRunner:
    """Keeps design documents in sync with view specs and queries them.

    A design document is checked once per runner and function set; it is
    created when missing and rewritten when its functions differ.
    """

    def __init__(self, client: CouchDBClient, *, codec: DocumentCodec | None = None) -> None:
        self._client = client
        self._codec = codec
        self._synced: set[tuple[str, str]] = set()

    def query_view(self, spec: ViewSpec) -> ViewResponse:
        self._ensure_design_document(spec)

        design = f"{DESIGN_PREFIX}{spec.design_document}"
        if spec.list_name is not None:
            path = f"{design}/_list/{spec.list_name}/{spec.view_name}"
        else:
            path = f"{design}/_view/{spec.view_name}"

        params, keys = encode_view_parameters(spec.view_parameters)
        if keys is not None:
            payload = self._client.request_json("POST", path, params=params, json={"keys": keys})
        else:
            payload = self._client.request_json("GET", path, params=params)

        try:
            result = ViewResult.model_validate(payload)
        except ValidationError as exc:
            raise StoreError(f"Unexpected response from view {path}") from exc
        return ViewResponse(
            rows=[
                ViewRow(key=row.key, value=row.value, id=row.id, doc=self._decode(row.doc))
                for row in result.rows
            ],
            total_rows=result.total_rows,
            offset=result.offset,
        )

    def _decode(self, doc: dict[str, Any] | None) -> object | None:
        if doc is None or self._codec is None:
            return doc
        return self._codec.decode(doc)

    def _ensure_design_document(self, spec: ViewSpec) -> None:
        wanted = _view_functions(spec)
        fingerprint = (
            spec.design_document,
            json.dumps([wanted, spec.list_name, spec.list_function], sort_keys=True),
        )
        if fingerprint in self._synced:
            return

        design_id = f"{DESIGN_PREFIX}{spec.design_document}"
        stored = self._client.get_raw(design_id)
        design = (
            DesignDocument.model_validate(stored)
            if stored is not None
            else DesignDocument(_id=design_id, language=spec.language)
        )

        changed = stored is None
        for name, functions in wanted.items():
            if design.views.get(name) != functions:
                design.views[name] = functions
                changed = True
        if spec.list_name is not None and spec.list_function is not None:
            if design.lists.get(spec.list_name) != spec.list_function:
                design.lists[spec.list_name] = spec.list_function
                changed = True

        if changed:
            ack = self._client.put_raw(design_id, design.to_payload())
            log.info("Updated design document %s to %s", design_id, ack.revision)
        self._synced.add(fingerprint)


def _view_functions(spec: ViewSpec) -> dict[str, Any]:
    functions: dict[str, Any] = {"map": spec.map_function}
    if spec.reduce_function is not None:
        functions["reduce"] = spec.reduce_function
    views: dict[str, Any] = {spec.view_name: functions}
    if spec.lib:
        views["lib"] = dict(spec.lib)
    return views


def encode_view_parameters(
    parameters: Mapping[str, Any],
) -> tuple[dict[str, str], list[Any] | None]:
    """Split view parameters into query-string values and a ``keys`` body."""

    params: dict[str, str] = {}
    keys: list[Any] | None = None
    for name, value in parameters.items():
        if value is None:
            continue
        if name == "keys":
            keys = list(value)
        elif name in JSON_PARAMETERS:
            params[name] = json.dumps(value)
        elif isinstance(value, bool):
            params[name] = "true" if value else "false"
        else:
            params[name] = str(value)
    return params, keys
