"""Application wiring for a CouchDB backed database."""

from __future__ import annotations

from contextlib import contextmanager
from logging import getLogger
from typing import TYPE_CHECKING

from settee.adapters.couchdb import CouchDBClient, CouchDBViewRunner, DocumentCodec
from settee.adapters.http_resilience import ResilientClient
from settee.config import get_couchdb_config
from settee.domain.persistence import Database

if TYPE_CHECKING:
    from collections.abc import Iterator

    import httpx

    from settee.config import CouchDBConfig

log = getLogger(__name__)


def build_database(http: ResilientClient, *, codec: DocumentCodec | None = None) -> Database:
    """Compose a ``Database`` over an open HTTP client."""

    effective_codec = codec or DocumentCodec()
    client = CouchDBClient(http, codec=effective_codec)
    return Database(client, CouchDBViewRunner(client, codec=effective_codec))


@contextmanager
def open_database(
    config: CouchDBConfig | None = None,
    *,
    transport: httpx.BaseTransport | None = None,
) -> Iterator[Database]:
    """Yield a database for the configured CouchDB, closing the connection afterwards."""

    effective_config = config or get_couchdb_config()
    log.info("Connecting to %s", effective_config.database_url)
    with ResilientClient(effective_config.resilience, transport=transport) as http:
        yield build_database(http)
