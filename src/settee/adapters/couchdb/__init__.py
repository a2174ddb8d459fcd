"""CouchDB adapter."""

from __future__ import annotations

from .client import CouchDBClient, document_path
from .codec import DocumentCodec
from .views import CouchDBViewRunner, encode_view_parameters

__all__ = [
    "CouchDBClient",
    "CouchDBViewRunner",
    "DocumentCodec",
    "document_path",
    "encode_view_parameters",
]
