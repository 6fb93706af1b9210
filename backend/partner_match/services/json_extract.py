from __future__ import annotations

from collections import deque
from typing import Any, Optional

from partner_match.core.errors import ParseError

_DATA_KEYS = ("data", "fields")
_LIST_KEYS = ("documents", "items", "results")


def _is_record(obj: Any) -> bool:
    return isinstance(obj, dict)


def _is_list_of_records(obj: Any) -> bool:
    return isinstance(obj, list) and all(_is_record(x) for x in obj)


def flatten_document(doc: dict[str, Any]) -> dict[str, Any]:
    """
    Merge a store document's payload with its id.

    Accepts both {"id": "u1", "data": {...}} envelopes and flat
    {"id": "u1", "displayName": ...} records. The envelope id wins over
    any "id" key inside the payload.
    """
    for key in _DATA_KEYS:
        payload = doc.get(key)
        if isinstance(payload, dict):
            flat = dict(payload)
            if doc.get("id") is not None:
                flat["id"] = str(doc["id"])
            return flat
    flat = dict(doc)
    if flat.get("id") is not None:
        flat["id"] = str(flat["id"])
    return flat


def find_document_list(payload: Any) -> Optional[list[dict[str, Any]]]:
    # Direct list-of-objects
    if _is_list_of_records(payload):
        return payload

    if not isinstance(payload, dict):
        return None

    # Some stores answer an empty listing with a bare {}.
    if not payload:
        return []

    for key in _LIST_KEYS:
        if _is_list_of_records(payload.get(key)):
            return payload[key]

    # Common: {"documents": [..]} or nested containers.
    # BFS for the first list-of-records within a bounded search.
    queue = deque([payload])
    visited = 0

    while queue and visited < 200:
        node = queue.popleft()
        visited += 1

        if isinstance(node, dict):
            for v in node.values():
                if isinstance(v, list) and _is_list_of_records(v):
                    return v
                if isinstance(v, dict):
                    queue.append(v)

    return None


def extract_documents(payload: Any) -> list[dict[str, Any]]:
    """Return the flattened documents of a collection response."""
    docs = find_document_list(payload)
    if docs is None:
        raise ParseError("Collection response did not contain a list of documents")
    return [flatten_document(d) for d in docs]


def extract_document(payload: Any) -> dict[str, Any]:
    """Return a single flattened document."""
    if not _is_record(payload):
        raise ParseError("Document response is not an object")
    return flatten_document(payload)
