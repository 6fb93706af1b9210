"""
Read-only access to the hosted document store.

Every method returns a FetchOutcome instead of raising: transport, HTTP and
payload errors become Failure values carrying a readable reason, and are
logged here once.
"""
from __future__ import annotations

from typing import Any, Optional
from urllib.parse import quote

from partner_match.core.config import Settings, settings as default_settings
from partner_match.core.errors import FetchError, ParseError, PartnerMatchError
from partner_match.core.logger import get_logger
from partner_match.core.result import FetchOutcome, failure, success
from partner_match.schemas.partners import StyleEntry
from partner_match.services.http_client import get_bytes, get_json, try_parse_json
from partner_match.services.json_extract import extract_document, extract_documents
from partner_match.services.style_dictionary import style_entry_from_document

logger = get_logger(component="document_store")


class DocumentStore:
    def __init__(self, config: Optional[Settings] = None):
        self.config = config or default_settings

    def _collection_url(self, collection: str) -> str:
        return f"{self.config.store_base_url.rstrip('/')}/{collection}"

    def fetch_styles(self) -> FetchOutcome[list[StyleEntry]]:
        url = self._collection_url(self.config.styles_collection)
        try:
            docs = extract_documents(get_json(url, params={"orderBy": "label"}, config=self.config))
        except PartnerMatchError as exc:
            logger.warning("dance style fetch failed", url=url, reason=exc.message)
            return failure(f"Dance styles could not be loaded: {exc.message}")
        return success([style_entry_from_document(d) for d in docs])

    def fetch_candidates(self, limit: Optional[int] = None) -> FetchOutcome[list[dict[str, Any]]]:
        """One page of user records, newest first, restricted to the candidate roles."""
        page_size = limit or self.config.candidate_page_size
        url = self._collection_url(self.config.users_collection)
        params = {
            "role": ",".join(self.config.candidate_roles),
            "orderBy": "createdAt desc",
            "limit": page_size,
        }
        try:
            docs = extract_documents(get_json(url, params=params, config=self.config))
        except PartnerMatchError as exc:
            logger.warning("candidate fetch failed", url=url, reason=exc.message)
            return failure(f"Partners could not be loaded: {exc.message}")
        return success(docs)

    def fetch_profile(self, user_id: str) -> FetchOutcome[Optional[dict[str, Any]]]:
        """The raw record of one user; Success(None) when the user has no record."""
        url = f"{self._collection_url(self.config.users_collection)}/{quote(user_id, safe='')}"
        try:
            res = get_bytes(url, config=self.config)
            if res.status_code == 404:
                return success(None)
            if res.status_code >= 400:
                raise FetchError(f"HTTP {res.status_code} from {res.url}")
            parsed = try_parse_json(res.content)
            if parsed is None:
                raise ParseError(f"Response from {res.url} is not JSON")
            doc = extract_document(parsed)
        except PartnerMatchError as exc:
            logger.warning("profile fetch failed", user_id=user_id, reason=exc.message)
            return failure(f"Your profile could not be loaded: {exc.message}")
        doc.setdefault("id", user_id)
        return success(doc)
