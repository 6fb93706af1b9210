"""
HTTP client for the document store REST API, with optional retry logic.
"""
from __future__ import annotations

import json
import time
from dataclasses import dataclass
from typing import Any, Optional

import requests

from partner_match.core.config import Settings, settings as default_settings
from partner_match.core.errors import FetchError, ParseError


DEFAULT_UA = "partner-match/0.1"


@dataclass
class FetchResult:
    url: str
    status_code: int
    headers: dict[str, str]
    content: bytes


def _merged_headers(extra: Optional[dict[str, str]], config: Settings) -> dict[str, str]:
    merged = {"User-Agent": DEFAULT_UA, "Accept": "application/json"}
    if config.store_api_key:
        merged["Authorization"] = f"Bearer {config.store_api_key}"
    if extra:
        merged.update(extra)
    return merged


def get_bytes(
    url: str,
    headers: Optional[dict[str, str]] = None,
    params: Optional[dict[str, Any]] = None,
    max_retries: Optional[int] = None,
    config: Optional[Settings] = None,
) -> FetchResult:
    """
    Perform a GET request, retrying transport errors up to max_retries times.
    """
    settings = config or default_settings
    retries = settings.max_retries if max_retries is None else max_retries
    merged = _merged_headers(headers, settings)

    last_error: Optional[Exception] = None

    for attempt in range(retries + 1):
        try:
            resp = requests.get(
                url,
                headers=merged,
                params=params,
                timeout=(settings.http_connect_timeout_s, settings.http_read_timeout_s),
            )

            content = resp.content or b""
            if len(content) > settings.http_max_bytes:
                raise FetchError(f"Response too large (>{settings.http_max_bytes} bytes)")

            return FetchResult(
                url=str(resp.url),
                status_code=int(resp.status_code),
                headers={k: v for k, v in resp.headers.items()},
                content=content,
            )
        except requests.RequestException as exc:
            last_error = exc
            if attempt < retries:
                time.sleep(1)  # Wait 1s before retry
                continue
            raise FetchError(f"Failed to fetch URL after {retries + 1} attempts: {exc}") from exc

    raise FetchError(f"Failed to fetch URL: {last_error}") from last_error


def try_parse_json(content: bytes) -> Optional[Any]:
    """Try to parse bytes as JSON."""
    try:
        return json.loads(content.decode("utf-8", errors="replace"))
    except ValueError:
        return None


def get_json(url: str, params: Optional[dict[str, Any]] = None, config: Optional[Settings] = None) -> Any:
    """GET a JSON document; raises FetchError on HTTP errors and ParseError on non-JSON bodies."""
    res = get_bytes(url, params=params, config=config)
    if res.status_code >= 400:
        raise FetchError(f"HTTP {res.status_code} from {res.url}")
    parsed = try_parse_json(res.content)
    if parsed is None:
        raise ParseError(f"Response from {res.url} is not JSON")
    return parsed
