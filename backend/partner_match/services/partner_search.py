"""
Partner search: fetch, normalize, score, rank, filter.

A search fetches one bounded page of candidate records, drops the requester's
own record, normalizes the rest, scores each one against the requester and
sorts by score (stable, so the store's newest-first order breaks ties). The
filter pass runs over the ranked list and never reorders it.

Fetch failures never escape as exceptions: they end up in SearchResult.error
alongside an empty (or anonymously ranked) list.
"""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional, Protocol

from partner_match.core.config import Settings, settings as default_settings
from partner_match.core.logger import get_logger
from partner_match.core.result import FetchOutcome
from partner_match.schemas.common import DecisionTraceEntry
from partner_match.schemas.partners import Partner, PartnerFilters, StyleEntry
from partner_match.services.profile_normalizer import LEVEL_LABELS, ProfileRecord, normalize, resolve_profile_record
from partner_match.services.relevance import score
from partner_match.services.style_dictionary import StyleDictionary, build_style_dictionary

logger = get_logger(component="partner_search")


class PartnerSource(Protocol):
    def fetch_styles(self) -> FetchOutcome[list[StyleEntry]]: ...

    def fetch_candidates(self, limit: Optional[int] = None) -> FetchOutcome[list[dict[str, Any]]]: ...

    def fetch_profile(self, user_id: str) -> FetchOutcome[Optional[dict[str, Any]]]: ...


@dataclass
class SearchResult:
    partners: list[Partner] = field(default_factory=list)
    ranked: list[Partner] = field(default_factory=list)
    error: Optional[str] = None
    trace: list[DecisionTraceEntry] = field(default_factory=list)

    @property
    def has_error(self) -> bool:
        return self.error is not None


def _trace(step: str, ok: bool = True, ms: Optional[int] = None, details: Optional[dict[str, Any]] = None) -> DecisionTraceEntry:
    return DecisionTraceEntry(step=step, ok=ok, ms=ms, details=details)


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


def load_style_dictionary(source: PartnerSource) -> tuple[StyleDictionary, Optional[str]]:
    """Build the dictionary from the style source; an empty one (plus the reason) on failure."""
    outcome = source.fetch_styles()
    if not outcome.ok:
        return build_style_dictionary([]), outcome.reason
    return build_style_dictionary(outcome.value), None


def rank_candidates(
    records: Iterable[Any],
    requester: Optional[ProfileRecord],
    dictionary: StyleDictionary,
    *,
    requester_id: Optional[str] = None,
    config: Optional[Settings] = None,
) -> list[Partner]:
    cfg = config or default_settings
    scored: list[Partner] = []
    for record in records:
        profile = resolve_profile_record(record)
        if requester_id and profile.id == requester_id:
            continue
        partner = normalize(
            profile,
            dictionary,
            placeholder_photo=cfg.placeholder_photo,
            default_rating=cfg.default_rating,
        )
        scored.append(partner.with_score(score(partner, requester)))
    # sorted() is stable, ties keep the fetch order.
    return sorted(scored, key=lambda p: -(p.relevance_score or 0))


def _blank(v: Optional[str]) -> bool:
    return v is None or not v.strip()


def apply_filters(
    partners: Iterable[Partner],
    filters: Optional[PartnerFilters],
    dictionary: Optional[StyleDictionary] = None,
) -> list[Partner]:
    partners = list(partners)
    if filters is None:
        return partners

    query = None if _blank(filters.query) else filters.query.strip().lower()
    style = None
    if not _blank(filters.style):
        style = dictionary.canonical(filters.style) if dictionary is not None else filters.style
    level = None if _blank(filters.level) else LEVEL_LABELS.get(filters.level, filters.level)
    gender = None if _blank(filters.gender) else filters.gender
    city = None if _blank(filters.city) else filters.city
    times = [t for t in filters.available_times if t]

    def keep(p: Partner) -> bool:
        if query is not None and query not in p.display_name.lower():
            return False
        if style is not None and style not in p.dance_styles:
            return False
        if gender is not None and p.gender != gender:
            return False
        if level is not None and p.level != level:
            return False
        if city is not None and city not in p.city:
            return False
        if times and not any(t in p.available_times for t in times):
            return False
        return True

    return [p for p in partners if keep(p)]


def search(
    source: PartnerSource,
    requester_id: Optional[str],
    filters: Optional[PartnerFilters],
    dictionary: StyleDictionary,
    *,
    config: Optional[Settings] = None,
) -> SearchResult:
    cfg = config or default_settings
    result = SearchResult()

    started = time.perf_counter()
    candidates = source.fetch_candidates(cfg.candidate_page_size)
    if not candidates.ok:
        result.error = candidates.reason
        result.trace.append(_trace("fetch_candidates", ok=False, ms=_elapsed_ms(started), details={"error": candidates.reason}))
        return result

    # Never rank more than one page.
    records = list(candidates.value)[: cfg.candidate_page_size]
    result.trace.append(_trace("fetch_candidates", ok=True, ms=_elapsed_ms(started), details={"records": len(records)}))

    requester: Optional[ProfileRecord] = None
    if requester_id:
        started = time.perf_counter()
        profile = source.fetch_profile(requester_id)
        if not profile.ok:
            result.error = profile.reason
            result.trace.append(_trace("fetch_requester", ok=False, ms=_elapsed_ms(started), details={"error": profile.reason}))
        else:
            if profile.value is not None:
                requester = resolve_profile_record(profile.value, record_id=requester_id)
            result.trace.append(
                _trace("fetch_requester", ok=True, ms=_elapsed_ms(started), details={"found": requester is not None})
            )

    started = time.perf_counter()
    result.ranked = rank_candidates(records, requester, dictionary, requester_id=requester_id, config=cfg)
    result.trace.append(
        _trace(
            "rank",
            ok=True,
            ms=_elapsed_ms(started),
            details={"candidates": len(result.ranked), "scored_against_requester": requester is not None},
        )
    )

    result.partners = apply_filters(result.ranked, filters, dictionary)
    result.trace.append(_trace("filter", ok=True, details={"before": len(result.ranked), "after": len(result.partners)}))

    logger.info(
        "partner search finished",
        requester_id=requester_id,
        ranked=len(result.ranked),
        returned=len(result.partners),
        error=result.error,
    )
    return result


class PartnerSearchSession:
    """
    One user's search session.

    The style dictionary is built on first use and reused by every later
    search; the last ranked list is kept so filter changes can be applied
    without fetching again.
    """

    def __init__(
        self,
        source: PartnerSource,
        requester_id: Optional[str] = None,
        *,
        dictionary: Optional[StyleDictionary] = None,
        config: Optional[Settings] = None,
    ):
        self.source = source
        self.requester_id = requester_id
        self.config = config or default_settings
        self._dictionary = dictionary
        self.style_error: Optional[str] = None
        self.last_result: Optional[SearchResult] = None

    @property
    def dictionary(self) -> StyleDictionary:
        if self._dictionary is None:
            self._dictionary, self.style_error = load_style_dictionary(self.source)
        return self._dictionary

    def run(self, filters: Optional[PartnerFilters] = None) -> SearchResult:
        result = search(self.source, self.requester_id, filters, self.dictionary, config=self.config)
        if self.style_error and result.error is None:
            result.error = self.style_error
        self.last_result = result
        return result

    def refine(self, filters: Optional[PartnerFilters] = None) -> SearchResult:
        if self.last_result is None:
            return self.run(filters)
        previous = self.last_result
        partners = apply_filters(previous.ranked, filters, self.dictionary)
        refined = SearchResult(
            partners=partners,
            ranked=previous.ranked,
            error=previous.error,
            trace=[_trace("filter", ok=True, details={"before": len(previous.ranked), "after": len(partners)})],
        )
        self.last_result = refined
        return refined
