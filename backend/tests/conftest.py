from __future__ import annotations

from typing import Any, Optional

import pytest

from partner_match.core.result import failure, success
from partner_match.schemas.partners import StyleEntry
from partner_match.services.style_dictionary import build_style_dictionary


STYLE_ENTRIES = [
    StyleEntry(id="salsa", label="Salsa", value="salsa"),
    StyleEntry(id="bachata", label="Bachata", value="bachata"),
    StyleEntry(id="modern-dans", label="Modern Dans", value="modern_dance"),
    StyleEntry(id="tango", label="Arjantin Tango", value="tango"),
]


class FakeSource:
    """In-memory stand-in for the document store."""

    def __init__(
        self,
        *,
        styles: Optional[list[StyleEntry]] = None,
        candidates: Optional[list[dict[str, Any]]] = None,
        profiles: Optional[dict[str, dict[str, Any]]] = None,
        fail_styles: bool = False,
        fail_candidates: bool = False,
        fail_profile: bool = False,
    ):
        self.styles = STYLE_ENTRIES if styles is None else styles
        self.candidates = candidates or []
        self.profiles = profiles or {}
        self.fail_styles = fail_styles
        self.fail_candidates = fail_candidates
        self.fail_profile = fail_profile
        self.calls: list[str] = []
        self.limits: list[Optional[int]] = []

    def fetch_styles(self):
        self.calls.append("styles")
        if self.fail_styles:
            return failure("styles unavailable")
        return success(list(self.styles))

    def fetch_candidates(self, limit=None):
        self.calls.append("candidates")
        self.limits.append(limit)
        if self.fail_candidates:
            return failure("candidates unavailable")
        return success([dict(c) for c in self.candidates])

    def fetch_profile(self, user_id):
        self.calls.append("profile")
        if self.fail_profile:
            return failure("profile unavailable")
        return success(self.profiles.get(user_id))


@pytest.fixture
def style_dictionary():
    return build_style_dictionary(STYLE_ENTRIES)


@pytest.fixture
def requester_record():
    return {
        "id": "me",
        "displayName": "Deniz",
        "level": "intermediate",
        "city": "İstanbul",
        "danceStyles": ["Salsa"],
        "availableTimes": ["Akşam"],
    }
