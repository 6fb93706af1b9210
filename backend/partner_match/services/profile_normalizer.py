"""
Raw user record -> Partner normalization.

Store records come in two shapes: the current one (displayName, danceStyles,
...) and an older one with Turkish field names (ad, dans, konum, ...). Both
are resolved here, once, into a ProfileRecord; everything downstream reads
only that canonical record.

Normalization never raises. Missing, empty or mistyped fields fall back to
the Partner defaults.
"""
from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional

from partner_match.schemas.partners import (
    DEFAULT_RATING,
    PLACEHOLDER_PARTNER_IMAGE,
    UNNAMED_USER,
    UNSPECIFIED,
    Partner,
)
from partner_match.services.style_dictionary import StyleDictionary

LEVEL_LABELS: dict[str, str] = {
    "beginner": "Başlangıç",
    "intermediate": "Orta",
    "advanced": "İleri",
    "professional": "Profesyonel",
}
LEVEL_TIERS: dict[str, str] = {label: tier for tier, label in LEVEL_LABELS.items()}

_CURRENT_KEYS = (
    "displayName",
    "age",
    "gender",
    "level",
    "danceStyles",
    "city",
    "availableTimes",
    "photoURL",
    "rating",
    "height",
    "weight",
)
# Current key -> legacy key(s), first non-empty wins.
_LEGACY_KEYS: dict[str, tuple[str, ...]] = {
    "displayName": ("ad", "name"),
    "age": ("yas",),
    "gender": ("cinsiyet",),
    "level": ("seviye",),
    "danceStyles": ("dans",),
    "city": ("konum",),
    "availableTimes": ("saatler",),
    "photoURL": ("foto",),
    "rating": ("puan",),
    "height": ("boy",),
    "weight": ("kilo",),
}


@dataclass(frozen=True)
class ProfileRecord:
    """A user record with one well-typed field per attribute, all optional."""

    id: str = ""
    display_name: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[str] = None
    level: Optional[str] = None
    dance_styles: tuple[str, ...] = ()
    city: Optional[str] = None
    available_times: tuple[str, ...] = ()
    photo_url: Optional[str] = None
    rating: Optional[float] = None
    height: Optional[float] = None
    weight: Optional[float] = None


def _text(v: Any) -> Optional[str]:
    if isinstance(v, str) and v:
        return v
    return None


def _number(v: Any) -> Optional[float]:
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        return None
    # json.loads accepts NaN and Infinity.
    if not math.isfinite(v):
        return None
    return v


def _strings(v: Any) -> tuple[str, ...]:
    if not isinstance(v, (list, tuple)):
        return ()
    return tuple(item for item in v if isinstance(item, str))


def is_legacy_record(raw: Mapping[str, Any]) -> bool:
    if any(key in raw for key in _CURRENT_KEYS):
        return False
    return any(key in raw for keys in _LEGACY_KEYS.values() for key in keys)


def _from_legacy(raw: Mapping[str, Any]) -> dict[str, Any]:
    fields: dict[str, Any] = {}
    for current, legacy_keys in _LEGACY_KEYS.items():
        for key in legacy_keys:
            if raw.get(key):
                fields[current] = raw[key]
                break
    # Older records store the display label ("Orta"), not the tier name.
    level = fields.get("level")
    if isinstance(level, str):
        fields["level"] = LEVEL_TIERS.get(level, level)
    return fields


def resolve_profile_record(raw: Any, record_id: Optional[str] = None) -> ProfileRecord:
    if isinstance(raw, ProfileRecord):
        return raw
    if not isinstance(raw, Mapping):
        return ProfileRecord(id=record_id or "")

    fields = _from_legacy(raw) if is_legacy_record(raw) else raw
    age = _number(fields.get("age"))

    return ProfileRecord(
        id=record_id or str(raw.get("id") or ""),
        display_name=_text(fields.get("displayName")),
        age=int(age) if age is not None else None,
        gender=_text(fields.get("gender")),
        level=_text(fields.get("level")),
        dance_styles=_strings(fields.get("danceStyles")),
        city=_text(fields.get("city")),
        available_times=_strings(fields.get("availableTimes")),
        photo_url=_text(fields.get("photoURL")),
        rating=_number(fields.get("rating")),
        height=_number(fields.get("height")),
        weight=_number(fields.get("weight")),
    )


def display_level(level: Optional[str]) -> str:
    if level is None:
        return UNSPECIFIED
    return LEVEL_LABELS.get(level, UNSPECIFIED)


def tier_for_display_level(label: str) -> str:
    """Inverse of display_level; "" for unspecified or unknown labels."""
    return LEVEL_TIERS.get(label, "")


def normalize(
    raw: Any,
    dictionary: StyleDictionary,
    *,
    placeholder_photo: str = PLACEHOLDER_PARTNER_IMAGE,
    default_rating: float = DEFAULT_RATING,
) -> Partner:
    record = resolve_profile_record(raw)
    return Partner(
        id=record.id,
        display_name=record.display_name or UNNAMED_USER,
        age=record.age or 0,
        gender=record.gender or UNSPECIFIED,
        level=display_level(record.level),
        dance_styles=tuple(dictionary.canonical(style) for style in record.dance_styles),
        city=record.city or UNSPECIFIED,
        available_times=record.available_times,
        photo=record.photo_url or placeholder_photo,
        rating=record.rating or default_rating,
        height=record.height,
        weight=record.weight,
    )
