from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

UNNAMED_USER = "İsimsiz Kullanıcı"
UNSPECIFIED = "Belirtilmemiş"
PLACEHOLDER_PARTNER_IMAGE = "/assets/images/dance/egitmen1.jpg"
DEFAULT_RATING = 4.0


class StyleEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    value: str


class Partner(BaseModel):
    """Normalized, display-ready view of another user."""

    model_config = ConfigDict(frozen=True)

    id: str
    display_name: str = UNNAMED_USER
    age: int = 0
    gender: str = UNSPECIFIED
    level: str = UNSPECIFIED
    dance_styles: tuple[str, ...] = ()
    city: str = UNSPECIFIED
    available_times: tuple[str, ...] = ()
    photo: str = PLACEHOLDER_PARTNER_IMAGE
    rating: float = DEFAULT_RATING
    relevance_score: Optional[int] = None
    height: Optional[float] = None
    weight: Optional[float] = None

    def with_score(self, score: int) -> "Partner":
        return self.model_copy(update={"relevance_score": score})


class PartnerFilters(BaseModel):
    model_config = ConfigDict(frozen=True)

    query: Optional[str] = Field(default=None, description="Free-text search over display names")
    style: Optional[str] = Field(default=None, description="Dance style id, value or label")
    gender: Optional[str] = None
    level: Optional[str] = Field(default=None, description="Display level or tier name")
    city: Optional[str] = Field(default=None, description="Substring of the partner's city")
    available_times: list[str] = Field(default_factory=list, description="Keep partners free in any of these slots")
