from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field

from partner_match.schemas.partners import Partner


class DecisionTraceEntry(BaseModel):
    step: str
    ok: bool = True
    ms: Optional[int] = None
    details: Optional[dict[str, Any]] = None


class PartnerSearchResponse(BaseModel):
    partners: list[Partner] = Field(default_factory=list)
    record_count: int = 0
    has_error: bool = False
    message: str
    decision_trace: list[DecisionTraceEntry] = Field(default_factory=list)
