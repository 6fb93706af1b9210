from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from partner_match.schemas.partners import PartnerFilters


class PartnerSearchRequest(BaseModel):
    requester_id: Optional[str] = Field(default=None, description="Signed-in user id; omit for anonymous search")
    filters: PartnerFilters = Field(default_factory=PartnerFilters)
