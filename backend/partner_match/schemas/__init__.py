from partner_match.schemas.common import DecisionTraceEntry, PartnerSearchResponse
from partner_match.schemas.partners import Partner, PartnerFilters, StyleEntry
from partner_match.schemas.requests import PartnerSearchRequest

__all__ = [
    "DecisionTraceEntry",
    "PartnerSearchResponse",
    "Partner",
    "PartnerFilters",
    "StyleEntry",
    "PartnerSearchRequest",
]
