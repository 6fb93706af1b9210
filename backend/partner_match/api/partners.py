from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status

from partner_match.schemas import PartnerSearchRequest, PartnerSearchResponse, StyleEntry
from partner_match.services.document_store import DocumentStore
from partner_match.services.partner_search import PartnerSource, load_style_dictionary, search
from partner_match.services.style_dictionary import StyleDictionary

router = APIRouter(prefix="/partners", tags=["partners"])


@dataclass
class LoadedStyles:
    dictionary: StyleDictionary
    error: Optional[str] = None


def get_partner_source() -> PartnerSource:
    return DocumentStore()


def get_styles(request: Request, source: PartnerSource = Depends(get_partner_source)) -> LoadedStyles:
    # Built once per app and shared by reference; failed loads are retried on the next request.
    cached: Optional[StyleDictionary] = getattr(request.app.state, "style_dictionary", None)
    if cached is not None:
        return LoadedStyles(dictionary=cached)
    dictionary, error = load_style_dictionary(source)
    if error is None:
        request.app.state.style_dictionary = dictionary
    return LoadedStyles(dictionary=dictionary, error=error)


@router.get("/styles", response_model=list[StyleEntry])
def list_styles(styles: LoadedStyles = Depends(get_styles)) -> list[StyleEntry]:
    if styles.error is not None:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=styles.error)
    return list(styles.dictionary.entries)


@router.post("/search", response_model=PartnerSearchResponse)
def search_partners(
    payload: PartnerSearchRequest,
    source: PartnerSource = Depends(get_partner_source),
    styles: LoadedStyles = Depends(get_styles),
) -> PartnerSearchResponse:
    result = search(source, payload.requester_id, payload.filters, styles.dictionary)

    error = result.error or styles.error
    if result.partners:
        message = f"Found {len(result.partners)} partners."
    elif error:
        message = "Partners could not be loaded."
    else:
        message = "No matching partners found. Try changing the filters."
    if error:
        message += f" {error}"

    return PartnerSearchResponse(
        partners=result.partners,
        record_count=len(result.partners),
        has_error=error is not None,
        message=message,
        decision_trace=result.trace,
    )
