"""FastAPI router exposing the favorite-sites endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from sitemanager.schemas.favorites import FavoriteMutationResponse, FavoritesPage
from sitemanager.services.caller import Caller
from sitemanager.services.dependencies import get_caller, get_favorites_service
from sitemanager.services.favorites import parse_page_request
from sitemanager.services.favorites_service import FavoritesService

router = APIRouter()


def _flag(value: str | None) -> bool:
    return (value or "").strip().lower() == "true"


@router.get(
    "/favorites",
    response_model=FavoritesPage,
    response_model_exclude_unset=True,
)
async def list_favorites(
    include_devices: str | None = Query(
        None,
        alias="include-devices",
        description="Pass 'true' to include device counters and health metrics.",
    ),
    search: str | None = Query(
        None, description="Case-insensitive substring matched against site names."
    ),
    page: str | None = Query(None, description="1-based page number."),
    page_size: str | None = Query(
        None, alias="pageSize", description="Items per page (default 20, max 200)."
    ),
    caller: Caller = Depends(get_caller),
    service: FavoritesService = Depends(get_favorites_service),
) -> FavoritesPage:
    """Return the caller's favorite sites, searched, sorted and paginated.

    Out-of-range paging values are clamped instead of rejected.
    """

    return await service.list_favorites(
        caller=caller,
        page_request=parse_page_request(page, page_size),
        search=search,
        include_devices=_flag(include_devices),
    )


@router.post(
    "/{site_id}/favorite",
    response_model=FavoriteMutationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_favorite(
    site_id: str,
    caller: Caller = Depends(get_caller),
    service: FavoritesService = Depends(get_favorites_service),
) -> FavoriteMutationResponse:
    """Mark a site as favorite; the caller must be a member unless privileged."""

    try:
        return await service.add_favorite(caller=caller, site_id=site_id)
    except PermissionError as exc:
        raise HTTPException(status_code=403, detail=str(exc)) from exc
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.delete("/{site_id}/favorite", response_model=FavoriteMutationResponse)
async def remove_favorite(
    site_id: str,
    caller: Caller = Depends(get_caller),
    service: FavoritesService = Depends(get_favorites_service),
) -> FavoriteMutationResponse:
    """Unmark a favorite. Succeeds even when the site was not a favorite."""

    return await service.remove_favorite(caller=caller, site_id=site_id)
