"""Routing endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import PlainTextResponse

from ...schemas.routing import RoutingRequest, RoutingResponse
from ...services.outputs.itinerary_formatter import route_to_csv
from ...services.routing.service import optimize_itinerary, plan_route

router = APIRouter(prefix="/routes", tags=["routes"])

logger = logging.getLogger(__name__)


@router.post("/optimize", response_model=RoutingResponse, status_code=status.HTTP_200_OK)
def optimize(payload: RoutingRequest) -> RoutingResponse:
    try:
        return optimize_itinerary(payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception("Error optimizing route: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to optimize route: {str(exc)}",
        ) from exc


@router.post("/optimize/csv", response_class=PlainTextResponse, status_code=status.HTTP_200_OK)
def optimize_csv(payload: RoutingRequest) -> PlainTextResponse:
    """Return the optimised itinerary as CSV, one row per stop."""
    try:
        route = plan_route(payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception("Error exporting route: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to export route: {str(exc)}",
        ) from exc
    return PlainTextResponse(
        route_to_csv(route),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="itinerary.csv"'},
    )
