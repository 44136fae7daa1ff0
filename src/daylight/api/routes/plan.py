"""Suggestion endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from ...schemas.planning import PlanRequest, PlanResponse
from ...services.planning.service import suggest_stops

router = APIRouter(prefix="/plan", tags=["plan"])

logger = logging.getLogger(__name__)


@router.post("/suggestions", response_model=PlanResponse, status_code=status.HTTP_200_OK)
def suggestions(payload: PlanRequest) -> PlanResponse:
    try:
        return suggest_stops(payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception("Error scoring candidates: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to score candidates: {str(exc)}",
        ) from exc
