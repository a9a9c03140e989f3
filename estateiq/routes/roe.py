"""
Property ROE analysis routes.

Routes:
    POST /property-roe-analysis - Run the ROE calculator and save the result
    GET  /property-roe-analysis - List the current user's saved analyses

Both require a valid session cookie and are also served under /api/.
"""

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from estateiq.db import get_db
from estateiq.errors import ValidationError
from estateiq.logging_config import get_logger
from estateiq.models.roe_analysis import PropertyRoeAnalysis
from estateiq.models.user import User
from estateiq.routes.auth import get_current_user
from estateiq.services.roe_calculator import (
    INPUT_FIELDS,
    compute_from_payload,
    build_narrative,
)

# Module logger for ROE operations
logger = get_logger(__name__)

router = APIRouter()

# Most recent analyses returned by the list endpoint
MAX_ANALYSES_LISTED = 100


@router.post("/property-roe-analysis")
@router.post("/api/property-roe-analysis")
def create_roe_analysis(
    payload: Dict[str, Any] = Body(...),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Compute ROE metrics from the submitted figures and store the snapshot.

    Derived fields sent by the client are ignored; only the five inputs are read.
    """
    if not any(key in payload for key in INPUT_FIELDS.values()):
        raise ValidationError("At least one property figure is required")

    # Out-of-range figures raise ValidationError here, before anything is written
    result = compute_from_payload(payload)

    try:
        analysis = PropertyRoeAnalysis(
            user_id=user.id,
            narrative=build_narrative(result),
            **result.to_dict(),
        )
        db.add(analysis)
        db.commit()
        db.refresh(analysis)
        body = analysis.to_dict()
    except Exception:
        logger.exception(f"Error saving ROE analysis for user {user.email}")
        db.rollback()
        return JSONResponse({"error": "Internal Server Error"}, status_code=500)

    logger.info(f"ROE analysis saved (ID: {analysis.id}) for user {user.email}")
    return JSONResponse(body)


@router.get("/property-roe-analysis")
@router.get("/api/property-roe-analysis")
def list_roe_analyses(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    analyses = (
        db.query(PropertyRoeAnalysis)
        .filter(PropertyRoeAnalysis.user_id == user.id)
        .order_by(PropertyRoeAnalysis.created_at.desc(), PropertyRoeAnalysis.id.desc())
        .limit(MAX_ANALYSES_LISTED)
        .all()
    )
    return JSONResponse({"analyses": [a.to_dict() for a in analyses]})
