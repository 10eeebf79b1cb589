"""Manager reports and analytics endpoints."""

import logging
from datetime import date
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from hostel_food.auth import require_manager
from hostel_food.db.session import get_db
from hostel_food.models import User
from hostel_food.services.analytics_service import get_analytics
from hostel_food.services.pdf_exports import render_report_pdf
from hostel_food.services.report_service import REPORT_FORMATS, InvalidReportError, build_report, render_csv
from hostel_food.services.security_guards import resolve_manager_university
from hostel_food.services.university_service import manager_university_ids
from hostel_food.utils.time import utc_now

router: APIRouter = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/reports", response_model=None)
def get_report(
    report_type: str = Query(alias="type"),
    start_date: date = Query(),
    end_date: date = Query(),
    report_format: str = Query(default="csv", alias="format"),
    db: Session = Depends(get_db),
    manager: User = Depends(require_manager),
) -> Response | dict[str, Any]:
    if report_format not in REPORT_FORMATS:
        raise HTTPException(status_code=400, detail="Invalid report format")
    university_ids = manager_university_ids(db, manager)
    if not university_ids:
        raise HTTPException(status_code=403, detail="No universities assigned")

    try:
        report = build_report(
            db,
            university_ids=university_ids,
            report_type=report_type,
            start_date=start_date,
            end_date=end_date,
        )
    except InvalidReportError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    if report_format == "json":
        return {"headers": report.headers, "rows": report.rows}

    if report_format == "pdf":
        meta = {
            "university": resolve_manager_university(db, manager).name,
            "start_date": start_date.isoformat(),
            "end_date": end_date.isoformat(),
            "generated_at": utc_now().strftime("%Y-%m-%d %H:%M UTC"),
        }
        try:
            content = render_report_pdf(report, meta)
        except Exception as exc:
            logger.exception("[REPORTS] PDF generation failed for %s", report.filename)
            raise HTTPException(status_code=500, detail="Failed to generate report") from exc
        return Response(
            content=content,
            media_type="application/pdf",
            headers={"Content-Disposition": f'attachment; filename="{report.filename}.pdf"'},
        )

    return Response(
        content=render_csv(report),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{report.filename}.csv"'},
    )


@router.get("/analytics")
def analytics(
    timeframe: int = Query(default=30, ge=1, le=365),
    db: Session = Depends(get_db),
    manager: User = Depends(require_manager),
) -> dict[str, Any]:
    return get_analytics(db, manager_university_ids(db, manager), timeframe_days=timeframe)
