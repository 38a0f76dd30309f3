"""Endpoints for shift report generation."""

from fastapi import APIRouter, Body, HTTPException

from ..schemas import ShiftReportOptions, ShiftReportRequest, ShiftReportResponse
from ..services.shift_report import ShiftReportInvalid, label_options, render_shift_report


router = APIRouter(prefix="/v1/shift-reports", tags=["shift-reports"])


@router.post("", response_model=ShiftReportResponse)
def create_shift_report(
    req: ShiftReportRequest = Body(
        ...,
        example={
            "service": "lunch",
            "weather": "晴れ",
            "customers": ["家族連れ"],
            "customers_free": "観光客、学生",
            "peak": "12-14",
            "hits": ["親子丼"],
            "hits_free": "から揚げ",
            "seat_feel": "9割くらい",
            "event_mode": "yes",
            "event_name": "物産展",
            "notice": "明日は10時から点検があります",
        },
    )
) -> ShiftReportResponse:
    try:
        data = render_shift_report(req.model_dump())
    except ShiftReportInvalid as exc:
        raise HTTPException(status_code=422, detail={"errors": exc.errors})
    return ShiftReportResponse(**data)


@router.get("/options", response_model=ShiftReportOptions)
def shift_report_options() -> ShiftReportOptions:
    """Predefined customer and best-seller labels for the form chips."""

    return ShiftReportOptions(**label_options())
