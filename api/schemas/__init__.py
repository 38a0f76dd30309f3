from .shift_reports import (
    ShiftReportOptions,
    ShiftReportRequest,
    ShiftReportResponse,
)
