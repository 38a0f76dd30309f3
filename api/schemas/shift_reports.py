from pydantic import BaseModel, Field
from typing import Optional, Literal, List

Service = Literal["lunch", "dinner"]
EventMode = Literal["none", "yes"]


class ShiftReportRequest(BaseModel):
    """Raw form fields for one lunch or dinner shift."""

    service: Service = "lunch"
    weather: str = ""
    customers: List[str] = []
    customers_free: str = ""
    peak: str = Field("", description='Peak window such as "12-14" or "12:00-14:00"')
    hits: List[str] = []
    hits_free: str = ""
    seat_feel: str = ""
    event_mode: EventMode = "none"
    event_name: str = ""
    notice: str = ""
    seed: Optional[int] = None


class ShiftReportResponse(BaseModel):
    text: str
    crowd_level: Literal["busy", "normal", "quiet"]
    sentence_count: int
    seed: int


class ShiftReportOptions(BaseModel):
    customers: List[str]
    hits: List[str]
