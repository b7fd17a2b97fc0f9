"""Monitoring-report API schemas."""

from typing import Literal

from pydantic import Field

from wastems.schemas.common import CamelModel, GeoLocation, partial_model

IssueType = Literal["dumping", "segregation_violation", "collection_delay", "facility_issue", "other"]
Priority = Literal["low", "medium", "high", "urgent"]
ReportStatus = Literal["open", "in_progress", "resolved"]


class ReportCreate(CamelModel):
    reporter_id: str | None = Field(default=None, description="Defaults to the caller")
    area: str = Field(..., min_length=1)
    issue_type: IssueType
    description: str | None = None
    photos: list[str] | None = None
    location: GeoLocation | None = None
    priority: Priority = "medium"
    status: ReportStatus | None = None


ReportUpdate = partial_model(ReportCreate)


class ResolveRequest(CamelModel):
    resolution: str | None = None
