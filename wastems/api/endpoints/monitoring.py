"""Monitoring-report API: field reports and their resolution."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends

from wastems.api.crud import CrudResource, register_crud_routes
from wastems.api.dependencies import repository, supervisor_or_above
from wastems.core.constants import ANY_ROLE, SUPERVISOR_OR_ABOVE
from wastems.domain.entities import AuthenticatedUser
from wastems.domain.exceptions import ValidationException
from wastems.infrastructure.firebase.collections import COLLECTION_MONITORING_REPORTS
from wastems.infrastructure.firebase.repositories import DocumentRepository
from wastems.schemas.monitoring import ReportCreate, ReportUpdate, ResolveRequest
from wastems.shared.listing import field_equals
from wastems.shared.utils import utc_now

logger = logging.getLogger(__name__)

router = APIRouter()

ReportRepo = Annotated[
    DocumentRepository, Depends(repository(COLLECTION_MONITORING_REPORTS, "Report"))
]


def _stamp_reporter(data: dict[str, Any], user: AuthenticatedUser) -> dict[str, Any]:
    return {**data, "reporterId": data.get("reporterId") or user.id}


REPORTS = CrudResource(
    collection=COLLECTION_MONITORING_REPORTS,
    label="Report",
    plural="reports",
    create_model=ReportCreate,
    update_model=ReportUpdate,
    search_fields=("area", "issueType", "description"),
    filter_predicate=field_equals("status"),
    defaults=lambda: {"status": "open"},
    prepare=_stamp_reporter,
    write_roles=SUPERVISOR_OR_ABOVE,
    create_roles=ANY_ROLE,
)


@router.put("/reports/{report_id}/resolve")
async def resolve_report(
    report_id: str,
    body: ResolveRequest,
    reports: ReportRepo,
    user: Annotated[AuthenticatedUser, Depends(supervisor_or_above)],
) -> dict:
    report = await reports.get_or_404(report_id)
    if report.get("status") == "resolved":
        raise ValidationException("Report is already resolved", field="status")
    record = await reports.update(
        report_id,
        {
            "status": "resolved",
            "resolution": body.resolution,
            "resolvedBy": user.id,
            "resolvedAt": utc_now(),
        },
    )
    logger.info("Report %s resolved by %s", report_id, user.id)
    return {"success": True, "message": "Report resolved successfully", "data": record}


register_crud_routes(router, REPORTS, base="/reports")
