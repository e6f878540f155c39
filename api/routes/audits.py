"""
Audit routes - diet plan safety audits.
Flags dishes that conflict with a client's restrictions and highlights them in place.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
import logging

from api.dependencies import get_audit_service
from domain.enums import AuditErrorCode
from domain.schemas import AuditRequest, AuditResponse
from services import AuditService

router = APIRouter(prefix="/audits", tags=["Audits"])
logger = logging.getLogger("dietaudit.api.audits")

STATUS_BY_ERROR_CODE = {
    AuditErrorCode.API_ERROR: 502,
    AuditErrorCode.VALIDATION_ERROR: 422,
    AuditErrorCode.INTERNAL_ERROR: 500,
}


@router.post("", response_model=AuditResponse)
def run_audit(
    request: AuditRequest, service: AuditService = Depends(get_audit_service)
):
    """
    Audit meal sections for one client.

    Pipeline:
    - Extract dish names from each section's HTML
    - Fetch the client profile and enrich dishes with ingredients
    - Classify conflicts (allergy, aversion, diet type, medical)
    - Highlight flagged dishes inside each section's original markup

    Returns:
        AuditResponse; failures carry an error code and a 502/422/500 status
    """
    result = service.run_audit(request)
    if result.success:
        return result

    logger.warning(f"Audit for user {request.user_id} failed: {result.error.code.value}")
    return JSONResponse(
        status_code=STATUS_BY_ERROR_CODE.get(result.error.code, 500),
        content=result.model_dump(mode="json"),
    )
