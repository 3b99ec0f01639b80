# brandswap/routers/apply.py
"""
Apply endpoint.

POST /apply - Write operator-approved changes back to the record store
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from brandswap.dependencies import get_change_applicator
from brandswap.schemas.replace import ApplyRequest, ApplyResponse, ChangeRequestItem
from brandswap.services.applicator import ChangeApplicator, ChangeRequest
from brandswap.services.content_tree import MISSING

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/apply", tags=["apply"])


def _to_change_request(item: ChangeRequestItem) -> ChangeRequest:
    # An omitted newValue is not the same as an explicit null
    new_value = item.new_value if "new_value" in item.model_fields_set else MISSING
    return ChangeRequest(entry_uid=item.entry_uid, field=item.field, new_value=new_value)


@router.post("", response_model=ApplyResponse, response_model_exclude_none=True)
async def apply(
    payload: ApplyRequest,
    applicator: ChangeApplicator = Depends(get_change_applicator),
) -> ApplyResponse:
    """
    Apply approved changes, one fetch and one write per entry.

    Values containing a banned term are skipped, never written. A failure on
    one entry is reported in its result and does not affect the others.
    """
    if not payload.content_type_uid or not payload.changes:
        raise HTTPException(
            status_code=400,
            detail="contentTypeUid and a non-empty 'changes' array are required",
        )

    changes = [_to_change_request(item) for item in payload.changes]
    report = await applicator.apply(payload.content_type_uid, changes)

    logger.info(
        f"Apply finished: {report.total_updated} updated, {report.total_failed} failed",
        extra={"items_processed": report.total_processed, "items_failed": report.total_failed},
    )
    return ApplyResponse.model_validate(report.to_dict())
