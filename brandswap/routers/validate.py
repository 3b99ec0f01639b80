# brandswap/routers/validate.py
"""
Validate endpoint.

POST /validate - Advisory check of a single term/replacement pair
"""

from fastapi import APIRouter, Depends, HTTPException

from brandswap.dependencies import get_brandkit_service
from brandswap.schemas.replace import ValidateRequest, ValidateResponse
from brandswap.services.brandkit_service import BrandkitService

router = APIRouter(prefix="/validate", tags=["validate"])


@router.post("", response_model=ValidateResponse)
async def validate(
    payload: ValidateRequest,
    brandkit: BrandkitService = Depends(get_brandkit_service),
) -> ValidateResponse:
    """Ask the Brandkit API whether a replacement is on-brand. Does not affect preview or apply."""
    if not payload.query or not payload.replace_with:
        raise HTTPException(status_code=400, detail="query and replaceWith are required")

    result = await brandkit.validate(payload.query, payload.replace_with)
    return ValidateResponse.model_validate(result)
