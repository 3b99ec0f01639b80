# brandswap/services/__init__.py
"""
Business logic services.
"""

from brandswap.services.applicator import ApplyReport, ApplyResult, ChangeApplicator, ChangeRequest
from brandswap.services.brandkit_service import BrandkitService
from brandswap.services.preview_service import PreviewReport, PreviewService
from brandswap.services.refiner import RefinementAdapter

__all__ = [
    "ApplyReport",
    "ApplyResult",
    "BrandkitService",
    "ChangeApplicator",
    "ChangeRequest",
    "PreviewReport",
    "PreviewService",
    "RefinementAdapter",
]
