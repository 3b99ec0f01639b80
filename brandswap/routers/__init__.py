# brandswap/routers/__init__.py
"""
API routers.
"""

from brandswap.routers import apply, content, preview, scan, validate

__all__ = ["apply", "content", "preview", "scan", "validate"]
