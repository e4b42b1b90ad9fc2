"""
API v1 routes.
"""

from fastapi import APIRouter

from recordkeep.api.v1 import records, users

router = APIRouter()

router.include_router(users.router, prefix="/users", tags=["Users"])
router.include_router(records.router, prefix="/records", tags=["Records"])
