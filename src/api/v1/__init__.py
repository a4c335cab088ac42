"""
API v1 routes.
"""

from fastapi import APIRouter

from src.api.v1 import assessments, modules, progression

router = APIRouter()

router.include_router(modules.router, tags=["Modules"])
router.include_router(progression.router, tags=["Progression"])
router.include_router(assessments.router, tags=["Assessments"])
