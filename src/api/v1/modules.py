"""
Module endpoints - prerequisite graph checks, reordering, configuration checks.
"""

from fastapi import APIRouter, HTTPException, status

from src.engines.progression.config_validator import ModuleConfigValidator
from src.engines.progression.graph_validator import GraphValidator
from src.logging_config import get_logger
from src.schemas.common import ErrorResponse, ValidationResponse
from src.schemas.progression import (
    ModuleConfigValidateRequest,
    ModuleGraphValidateRequest,
    ModuleGraphValidateResponse,
    ModuleReorderRequest,
    ModuleReorderResponse,
)

router = APIRouter()
logger = get_logger(__name__)

_ERRORS = {400: {"model": ErrorResponse}}


def _ensure_course(course_id: str, modules) -> None:
    foreign = sorted(m.id for m in modules if m.course_id != course_id)
    if foreign:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Modules do not belong to course {course_id}: {', '.join(foreign)}",
        )


@router.post(
    "/courses/{course_id}/modules/validate",
    response_model=ModuleGraphValidateResponse,
    responses=_ERRORS,
)
async def validate_module_graph(course_id: str, body: ModuleGraphValidateRequest):
    """
    Check the course prerequisite graph, optionally as it would be after
    creating a module or replacing one module's prerequisites.
    """
    modules = list(body.modules)
    if body.new_module is not None:
        modules = [m for m in modules if m.id != body.new_module.id] + [body.new_module]
    _ensure_course(course_id, modules)

    if body.prerequisite_update is not None:
        update = body.prerequisite_update
        if update.module_id not in {m.id for m in modules}:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Module {update.module_id} not found in course {course_id}",
            )
        modules = [
            m.model_copy(update={"prerequisites": list(update.prerequisites)}) if m.id == update.module_id else m
            for m in modules
        ]

    GraphValidator.validate(modules)
    return ModuleGraphValidateResponse(topological_order=GraphValidator.topological_order(modules))


@router.post(
    "/courses/{course_id}/modules/reorder",
    response_model=ModuleReorderResponse,
    responses=_ERRORS,
)
async def reorder_modules(course_id: str, body: ModuleReorderRequest):
    """New 1-based positions when the request names every module exactly once."""
    _ensure_course(course_id, body.modules)
    positions = GraphValidator.validate_reorder(body.modules, body.module_ids)
    logger.info("Reorder accepted for course %s", course_id, extra={"module_count": len(positions)})
    return ModuleReorderResponse(positions=positions)


@router.post(
    "/modules/{module_id}/config/validate",
    response_model=ValidationResponse,
    responses=_ERRORS,
)
async def validate_module_config(module_id: str, body: ModuleConfigValidateRequest):
    """Check completion criteria and presentation rules against the module's units."""
    if body.module.id != module_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Module id does not match path")
    ModuleConfigValidator.validate(body.module, body.learning_units)
    return ValidationResponse()
