"""FastAPI routes for the SettleSmart API.

Endpoints:
- GET  /health               - Health check
- POST /plan                 - Generate a 4-week relocation checklist
- POST /checklist/progress   - Progress for a plan and a completion set
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from settlesmart.agent.checklist import project
from settlesmart.agent.workflow import generate_plan
from settlesmart.config import get_settings
from settlesmart.llm.client import CompletionClient, get_completion_client
from settlesmart.schemas import (
    ChecklistProgress,
    ErrorResponse,
    Plan,
    ProfileRequest,
    ProgressRequest,
)


logger = logging.getLogger(__name__)
router = APIRouter()

settings = get_settings()


def completion_client() -> CompletionClient:
    """Dependency providing the process-wide completion client.

    Raises ``ConfigurationError`` before the request body is processed when
    the API key is missing.
    """
    return get_completion_client()


# =============================================================================
# Health Check
# =============================================================================

@router.get("/health")
async def health() -> dict:
    """Health check endpoint."""
    return {
        "status": "ok",
        "version": settings.app_version,
        "environment": settings.environment,
    }


# =============================================================================
# Plan Endpoints
# =============================================================================

@router.post(
    "/plan",
    response_model=Plan,
    response_model_by_alias=True,
    responses={500: {"model": ErrorResponse}},
)
async def create_plan(
    request: ProfileRequest,
    client: CompletionClient = Depends(completion_client),
) -> Plan:
    """Generate a relocation plan.

    Completion failures are turned into ``{"error": ...}`` responses by the
    application's exception handler; malformed model output is returned as
    a degraded plan with status 200.
    """
    return await generate_plan(request, client)


@router.post(
    "/checklist/progress",
    response_model=ChecklistProgress,
    response_model_by_alias=True,
)
async def checklist_progress(request: ProgressRequest) -> ChecklistProgress:
    """Compute progress for a plan and the caller's completion set."""
    return project(request.plan, request.completed)
