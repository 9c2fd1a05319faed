"""
Print job routes.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Path, Query, Response, status

from print_queue.api.auth import CurrentUnit, ProducerKey
from print_queue.api.dependencies import HistoryServiceDep, QueueEngineDep, SettingsDep
from print_queue.api.retry import call_store
from print_queue.constants import MAX_HISTORY_LIMIT
from print_queue.observability.metrics import get_metrics
from print_queue.types.api import (
    CreateJobRequest,
    JobCompletedResponse,
    JobCreatedResponse,
    JobResponse,
    JobStatsResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/jobs", tags=["Jobs"])

JobId = Annotated[int, Path(ge=1, description="Print job id")]


@router.post(
    "/new",
    response_model=JobCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[ProducerKey],
    summary="Enqueue a print job",
    description="Add a print job to a unit's queue. Requires the producer API key.",
)
async def create_job(
    request: CreateJobRequest,
    engine: QueueEngineDep,
    settings: SettingsDep,
) -> JobCreatedResponse:
    """
    Enqueue a new pending print job.

    Args:
        request: Unit id and print document.
        engine: Queue engine.
        settings: Application settings.

    Returns:
        JobCreatedResponse with the new job id.
    """
    result = await call_store(
        "enqueue",
        lambda: engine.enqueue(request.unit_id, request.job_data),
        settings,
    )
    job = result.unwrap()

    get_metrics().record_enqueued(job.tenant_id)

    return JobCreatedResponse(message="Job added to the queue", job_id=job.id)


@router.get(
    "/next",
    response_model=JobResponse,
    responses={status.HTTP_204_NO_CONTENT: {"description": "No pending job"}},
    summary="Claim the next job",
    description="Atomically claim the oldest pending job of the caller's unit.",
)
async def claim_next_job(
    current_unit: CurrentUnit,
    engine: QueueEngineDep,
    settings: SettingsDep,
) -> JobResponse | Response:
    """
    Claim the next pending print job.

    Returns:
        The claimed job (now processing), or an empty 204 response.
    """
    result = await call_store(
        "claim_next",
        lambda: engine.claim_next(current_unit.tenant_id),
        settings,
    )
    metrics = get_metrics()
    metrics.record_claim(current_unit.tenant_id, claimed=result.is_success)

    if result.is_empty:
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return JobResponse.model_validate(result.value)


@router.get(
    "/history",
    response_model=list[JobResponse],
    summary="Job history",
    description="List the caller's unit jobs of every status, newest first.",
)
async def get_history(
    current_unit: CurrentUnit,
    history: HistoryServiceDep,
    settings: SettingsDep,
    limit: int | None = Query(default=None, ge=1, le=MAX_HISTORY_LIMIT),
) -> list[JobResponse]:
    """
    List recent jobs for the current unit.

    Args:
        current_unit: Authenticated unit context.
        history: History service.
        settings: Application settings.
        limit: Maximum number of jobs, history_default_limit if omitted.

    Returns:
        Jobs ordered newest first.
    """
    result = await call_store(
        "get_history",
        lambda: history.get_history(
            current_unit.tenant_id,
            limit or settings.history_default_limit,
        ),
        settings,
        read_only=True,
    )
    return [JobResponse.model_validate(job) for job in result.unwrap()]


@router.get(
    "/stats/summary",
    response_model=JobStatsResponse,
    summary="Job statistics",
    description="Count the caller's unit jobs per status.",
)
async def get_job_stats(
    current_unit: CurrentUnit,
    engine: QueueEngineDep,
    settings: SettingsDep,
) -> JobStatsResponse:
    """Get job counts for the current unit."""
    result = await call_store(
        "stats",
        lambda: engine.stats(current_unit.tenant_id),
        settings,
        read_only=True,
    )
    summary = result.unwrap()

    get_metrics().update_queue_depth(current_unit.tenant_id, summary["queue_depth"])

    return JobStatsResponse(**summary)


@router.get(
    "/{job_id}",
    response_model=JobResponse,
    summary="Get job details",
    description="Get one of the caller's unit jobs.",
)
async def get_job(
    job_id: JobId,
    current_unit: CurrentUnit,
    engine: QueueEngineDep,
    settings: SettingsDep,
) -> JobResponse:
    """
    Get job details by id.

    Raises:
        NotFoundOrInvalidStateError: If the unit has no such job.
    """
    result = await call_store(
        "get_job",
        lambda: engine.get_job(current_unit.tenant_id, job_id),
        settings,
        read_only=True,
    )
    return JobResponse.model_validate(result.unwrap())


@router.post(
    "/{job_id}/complete",
    response_model=JobCompletedResponse,
    summary="Complete a job",
    description="Report that a claimed job has been printed.",
)
async def complete_job(
    job_id: JobId,
    current_unit: CurrentUnit,
    engine: QueueEngineDep,
    settings: SettingsDep,
) -> JobCompletedResponse:
    """
    Mark a processing job as completed.

    Raises:
        NotFoundOrInvalidStateError: If the job is missing, belongs to
            another unit or is not processing.
    """
    result = await call_store(
        "complete_job",
        lambda: engine.complete_job(current_unit.tenant_id, job_id),
        settings,
    )
    job = result.unwrap()

    get_metrics().record_completed(current_unit.tenant_id)

    return JobCompletedResponse(message=f"Job {job.id} completed", job_id=job.id)


@router.post(
    "/{job_id}/reprint",
    response_model=JobCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Reprint a job",
    description="Enqueue a copy of an existing job. The original is left untouched.",
)
async def reprint_job(
    job_id: JobId,
    current_unit: CurrentUnit,
    history: HistoryServiceDep,
    settings: SettingsDep,
) -> JobCreatedResponse:
    """
    Reprint one of the unit's jobs.

    Raises:
        NotFoundOrInvalidStateError: If the unit has no such job.
    """
    result = await call_store(
        "reprint",
        lambda: history.reprint(current_unit.tenant_id, job_id),
        settings,
    )
    job = result.unwrap()

    get_metrics().record_reprinted(current_unit.tenant_id)
    logger.info(
        "Reprint requested",
        extra={"job_id": job.id, "original_job_id": job_id, "tenant_id": current_unit.tenant_id},
    )

    return JobCreatedResponse(message="Reprint added to the queue", job_id=job.id)
