"""Pipeline dependency for FastAPI route handlers.

The pipeline is created once by the application lifespan (or by the CLI) and
shared by all requests.

Usage:
    from events_handler.features.events.dependencies import PipelineDep

    @router.post("/listen")
    async def listen(event: NotificationEvent, pipeline: PipelineDep):
        return await pipeline.process(event)
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, status

from events_handler.features.events.pipeline import NotificationPipeline

_pipeline: NotificationPipeline | None = None


def set_pipeline(pipeline: NotificationPipeline | None) -> None:
    global _pipeline
    _pipeline = pipeline


def get_pipeline() -> NotificationPipeline | None:
    return _pipeline


async def require_pipeline(
    pipeline: Annotated[NotificationPipeline | None, Depends(get_pipeline)],
) -> NotificationPipeline:
    """Dependency that requires the pipeline to be running.

    Raises:
        HTTPException: 503 when the application has not finished starting.
    """
    if pipeline is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Notification pipeline is not initialized",
        )
    return pipeline


PipelineDep = Annotated[NotificationPipeline, Depends(require_pipeline)]
