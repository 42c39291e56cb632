"""
Job consumer for track analysis and ordering jobs using BullMQ
"""

import asyncio
from typing import Any, Dict

import structlog
from bullmq import Worker

from mixflow.analysis.analyzer import analyze_track
from mixflow.config import settings
from mixflow.job_queue.publisher import redis_options, publish_result
from mixflow.ordering.models import track_from_dict
from mixflow.ordering.optimizer import find_compatible_groups, find_optimal_order

logger = structlog.get_logger()


async def process_analyze_job(job_data: Dict[str, Any], job_id: str) -> Dict[str, Any]:
    """
    Process an audio analysis job.

    Args:
        job_data: Job payload containing projectId, trackId, filePath
        job_id: Unique job identifier

    Returns:
        Analysis results (bpm, key, camelot, duration)
    """
    project_id = job_data["projectId"]
    track_id = job_data["trackId"]
    absolute_path = settings.get_absolute_path(job_data["filePath"])

    logger.info(
        "Processing analyze job",
        job_id=job_id,
        project_id=project_id,
        track_id=track_id,
        file_path=absolute_path,
    )

    try:
        loop = asyncio.get_running_loop()
        analysis = await loop.run_in_executor(None, analyze_track, absolute_path)
        result = {
            "bpm": analysis.bpm,
            "key": analysis.key,
            "camelot": analysis.camelot.camelot if analysis.camelot else None,
            "duration": analysis.duration,
        }

        await publish_result(
            result_type="analyze",
            project_id=project_id,
            track_id=track_id,
            result=result,
        )

        logger.info("Analysis complete", track_id=track_id, bpm=result["bpm"], key=result["key"])
        return result

    except Exception as e:
        logger.error("Analysis failed", track_id=track_id, error=str(e))
        await publish_result(
            result_type="analyze",
            project_id=project_id,
            track_id=track_id,
            error=str(e),
        )
        raise


async def process_order_job(job_data: Dict[str, Any], job_id: str) -> Dict[str, Any]:
    """
    Process a track ordering job.

    Args:
        job_data: Job payload containing projectId and tracks (with analysis)
        job_id: Unique job identifier

    Returns:
        Serialized ordering result; incomplete results also carry the
        compatible groups as lists of track ids
    """
    project_id = job_data["projectId"]
    tracks_data = job_data.get("tracks", [])

    logger.info(
        "Processing order job",
        job_id=job_id,
        project_id=project_id,
        track_count=len(tracks_data),
    )

    try:
        tracks = [track_from_dict(data) for data in tracks_data]

        loop = asyncio.get_running_loop()
        ordering = await loop.run_in_executor(None, find_optimal_order, tracks)

        result = ordering.to_dict()
        if not ordering.is_complete:
            result["groups"] = [
                [t.id for t in group]
                for group in find_compatible_groups(tracks)
            ]

        await publish_result(
            result_type="order",
            project_id=project_id,
            result=result,
        )

        logger.info(
            "Ordering complete",
            project_id=project_id,
            ordered=len(ordering.ordered_tracks),
            rejected=len(ordering.rejected),
            is_complete=ordering.is_complete,
        )
        return result

    except Exception as e:
        logger.error("Ordering failed", project_id=project_id, error=str(e))
        await publish_result(
            result_type="order",
            project_id=project_id,
            error=str(e),
        )
        raise


async def analyze_job_processor(job, token):
    """BullMQ job processor for analyze queue"""
    logger.info("Received analyze job", job_id=job.id, data=job.data)
    return await process_analyze_job(job.data, job.id)


async def order_job_processor(job, token):
    """BullMQ job processor for order queue"""
    logger.info("Received order job", job_id=job.id, project_id=job.data.get("projectId"))
    return await process_order_job(job.data, job.id)


def start_worker(worker_id: int):
    """
    Start BullMQ workers for the analyze and order queues.

    Args:
        worker_id: Unique identifier for this worker
    """
    # Setup logging in subprocess (not inherited from parent)
    from mixflow.utils.logging import setup_logging
    setup_logging(settings.log_level)

    logger.info("Starting BullMQ worker", worker_id=worker_id)

    async def run_workers():
        redis_opts = redis_options()

        analyze_worker = Worker(
            settings.queue_analyze,
            analyze_job_processor,
            {"connection": redis_opts}
        )

        order_worker = Worker(
            settings.queue_order,
            order_job_processor,
            {"connection": redis_opts}
        )

        logger.info(
            "Workers started",
            worker_id=worker_id,
            queues=[settings.queue_analyze, settings.queue_order],
            redis_host=settings.redis_host,
        )

        try:
            while True:
                await asyncio.sleep(1)
        except asyncio.CancelledError:
            logger.info("Shutting down workers...")
            await analyze_worker.close()
            await order_worker.close()

    asyncio.run(run_workers())
