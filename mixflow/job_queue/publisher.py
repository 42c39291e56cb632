"""
Publisher for sending job results back to the API using BullMQ
"""

from typing import Any, Dict, Optional

import structlog
from bullmq import Queue

from mixflow.config import settings

logger = structlog.get_logger()

# Global queue instance
_results_queue: Optional[Queue] = None


def redis_options() -> Dict[str, Any]:
    redis_opts: Dict[str, Any] = {
        "host": settings.redis_host,
        "port": settings.redis_port,
    }
    if settings.redis_password:
        redis_opts["password"] = settings.redis_password
    return redis_opts


def _get_results_queue() -> Queue:
    """Get or create the results queue."""
    global _results_queue
    if _results_queue is None:
        _results_queue = Queue(settings.queue_results, {"connection": redis_options()})
    return _results_queue


async def publish_result(
    result_type: str,
    project_id: Optional[str] = None,
    track_id: Optional[str] = None,
    result: Optional[Dict[str, Any]] = None,
    error: Optional[str] = None,
):
    """
    Publish a job result to the results queue for the API to consume.

    Args:
        result_type: Type of result ('analyze' or 'order')
        project_id: Project identifier
        track_id: Track identifier (for analyze results)
        result: Result data
        error: Error message if job failed
    """
    queue = _get_results_queue()

    payload: Dict[str, Any] = {
        "type": result_type,
    }

    if project_id:
        payload["projectId"] = project_id

    if track_id:
        payload["trackId"] = track_id

    if result is not None:
        payload["result"] = result

    if error:
        payload["error"] = error

    await queue.add("result", payload)

    logger.info(
        "Published result",
        result_type=result_type,
        project_id=project_id,
        track_id=track_id,
        has_error=error is not None,
    )
