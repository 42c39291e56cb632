"""Queue module for job processing"""

from mixflow.job_queue.consumer import start_worker
from mixflow.job_queue.publisher import publish_result

__all__ = ["start_worker", "publish_result"]
