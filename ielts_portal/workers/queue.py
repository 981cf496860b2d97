# ielts_portal/workers/queue.py

from redis import Redis
from rq import Queue

from ielts_portal.core.config import settings

SCORING_QUEUE_NAME = "scoring"

_redis_conn: Redis | None = None


def get_redis_connection() -> Redis:
    global _redis_conn
    if _redis_conn is None:
        _redis_conn = Redis.from_url(settings.REDIS_URL)
    return _redis_conn


def get_queue(name: str = SCORING_QUEUE_NAME) -> Queue:
    return Queue(name, connection=get_redis_connection())


def enqueue_rescore_task(submission_id: int) -> str:
    from ielts_portal.workers.tasks import rescore_writing_task

    job = get_queue(SCORING_QUEUE_NAME).enqueue(rescore_writing_task, submission_id)
    return job.id
