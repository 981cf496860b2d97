# ielts_portal/workers/worker_main.py

from rq import Queue, SimpleWorker

from ielts_portal.core.logging_config import setup_logging
from ielts_portal.workers.queue import SCORING_QUEUE_NAME, get_redis_connection

QUEUE_NAMES = [SCORING_QUEUE_NAME]


def main():
    setup_logging()
    redis_conn = get_redis_connection()

    queues = [Queue(name, connection=redis_conn) for name in QUEUE_NAMES]
    worker = SimpleWorker(queues, connection=redis_conn)
    worker.work()


if __name__ == "__main__":
    main()
