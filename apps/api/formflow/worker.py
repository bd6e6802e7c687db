"""
Background worker for processing scheduled jobs.

Usage:
    python -m formflow.worker

The worker polls the jobs table for pending jobs and processes them.
Failed jobs go back to pending until they run out of attempts.
"""

import asyncio
import logging

from formflow.core.config import settings
from formflow.core.structured_logging import build_log_context
from formflow.db.session import SessionLocal
from formflow.jobs.registry import resolve_job_handler
from formflow.services import job_service

logger = logging.getLogger(__name__)


async def process_job(db, job) -> None:
    """Process a single job based on its type."""
    logger.info(
        "Processing job %s (type=%s, attempt=%s)",
        job.id,
        job.job_type,
        job.attempts,
        extra=build_log_context(job_id=job.id),
    )
    handler = resolve_job_handler(job.job_type)
    await handler(db, job)


async def process_pending_jobs(db, batch_size: int | None = None) -> int:
    """Run one batch of due jobs. Returns how many were picked up."""
    jobs = job_service.get_pending_jobs(db, limit=batch_size or settings.WORKER_BATCH_SIZE)
    if jobs:
        logger.info("Found %s pending jobs", len(jobs))

    for job in jobs:
        try:
            job_service.mark_job_running(db, job)
            await process_job(db, job)
            job_service.mark_job_completed(db, job)
            logger.info("Job %s completed successfully", job.id)
        except Exception as e:
            db.rollback()
            job_service.mark_job_failed(db, job, str(e))
            logger.error(
                "Job %s failed: %s",
                job.id,
                type(e).__name__,
                extra=build_log_context(job_id=job.id),
            )
    return len(jobs)


async def worker_loop() -> None:
    """Main worker loop - polls for and processes pending jobs."""
    logger.info(
        "Worker starting (poll interval: %ss, batch size: %s)",
        settings.WORKER_POLL_INTERVAL,
        settings.WORKER_BATCH_SIZE,
    )

    if not settings.RESEND_API_KEY:
        logger.warning("RESEND_API_KEY not set - emails will be logged but not sent")

    while True:
        with SessionLocal() as db:
            try:
                await process_pending_jobs(db)
            except Exception:
                logger.exception("Error in worker loop")

        await asyncio.sleep(settings.WORKER_POLL_INTERVAL)


def main() -> None:
    """Entry point for the worker."""
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    try:
        asyncio.run(worker_loop())
    except KeyboardInterrupt:
        logger.info("Worker shutting down")
    except Exception:
        logger.exception(
            "Worker crashed",
            extra=build_log_context(route="worker", method="background"),
        )
        raise


if __name__ == "__main__":
    main()
