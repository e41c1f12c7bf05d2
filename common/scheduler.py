"""
Optional background scheduler for the daily overdue-payment sweep.
Uses APScheduler so a deployment without cron can still run the sweep.
Disabled unless ENABLE_BACKGROUND_SCHEDULER is set.
"""
import logging
import atexit
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from django.conf import settings
from django.core.management import call_command
from django.utils import timezone

logger = logging.getLogger(__name__)

# Global scheduler instance
scheduler = None


def sweep_overdue_payments_job():
    """Runs the sweep_overdue_payments management command"""
    logger.info("Starting scheduled overdue payment sweep...")
    try:
        call_command('sweep_overdue_payments')
    except Exception as e:
        # A failed run must not kill the scheduler thread; the next run retries
        logger.error(f"Error in scheduled overdue payment sweep: {str(e)}", exc_info=True)
        return
    logger.info("Scheduled overdue payment sweep completed")


def start_scheduler():
    """
    Initialize and start the background scheduler.
    This should be called once when Django starts.
    """
    global scheduler

    if scheduler is not None and scheduler.running:
        logger.warning("Scheduler is already running")
        return

    tz = timezone.get_current_timezone()
    hour = getattr(settings, 'OVERDUE_SWEEP_HOUR', 1)

    scheduler = BackgroundScheduler()
    scheduler.add_job(
        sweep_overdue_payments_job,
        trigger=CronTrigger(hour=hour, minute=0, timezone=tz),
        id='sweep_overdue_payments',
        name='Mark overdue payments',
        replace_existing=True,
        max_instances=1,  # Prevent overlapping runs
        coalesce=True  # Combine multiple pending executions into one
    )
    scheduler.start()
    logger.info(f"Background scheduler started; overdue sweep daily at {hour:02d}:00 ({tz})")

    atexit.register(stop_scheduler)


def stop_scheduler():
    """
    Stop the background scheduler.
    Should be called when Django shuts down.
    """
    global scheduler

    if scheduler is not None and scheduler.running:
        scheduler.shutdown(wait=True)
        logger.info("Background scheduler stopped")
    scheduler = None
