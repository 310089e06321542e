"""
Background scheduler for the optional nightly overdue sweep.
The sweep normally runs on demand; this job only exists when
FAMILY_TASKS_AUTO_SWEEP=1.
"""

import logging
from datetime import date
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from family_tasks.database import SessionLocal
from family_tasks.services.penalty_service import PenaltyService
from family_tasks.constants import AUTO_SWEEP_ENABLED, AUTO_SWEEP_TIME

logger = logging.getLogger("family_tasks.scheduler")

scheduler = AsyncIOScheduler()


def parse_sweep_time(time_str: str) -> tuple[int, int]:
    """
    Parse "HH:MM" or "HHMM" into (hour, minute).
    Falls back to 00:05 on malformed input.
    """
    t_str = (time_str or "").replace(":", "")
    if t_str.isdigit() and len(t_str) <= 4:
        t_str = t_str.zfill(4)
        hour, minute = int(t_str[:2]), int(t_str[2:])
        if 0 <= hour < 24 and 0 <= minute < 60:
            return hour, minute
    logger.warning(f"Invalid sweep time {time_str!r}, using 00:05")
    return 0, 5


async def run_overdue_sweep():
    """Job: sweep overdue tasks of every user"""
    db = SessionLocal()
    try:
        today = date.today()
        results = PenaltyService(db).check_all_users(today)
        penalized = sum(result["tasks_penalized"] for result in results)
        logger.info(f"Nightly sweep for {today}: {len(results)} user(s), {penalized} task(s) missed")
    except Exception as e:
        logger.error(f"Scheduler Error (Overdue sweep): {e}")
    finally:
        db.close()


def start_scheduler(enabled: bool = AUTO_SWEEP_ENABLED, sweep_time: str = AUTO_SWEEP_TIME) -> bool:
    """Start the scheduler if the nightly sweep is enabled; returns whether it runs"""
    if not enabled:
        logger.info("Nightly overdue sweep disabled")
        return False
    if not scheduler.running:
        hour, minute = parse_sweep_time(sweep_time)
        scheduler.add_job(
            run_overdue_sweep,
            CronTrigger(hour=hour, minute=minute),
            id="overdue_sweep",
            replace_existing=True
        )
        scheduler.start()
        logger.info(f"Nightly overdue sweep scheduled at {hour:02d}:{minute:02d}")
    return True


def stop_scheduler():
    if scheduler.running:
        scheduler.shutdown()
