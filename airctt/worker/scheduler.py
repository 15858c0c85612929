"""
Periodic job scheduler
"""

import logging
from datetime import timezone

from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.cron import CronTrigger

from airctt.worker.coupon_expiry import main as expire_coupons

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def build_scheduler() -> BlockingScheduler:
    scheduler = BlockingScheduler(timezone=timezone.utc)
    scheduler.add_job(
        expire_coupons,
        CronTrigger(minute=0),
        id="coupon_expiry",
        replace_existing=True,
    )
    return scheduler


def main() -> None:
    scheduler = build_scheduler()
    logger.info("Scheduler started. Coupon expiry runs at the top of every hour (UTC).")
    scheduler.start()


if __name__ == "__main__":
    main()
