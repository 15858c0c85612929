from __future__ import annotations

import logging

from sqlmodel import Session

from airctt import crud
from airctt.core.db import engine
from airctt.models import utc_now

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("coupon_expiry")


def main() -> int:
    now = utc_now()
    with Session(engine) as session:
        expired = crud.expire_issued_coupons(session=session, now=now)
    logger.info("coupon expiry done: now=%s expired=%s", now.isoformat(), expired)
    return expired


if __name__ == "__main__":  # pragma: no cover
    main()
