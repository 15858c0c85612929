"""Block until the database answers, before migrations run (scripts/prestart.sh)"""
import logging

from sqlalchemy import Engine
from sqlmodel import Session, select
from tenacity import after_log, before_log, retry, stop_after_attempt, wait_fixed

from airctt.core.config import settings
from airctt.core.db import engine

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

max_tries = 60 * 5  # five minutes at one try per second
wait_seconds = 1


@retry(
    stop=stop_after_attempt(max_tries),
    wait=wait_fixed(wait_seconds),
    before=before_log(logger, logging.INFO),
    after=after_log(logger, logging.WARN),
)
def init(db_engine: Engine) -> None:
    try:
        with Session(db_engine) as session:
            session.exec(select(1))
    except Exception as e:
        logger.error("database not ready: %s", e)
        raise


def main() -> None:
    logger.info(
        "Waiting for database %s on %s:%s",
        settings.POSTGRES_DB, settings.POSTGRES_SERVER, settings.POSTGRES_PORT,
    )
    init(engine)
    logger.info("Database ready")


if __name__ == "__main__":  # pragma: no cover
    main()
