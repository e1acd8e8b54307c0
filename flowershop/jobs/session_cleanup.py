import logging

from flowershop.config import settings
from flowershop.database import Database
from flowershop.services.session_service import clean_expired_sessions

logger = logging.getLogger(__name__)


def remove_expired_sessions(db: Database) -> int:
    with db.session() as session:
        removed = clean_expired_sessions(session)

    logger.info("Removed %s expired sessions", removed)
    return removed


if __name__ == "__main__":
    from flowershop.utils.log_config import setup_logging

    setup_logging(settings.log_level, settings.log_dir)
    database = Database(settings.database_url).open()
    try:
        remove_expired_sessions(database)
    finally:
        database.close()
