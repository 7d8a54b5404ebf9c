"""Process-wide logging setup, called once from the application lifespan."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    # SQLAlchemy echo is controlled by DEBUG; keep its pool chatter quiet otherwise
    logging.getLogger("sqlalchemy.pool").setLevel(logging.WARNING)
