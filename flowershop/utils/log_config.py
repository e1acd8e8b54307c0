import logging
import os
from logging.handlers import TimedRotatingFileHandler
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str = "INFO", log_dir: Optional[str] = None) -> None:
    """
    Console logging always; when log_dir is set, also a file that rolls
    over every 3 hours.
    """
    root = logging.getLogger()
    root.setLevel(level.upper())

    formatter = logging.Formatter(LOG_FORMAT)

    if not any(getattr(h, "_flowershop", False) for h in root.handlers):
        console = logging.StreamHandler()
        console.setFormatter(formatter)
        console._flowershop = True
        root.addHandler(console)

        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
            file_handler = TimedRotatingFileHandler(
                os.path.join(log_dir, "flowershop.log"),
                when="H",
                interval=3,
                backupCount=56,
                encoding="utf-8",
            )
            file_handler.setFormatter(formatter)
            file_handler._flowershop = True
            root.addHandler(file_handler)

    # uvicorn access lines are noisy next to our own request logging
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
