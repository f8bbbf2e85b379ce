import logging
import os

LOG_LEVEL_ENV = "ROLLDOWN_ANALYZER_LOG_LEVEL"
LOG_FILE_ENV = "ROLLDOWN_ANALYZER_LOG_FILE"


def setup_logger(name: str = __name__,
                 log_file: str | None = None, level: int | str | None = None) -> logging.Logger:
    logger = logging.getLogger(name)

    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, "INFO")
    if isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper())
        # unknown names come back as "Level <name>"
        level = resolved if isinstance(resolved, int) else logging.INFO
    logger.setLevel(level)

    if not logger.handlers:
        formatter = logging.Formatter('%(asctime)s [%(levelname)s] %(name)s: %(message)s')

        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

        log_file = log_file or os.environ.get(LOG_FILE_ENV)
        if log_file:
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    return logger
