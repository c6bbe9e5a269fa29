import logging
import logging.handlers
import os

LOG_FORMAT = "[{asctime}] [{levelname:<8}] [{name}]: {message}"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Libraries that log too much below these levels
LIBRARY_LEVELS = {
    "discord": logging.INFO,
    "discord.gateway": logging.INFO,
    "discord.http": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
    "sqlalchemy.pool": logging.WARNING,
    "asyncpg": logging.WARNING,
}


def setup_logging(
    log_file: str = "logs/tickets.log", mode: str = "INFO", file_backup: int = 5
) -> logging.Handler:
    """
    Configures console and rotating file logging for the tickets bot.

    Parameters
    ----------
    log_file : str, optional
        Path to the log file. Defaults to "logs/tickets.log".
    mode : str, optional
        Level name for the bot's own loggers (e.g. "INFO", "DEBUG").
        Unknown names fall back to INFO.
    file_backup : int, optional
        Number of rotated log files to keep. Defaults to 5.

    Returns
    -------
    logging.Handler
        The file handler attached to the root logger.
    """

    log_dir = os.path.dirname(log_file)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT, style="{")

    logging.basicConfig(
        level=getattr(logging, mode.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        style="{",
    )

    root_logger = logging.getLogger()
    for handler in root_logger.handlers:
        handler.setFormatter(formatter)

    file_handler = logging.handlers.RotatingFileHandler(
        filename=log_file,
        encoding="utf-8",
        maxBytes=20 * 1024 * 1024,  # 20 MB
        backupCount=file_backup,
    )
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    for name, level in LIBRARY_LEVELS.items():
        logging.getLogger(name).setLevel(level)

    return file_handler
