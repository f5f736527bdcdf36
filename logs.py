import sys
from loguru import logger as base_logger
from pathlib import Path

from config import Config

LOG_FORMAT = "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> - <level>{level}</level>: <b>[{extra[context]}]</b> {message}"

base_logger.level("IN", no=20, color="<yellow>")
base_logger.level("OUT", no=20, color="<cyan>")
base_logger.configure(extra={"context": "DEFAULT"})


def configure(config: Config) -> Path:
    logs_path = Path(config.logfile)
    logs_path.parent.mkdir(parents=True, exist_ok=True)
    base_logger.remove()
    base_logger.add(sys.stderr, colorize=True, format=LOG_FORMAT)
    base_logger.add(logs_path, colorize=False, format=LOG_FORMAT, rotation="10 MB", enqueue=True)
    return logs_path


LOGS_PATH = configure(Config())

# Message content routinely contains "<@id>" mentions, so no colour markup in messages
logger = base_logger.bind(context="DEFAULT")
