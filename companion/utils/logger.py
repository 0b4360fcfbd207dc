import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from companion.config import Config

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def _log_file_path(log_dir: str) -> Path:
    """Dated log file for today, creating the directory on first use"""
    directory = Path(log_dir)
    directory.mkdir(parents=True, exist_ok=True)
    return directory / f'companion_{datetime.now().strftime("%Y%m%d")}.log'


def _build_handlers(level: int, log_dir: Optional[str]) -> List[logging.Handler]:
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    handlers: List[logging.Handler] = [console]
    
    # File output keeps DEBUG detail regardless of the console level
    if log_dir:
        file_handler = logging.FileHandler(_log_file_path(log_dir), encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        handlers.append(file_handler)
    
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def setup_logger(name: str, log_dir: Optional[str] = None) -> logging.Logger:
    """
    Attach console (and optional file) output to a logger once.
    
    Child loggers created with logging.getLogger(f"{name}.<module>") propagate
    to it, so entry points call this for the package root only.
    
    Args:
        name: Logger name, usually the package root
        log_dir: Directory for dated log files; defaults to Config.LOG_DIR,
            an empty value disables file output
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    
    level = logging.DEBUG if Config.DEBUG else logging.INFO
    logger.setLevel(level)
    
    for handler in _build_handlers(level, Config.LOG_DIR if log_dir is None else log_dir):
        logger.addHandler(handler)
    
    return logger
