# qsim/log.py
import logging
import sys

FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level="INFO", name: str = "qsim") -> logging.Logger:
    """Attach a single stdout handler to the package logger (safe to call repeatedly)."""
    logger = logging.getLogger(name)
    logger.setLevel(level)
    if not any(getattr(h, "_qsim", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(fmt=FORMAT, datefmt=DATEFMT))
        handler._qsim = True
        logger.addHandler(handler)
    return logger
