import logging

_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def get_logger(name="inventory_client", level=None):
    logger = logging.getLogger(name)
    if not logger.handlers:
        logger.setLevel(level or logging.INFO)
        ch = logging.StreamHandler()
        ch.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(ch)
    return logger


def configure_logging(level: str = "INFO", http_level: str = "WARNING"):
    """Root app logger plus a quieter level for the HTTP stack."""
    logger = get_logger("inventory_client", level=level.upper())
    logger.setLevel(level.upper())
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(http_level.upper())
    return logger
