import logging

from ksense_assessment.settings import settings

_BASE_LOGGER_NAME = "ksense_assessment"
_CONFIGURED = False


def _resolve_log_level(level_name: str) -> int:
    level = getattr(logging, (level_name or "").strip().upper(), None)
    if isinstance(level, int):
        return level
    return logging.INFO


def configure_logging() -> None:
    global _CONFIGURED
    if _CONFIGURED:
        return

    base_logger = logging.getLogger(_BASE_LOGGER_NAME)
    log_level = _resolve_log_level(settings.LOG_LEVEL)

    if not base_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(settings.LOG_FORMAT))
        base_logger.addHandler(handler)
        base_logger.propagate = False
    base_logger.setLevel(log_level)

    if log_level == logging.INFO and (settings.LOG_LEVEL or "").strip().upper() != "INFO":
        base_logger.warning(
            "[logger] Invalid LOG_LEVEL '%s', fallback to INFO",
            settings.LOG_LEVEL,
        )

    _CONFIGURED = True


def get_logger(name=None) -> logging.Logger:
    configure_logging()
    base_logger = logging.getLogger(_BASE_LOGGER_NAME)
    if not name or name == _BASE_LOGGER_NAME:
        return base_logger
    if name.startswith(_BASE_LOGGER_NAME + "."):
        name = name[len(_BASE_LOGGER_NAME) + 1:]
    return base_logger.getChild(name)
