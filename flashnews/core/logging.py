from loguru import logger
import sys

from flashnews.core import config


def setup_logging() -> None:
    """Настройка логирования приложения."""

    # Удаляем дефолтный handler
    logger.remove()

    # Консольный вывод
    logger.add(
        sys.stdout,
        level=config.LOG_LEVEL,
        format="<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{module}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
    )

    # Файловое логирование
    if config.LOG_FILE:
        logger.add(
            config.LOG_FILE,
            level="INFO",
            rotation="10 MB",
            retention="10 days",
            compression="zip"
        )
