import sys

from loguru import logger


def setup_logging(level: str = "INFO") -> None:
    """Configure loguru's stderr output for this package's own diagnostics and LoguruScribe."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format="<level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
    )
