import os
import sys

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)

_configured = False


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").lower() in ("1", "true", "yes")


def setup_logging(level="INFO", suppress_console=None, enable_file_logging=None):
    """
    Point the shared loguru logger at stderr and, optionally, a log file.

    The import-time call configures once; passing either flag reconfigures,
    which is how the CLI switches between machine and human output.

    Args:
        level: Minimum level for the stderr sink
        suppress_console: Drop the stderr sink. None reads PHPSORTER_MACHINE_MODE.
        enable_file_logging: Add a rotating file under .phpsorter/logs.
            None reads PHPSORTER_FILE_LOGGING.
    """
    global _configured

    if _configured and suppress_console is None and enable_file_logging is None:
        return
    _configured = True

    logger.remove()

    if suppress_console is None:
        suppress_console = _env_flag("PHPSORTER_MACHINE_MODE")
    if not suppress_console:
        logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT, colorize=True)

    if enable_file_logging is None:
        enable_file_logging = _env_flag("PHPSORTER_FILE_LOGGING")
    if enable_file_logging:
        from phpsorter.paths import get_paths
        paths = get_paths()
        paths.ensure_dirs()
        logger.add(
            paths.logs_dir / "phpsorter.log",
            level="DEBUG",
            rotation="5 MB",
            retention=3,
            catch=True,
        )


setup_logging()
