import logging
import sys

from colorama import Fore, Style

LOG_FORMAT = "%(levelname)-7s %(name)s: %(message)s"


class ColorFormatter(logging.Formatter):
    COLORS = {
        logging.DEBUG: Fore.CYAN,
        logging.INFO: Fore.GREEN,
        logging.WARNING: Fore.YELLOW,
        logging.ERROR: Fore.RED,
        logging.CRITICAL: Fore.MAGENTA,
    }

    def format(self, record:logging.LogRecord) -> str:
        msg = super().format(record)
        color = self.COLORS.get(record.levelno, "")
        return color + msg + Style.RESET_ALL


def format_api_call(api_name:str, args) -> str:
    """
    Render an intercepted API call the way the emulator's tracer prints it:
    the API name in light red followed by one blue line per argument.
    """
    lines = [Fore.LIGHTRED_EX + api_name + Style.RESET_ALL]
    for arg in args:
        lines.append(Fore.BLUE + "  [" + type(arg).__name__ + "] > " + repr(arg) + Style.RESET_ALL)
    return "\n".join(lines)


def setup_logging(level=logging.INFO, stream=None) -> logging.Logger:
    logger = logging.getLogger("pyntfs")
    for handler in list(logger.handlers):
        if getattr(handler, "_pyntfs_console", False):
            logger.removeHandler(handler)
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(ColorFormatter(LOG_FORMAT))
    handler._pyntfs_console = True
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger
