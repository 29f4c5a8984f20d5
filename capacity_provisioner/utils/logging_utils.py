import logging
import threading

from colorama import Fore, Style

from ..configuration import LoggingConfig

DEFAULT_LOGGER_NAME = "capacity-provisioner"

# Predefined list of colors
THREAD_COLORS = [Fore.MAGENTA, Fore.GREEN, Fore.YELLOW, Fore.BLUE, Fore.WHITE, Fore.CYAN]
ASSIGNED_COLORS = {}

TRACE_LOGLEVEL = 5
logging.addLevelName(TRACE_LOGLEVEL, "TRACE")


def get_thread_color(thread_id):
    """
    Retrieves a color for the thread, assigning and remembering it for future calls.
    :param thread_id: Unique thread identifier (integer).
    :return: A color from the available list, or a default color if none are available.
    """
    if thread_id in ASSIGNED_COLORS:
        return ASSIGNED_COLORS[thread_id]

    if THREAD_COLORS:
        color = THREAD_COLORS.pop(0)
        ASSIGNED_COLORS[thread_id] = color
        return color
    else:
        return Fore.RESET


class ThreadColorFormatter(logging.Formatter):
    """
    Custom logging formatter that assigns colors to threads dynamically.
    """

    def format(self, record):
        thread_color = get_thread_color(threading.get_ident())

        if record.levelno >= logging.WARNING:
            thread_color = Fore.RED

        log_line = super().format(record)
        return f"{thread_color}{log_line}{Style.RESET_ALL}"


class ProvisionerLogger(logging.Logger):
    def __init__(self, name, level=logging.NOTSET):
        super().__init__(name, level)

    def trace(self, msg, *args, **kwargs):
        if self.isEnabledFor(TRACE_LOGLEVEL):
            self._log(TRACE_LOGLEVEL, msg, args, **kwargs)


logging.setLoggerClass(ProvisionerLogger)


def init_logger(logging_config: LoggingConfig, name=DEFAULT_LOGGER_NAME):
    logger = get_logger(name)
    logger.setLevel(logging.getLevelNamesMapping()[logging_config.level.upper()])

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    formatter_args = {
        'fmt': "{asctime:^19} | {name:^20.20} | {levelname[0]:^1} | {threadName:^12.12} | {message}",
        'style': "{",
        'datefmt': "%Y-%m-%d %H:%M:%S"
    }

    console_handler.setFormatter(ThreadColorFormatter(**formatter_args))
    logger.addHandler(console_handler)

    file_config = logging_config.file
    if file_config:
        file_handler = logging.FileHandler(file_config.path, mode='a')
        file_handler.setFormatter(logging.Formatter(**formatter_args))
        logger.addHandler(file_handler)


def get_logger(name=DEFAULT_LOGGER_NAME) -> ProvisionerLogger:
    """
    Returns a logger instance configured for the given name.
    """
    logger = logging.getLogger(name)
    logger.propagate = False

    return logger


def attach_uvicorn_to_my_logger(base_logger_name: str = DEFAULT_LOGGER_NAME) -> None:
    base = logging.getLogger(base_logger_name)

    handlers = list(base.handlers)
    level = base.level

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers.clear()
        for handler in handlers:
            uvicorn_logger.addHandler(handler)
        uvicorn_logger.setLevel(level)
        uvicorn_logger.propagate = False
