import inspect
import os
import time
from datetime import datetime, timezone

import psutil
from rich.console import Console
from rich.markup import escape

_console = Console(stderr=True, highlight=False)

# Mapping of logType to (before, after) symbols and rich style
LOG_TYPES = {
    'SUCCESS': ('^^^', '^^^', 'green'),
    'FAILURE': ('###', '###', 'red bold'),
    'STATE': ('~~~', '~~~', 'cyan'),
    'INFO': ('---', '---', 'blue'),
    'HEADER': ('===', '===', 'magenta bold'),
    'IMPORTANT': ('===', '===', 'magenta'),
    'CRITICAL': ('***', '***', 'red bold'),
    'EXCEPTION': ('!!!', '!!!', 'red bold'),
    'WARNING': ('(((', ')))', 'yellow'),
    'DEBUG': ('[[[', ']]]', 'white'),
    'ATTEMPT': ('???', '???', 'cyan'),
    'STARTING': ('>>>', '>>>', 'green'),
    'PROGRESS': ('vvv', 'vvv', 'blue'),
    'COMPLETED': ('<<<', '<<<', 'green'),
}

# DEBUG is the only type below the default threshold
LOG_LEVELS = {'DEBUG': 10, 'INFO': 20, 'WARNING': 30, 'FAILURE': 40, 'CRITICAL': 50}
_LOG_TYPE_LEVELS = {
    'DEBUG': 10,
    'WARNING': 30,
    'FAILURE': 40,
    'EXCEPTION': 40,
    'CRITICAL': 50,
}

_threshold = LOG_LEVELS.get(os.environ.get('HIPDF_LOG_LEVEL', 'INFO').upper(), 20)


def set_log_level(level: str) -> None:
    """
    Set the minimum level printed by Print().

    Args:
        level: One of DEBUG, INFO, WARNING, FAILURE, CRITICAL

    Raises:
        ValueError: If the level name is unknown
    """
    global _threshold
    name = level.upper()
    if name not in LOG_LEVELS:
        raise ValueError(
            f"Unknown log level: '{level}'. "
            f"Available levels: {', '.join(LOG_LEVELS)}"
        )
    _threshold = LOG_LEVELS[name]


def get_log_level() -> str:
    for name, value in LOG_LEVELS.items():
        if value == _threshold:
            return name
    return str(_threshold)


def Print(logType: str, message: str) -> None:
    """
    Prints a log message with timestamp, function name, symbols wrapping the logType, and the message.

    Messages below the configured level (see set_log_level) are dropped.
    """
    logTypeUpper = logType.upper()
    if _LOG_TYPE_LEVELS.get(logTypeUpper, 20) < _threshold:
        return

    try:
        timestamp = datetime.fromtimestamp(time.time(), tz=timezone.utc).isoformat(timespec='microseconds')

        before_symbol, after_symbol, style = LOG_TYPES.get(logTypeUpper, ('', '', ''))
        formattedLogType = f"{before_symbol} {logTypeUpper} {after_symbol}"
        if style:
            formattedLogType = f"[{style}]{formattedLogType}[/{style}]"

        # Caller of Print, not Print itself
        caller = inspect.currentframe().f_back
        function_name = caller.f_code.co_name if caller is not None else '<unknown>'

        _console.print(f"{timestamp} {formattedLogType} {function_name.ljust(40)} {escape(message)}", soft_wrap=True)

    except Exception as e:
        print(f"Something went wrong when attempting to print.\nError: {e}")


def CPU_and_Mem_usage() -> str:
    """
    Returns a string with the CPU usage and memory usage of the current process.
    """
    current_process = psutil.Process(os.getpid())
    cpu_usage = current_process.cpu_percent(interval=0.1)
    memory_usage_mb = current_process.memory_info().rss / (1024 ** 2)
    return f"CPU Usage: {cpu_usage}%, Process Memory Usage: {memory_usage_mb:.2f} MB"
