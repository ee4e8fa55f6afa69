#
#  objcpatch | objcpatch_lib
#  log.py
#
#  Leveled logging with swappable output sinks.
#
#  This file is part of objcpatch. objcpatch is free software that
#  is made available under the MIT license. Consult the
#  file "LICENSE" that is distributed together with this file
#  for the exact licensing terms.
#
#  Copyright (c) 0cyn 2026.
#

from enum import Enum
import sys
import inspect
import os

from objcpatch_lib.structs import Struct


class LogLevel(Enum):
    NONE = -1
    ERROR = 0
    WARN = 1
    INFO = 2
    DEBUG = 3
    # one line per write and per unmapped address. pipe this to a file.
    DEBUG_MORE = 4


def print_err(msg):
    print(msg, file=sys.stderr)


class log:
    """
    LOG_FUNC receives debug/info lines and the patch progress lines; LOG_ERR receives warnings and errors.
        Tools embedding objcpatch (and the tests) swap these out to capture output.

    Leveled lines look like `ERROR - objcpatch.macho:L#120:MachOFile:__init__() - Bad Magic: 0x0`
    """

    LOG_LEVEL = LogLevel.ERROR
    # Callables taking one str
    LOG_FUNC = print
    LOG_ERR = print_err

    @staticmethod
    def call_site():
        # [0] is this function, [1] is _emit, [2] the level method, [3] whoever called it
        frame = inspect.stack()[3]
        module = os.path.basename(frame.filename).split('.')[0]
        owner = frame.frame.f_locals.get('self', None)
        if owner is not None:
            owner = type(owner).__name__
        elif 'cls' in frame.frame.f_locals:
            owner = frame.frame.f_locals['cls'].__name__

        func = f'{owner}:{frame.function}' if owner else frame.function
        return f'objcpatch.{module}:L#{frame.lineno}:{func}()'

    @staticmethod
    def _emit(level: LogLevel, tag, sink, msg):
        if log.LOG_LEVEL.value < level.value:
            return
        if isinstance(msg, Struct):
            msg = str(msg)
        sink(f'{tag} - {log.call_site()} - {msg}')

    @staticmethod
    def out(msg: str = ""):
        """Progress output. Not gated by LOG_LEVEL; callers decide whether to emit (quiet mode)."""
        log.LOG_FUNC(msg)

    @staticmethod
    def debug(msg=""):
        log._emit(LogLevel.DEBUG, 'DEBUG', log.LOG_FUNC, msg)

    @staticmethod
    def debug_more(msg=""):
        log._emit(LogLevel.DEBUG_MORE, 'DEBUG-2', log.LOG_FUNC, msg)

    @staticmethod
    def info(msg=""):
        log._emit(LogLevel.INFO, 'INFO', log.LOG_FUNC, msg)

    @staticmethod
    def warn(msg=""):
        log._emit(LogLevel.WARN, 'WARN', log.LOG_ERR, msg)

    @staticmethod
    def error(msg=""):
        log._emit(LogLevel.ERROR, 'ERROR', log.LOG_ERR, msg)
