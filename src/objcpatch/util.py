#
#  objcpatch | objcpatch
#  util.py
#
#  This file contains miscellaneous utilities used around objcpatch
#
#  This file is part of objcpatch. objcpatch is free software that
#  is made available under the MIT license. Consult the
#  file "LICENSE" that is distributed together with this file
#  for the exact licensing terms.
#
#  Copyright (c) 0cyn 2026.
#
import sys
from importlib.metadata import version, PackageNotFoundError

from pygments import highlight
from pygments.formatters.terminal import TerminalFormatter
from pygments.lexers.data import JsonLexer

from objcpatch_lib.log import log, LogLevel, print_err

try:
    OBJCPATCH_VERSION = version('objcpatch')
except PackageNotFoundError:
    OBJCPATCH_VERSION = '1.0.0'

OUT_IS_TTY = sys.stdout.isatty()


def version_output():
    print(f'objcpatch v{OBJCPATCH_VERSION}. by cynder. gh/0cyn')


def highlight_json(input):
    formatter = TerminalFormatter()
    return highlight(input, JsonLexer(), formatter)


def decode_name(raw: bytes) -> str:
    """
    Class/category names are almost always ASCII; anything else is still printed, just lossy.
    """
    return raw.decode('utf-8', errors='replace')
