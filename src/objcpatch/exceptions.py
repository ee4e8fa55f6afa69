#
#  objcpatch | objcpatch
#  exceptions.py
#
#  Custom Exceptions for the fatal error classes. Per-slice and per-section failures are caught and logged
#   inside the patcher; only these escape to callers.
#
#  This file is part of objcpatch. objcpatch is free software that
#  is made available under the MIT license. Consult the
#  file "LICENSE" that is distributed together with this file
#  for the exact licensing terms.
#
#  Copyright (c) 0cyn 2026.
#

class InvalidConfigurationException(Exception):
    """
    Raised by PatchConfig.create for an empty replace pattern, or a pattern/replacement pair of unequal length
    """


class MalformedMachOException(Exception):
    """
    Header, load commands or fat arch table run past the bounds of the data they describe
    """


class UnsupportedFiletypeException(Exception):
    """
    """


class PatchWriteException(Exception):
    """
    """
