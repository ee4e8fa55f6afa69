#
#  objcpatch | objcpatch
#  strategy.py
#
#  The two ways a name can be rewritten. Scanners only ever call apply(); whether a name is randomized or has a
#   pattern swapped out is decided once, when the strategy is built from the config.
#
#  This file is part of objcpatch. objcpatch is free software that
#  is made available under the MIT license. Consult the
#  file "LICENSE" that is distributed together with this file
#  for the exact licensing terms.
#
#  Copyright (c) 0cyn 2026.
#

import random
import string
from abc import ABC, abstractmethod
from typing import Optional

from objcpatch.config import PatchConfig, PatchMode
from objcpatch.exceptions import InvalidConfigurationException

ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits


class PatchStrategy(ABC):

    @abstractmethod
    def apply(self, original: bytes) -> Optional[bytes]:
        """
        Compute the replacement for one name.

        :param original: Name bytes, without the NUL terminator
        :return: None if the name should be left alone, otherwise bytes of exactly len(original)
        """


class RandomizeStrategy(PatchStrategy):
    def __init__(self, rng: random.Random):
        self.rng = rng

    def apply(self, original: bytes) -> Optional[bytes]:
        if not original:
            return None
        return ''.join(self.rng.choices(ALPHABET, k=len(original))).encode('ascii')


class ReplaceStrategy(PatchStrategy):
    def __init__(self, pattern: bytes, replacement: bytes):
        if not pattern:
            raise InvalidConfigurationException('replacement pattern cannot be empty')
        if len(pattern) != len(replacement):
            raise InvalidConfigurationException('pattern and replacement must be the same length in bytes')
        self.pattern = pattern
        self.replacement = replacement

    def apply(self, original: bytes) -> Optional[bytes]:
        patched = bytearray(original)
        replaced = False
        pos = patched.find(self.pattern)

        while pos != -1:
            patched[pos:pos + len(self.pattern)] = self.replacement
            replaced = True
            # resume after the replacement, so text it introduces is never matched again
            pos = patched.find(self.pattern, pos + len(self.replacement))

        return bytes(patched) if replaced else None


def strategy_for_config(config: PatchConfig, rng: Optional[random.Random] = None) -> PatchStrategy:
    if config.mode == PatchMode.REPLACE:
        return ReplaceStrategy(config.pattern_bytes, config.replacement_bytes)

    if rng is None:
        rng = random.Random(config.seed)
    return RandomizeStrategy(rng)
