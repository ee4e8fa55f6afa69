#
#  objcpatch | objcpatch
#  config.py
#
#  Validated, immutable run configuration. Everything that can make a run invalid is checked here, before a single
#   byte of the target is read.
#
#  This file is part of objcpatch. objcpatch is free software that
#  is made available under the MIT license. Consult the
#  file "LICENSE" that is distributed together with this file
#  for the exact licensing terms.
#
#  Copyright (c) 0cyn 2026.
#

import os
from enum import Enum
from typing import FrozenSet, Iterable, NamedTuple, Optional

from objcpatch.exceptions import InvalidConfigurationException


class PatchMode(Enum):
    RANDOMIZE = 0
    REPLACE = 1


class PatchConfig(NamedTuple):
    exclusions: FrozenSet[str] = frozenset()
    mode: PatchMode = PatchMode.RANDOMIZE
    pattern: str = ''
    replacement: str = ''
    quiet: bool = False
    dry_run: bool = False
    seed: Optional[int] = None

    @classmethod
    def create(cls, exclusions: Iterable[str] = (), replace: Optional[Iterable[str]] = None, quiet=False,
               dry_run=False, seed: Optional[int] = None) -> 'PatchConfig':
        """
        Build a validated config.

        :param exclusions: Class names (exact match) that are never touched in __objc_classname
        :param replace: None for randomize mode, or exactly (pattern, replacement)
        :param quiet: Suppress progress output
        :param dry_run: Patch in memory only; never write the file
        :param seed: Seed for the randomize generator. None seeds from OS entropy
        :raises InvalidConfigurationException:
        """
        mode = PatchMode.RANDOMIZE
        pattern = ''
        replacement = ''

        if replace is not None:
            replace = list(replace)
            if len(replace) != 2:
                raise InvalidConfigurationException('--replace takes exactly a pattern and a replacement')

            pattern, replacement = replace
            if not pattern:
                raise InvalidConfigurationException('replacement pattern cannot be empty')

            # Patches are byte-for-byte in place, so compare the encoded lengths rather than character counts.
            # argv bytes that aren't valid UTF-8 arrive surrogate-escaped; fsencode gives the raw bytes back.
            try:
                pattern_len, replacement_len = len(os.fsencode(pattern)), len(os.fsencode(replacement))
            except UnicodeEncodeError as ex:
                raise InvalidConfigurationException(f'replace argument can\'t be encoded: {str(ex)}') from ex
            if pattern_len != replacement_len:
                raise InvalidConfigurationException('for binary safety, the replacement pattern and the replacement '
                                                    'string must be the same length')
            mode = PatchMode.REPLACE

        config = cls(frozenset(exclusions), mode, pattern, replacement, bool(quiet), bool(dry_run), seed)
        try:
            config.excluded_names
        except UnicodeEncodeError as ex:
            raise InvalidConfigurationException(f'excluded class name can\'t be encoded: {str(ex)}') from ex
        return config

    @property
    def excluded_names(self) -> FrozenSet[bytes]:
        return frozenset(os.fsencode(name) for name in self.exclusions)

    @property
    def pattern_bytes(self) -> bytes:
        return os.fsencode(self.pattern)

    @property
    def replacement_bytes(self) -> bytes:
        return os.fsencode(self.replacement)
