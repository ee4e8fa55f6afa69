#
#  objcpatch | tests
#  test_config.py
#
#  This file is part of objcpatch. objcpatch is free software that
#  is made available under the MIT license. Consult the
#  file "LICENSE" that is distributed together with this file
#  for the exact licensing terms.
#
#  Copyright (c) 0cyn 2026.
#

import os
import unittest

from objcpatch.config import PatchConfig, PatchMode
from objcpatch.exceptions import InvalidConfigurationException


class PatchConfigTestCase(unittest.TestCase):

    def test_defaults_to_randomize(self):
        config = PatchConfig.create()
        self.assertEqual(config.mode, PatchMode.RANDOMIZE)
        self.assertEqual(config.exclusions, frozenset())
        self.assertFalse(config.quiet)
        self.assertFalse(config.dry_run)
        self.assertIsNone(config.seed)

    def test_replace_mode(self):
        config = PatchConfig.create(replace=('Foo', 'Bar'))
        self.assertEqual(config.mode, PatchMode.REPLACE)
        self.assertEqual(config.pattern, 'Foo')
        self.assertEqual(config.replacement, 'Bar')

    def test_length_mismatch_rejected(self):
        with self.assertRaises(InvalidConfigurationException):
            PatchConfig.create(replace=('AB', 'C'))

    def test_growing_replacement_rejected(self):
        # a replacement that contains its own pattern can't be the same length, so it never reaches the scanner
        with self.assertRaises(InvalidConfigurationException):
            PatchConfig.create(replace=('A', 'AA'))

    def test_empty_pattern_rejected(self):
        with self.assertRaises(InvalidConfigurationException):
            PatchConfig.create(replace=('', ''))

    def test_lengths_compared_in_bytes(self):
        # 'é' is two bytes in UTF-8
        with self.assertRaises(InvalidConfigurationException):
            PatchConfig.create(replace=('é', 'e'))
        config = PatchConfig.create(replace=('é', 'ee'))
        self.assertEqual(config.mode, PatchMode.REPLACE)

    def test_replace_needs_two_tokens(self):
        with self.assertRaises(InvalidConfigurationException):
            PatchConfig.create(replace=('Foo',))

    def test_exclusions(self):
        config = PatchConfig.create(exclusions=['AppDelegate', 'AppDelegate', 'ViewController'])
        self.assertEqual(config.exclusions, frozenset({'AppDelegate', 'ViewController'}))
        self.assertEqual(config.excluded_names, frozenset({b'AppDelegate', b'ViewController'}))

    def test_non_utf8_exclusion(self):
        # undecodable argv bytes reach us surrogate-escaped
        name = os.fsdecode(b'Caf\xff')
        config = PatchConfig.create(exclusions=[name])
        self.assertEqual(config.excluded_names, frozenset({b'Caf\xff'}))

    def test_non_utf8_replace(self):
        config = PatchConfig.create(replace=(os.fsdecode(b'A\xff'), 'BC'))
        self.assertEqual(config.pattern_bytes, b'A\xff')
        self.assertEqual(config.replacement_bytes, b'BC')

        with self.assertRaises(InvalidConfigurationException):
            PatchConfig.create(replace=(os.fsdecode(b'A\xff'), 'B'))

    def test_unencodable_names_rejected(self):
        with self.assertRaises(InvalidConfigurationException):
            PatchConfig.create(exclusions=['\ud800'])
        with self.assertRaises(InvalidConfigurationException):
            PatchConfig.create(replace=('\ud800', 'abc'))

    def test_immutable(self):
        config = PatchConfig.create(dry_run=True)
        with self.assertRaises(AttributeError):
            config.dry_run = False


if __name__ == '__main__':
    unittest.main()
