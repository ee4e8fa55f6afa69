#
#  objcpatch | tests
#  test_strategy.py
#
#  This file is part of objcpatch. objcpatch is free software that
#  is made available under the MIT license. Consult the
#  file "LICENSE" that is distributed together with this file
#  for the exact licensing terms.
#
#  Copyright (c) 0cyn 2026.
#

import random
import unittest

from objcpatch.config import PatchConfig
from objcpatch.exceptions import InvalidConfigurationException
from objcpatch.strategy import ALPHABET, RandomizeStrategy, ReplaceStrategy, strategy_for_config


class ReplaceStrategyTestCase(unittest.TestCase):

    def test_every_occurrence_replaced(self):
        strategy = ReplaceStrategy(b'Foo', b'Bar')
        self.assertEqual(strategy.apply(b'FooBarFoo'), b'BarBarBar')

    def test_no_occurrence(self):
        strategy = ReplaceStrategy(b'Foo', b'Bar')
        self.assertIsNone(strategy.apply(b'ViewController'))

    def test_non_overlapping(self):
        strategy = ReplaceStrategy(b'aa', b'bb')
        self.assertEqual(strategy.apply(b'aaa'), b'bba')

    def test_scan_resumes_after_replacement(self):
        # Rescanning from the start would turn 'aba' into 'baa'
        strategy = ReplaceStrategy(b'ab', b'ba')
        self.assertEqual(strategy.apply(b'aab'), b'aba')

    def test_bad_construction_rejected(self):
        with self.assertRaises(InvalidConfigurationException):
            ReplaceStrategy(b'', b'')
        with self.assertRaises(InvalidConfigurationException):
            ReplaceStrategy(b'AB', b'C')

    def test_raw_bytes_pattern(self):
        strategy = ReplaceStrategy(b'A\xff', b'BC')
        self.assertEqual(strategy.apply(b'XA\xffY'), b'XBCY')

    def test_length_preserved(self):
        strategy = ReplaceStrategy(b'_Suffix', b'_Sfx000')
        original = b'TestClass_Suffix'
        patched = strategy.apply(original)
        self.assertEqual(patched, b'TestClass_Sfx000')
        self.assertEqual(len(patched), len(original))


class RandomizeStrategyTestCase(unittest.TestCase):

    def test_alphabet(self):
        self.assertEqual(len(ALPHABET), 62)
        self.assertEqual(len(set(ALPHABET)), 62)

    def test_length_and_charset(self):
        strategy = RandomizeStrategy(random.Random(1))
        for original in [b'A', b'MyClass', b'NSObject_Private_Extension' * 4]:
            patched = strategy.apply(original)
            self.assertEqual(len(patched), len(original))
            self.assertTrue(all(chr(c) in ALPHABET for c in patched))

    def test_empty_name_untouched(self):
        strategy = RandomizeStrategy(random.Random(1))
        self.assertIsNone(strategy.apply(b''))

    def test_seeded_generator_is_deterministic(self):
        first = RandomizeStrategy(random.Random(1234))
        second = RandomizeStrategy(random.Random(1234))
        names = [b'AppDelegate', b'ViewController', b'Model']
        self.assertEqual([first.apply(n) for n in names], [second.apply(n) for n in names])

    def test_generator_is_shared_across_names(self):
        strategy = RandomizeStrategy(random.Random(99))
        self.assertNotEqual(strategy.apply(b'SameLength'), strategy.apply(b'SameLength'))


class StrategyForConfigTestCase(unittest.TestCase):

    def test_randomize_uses_config_seed(self):
        config = PatchConfig.create(seed=7)
        first = strategy_for_config(config)
        second = strategy_for_config(config)
        self.assertIsInstance(first, RandomizeStrategy)
        self.assertEqual(first.apply(b'SomeClassName'), second.apply(b'SomeClassName'))

    def test_injected_generator(self):
        rng = random.Random(5)
        strategy = strategy_for_config(PatchConfig.create(seed=1), rng)
        self.assertIs(strategy.rng, rng)

    def test_replace(self):
        strategy = strategy_for_config(PatchConfig.create(replace=('Foo', 'Bar')))
        self.assertIsInstance(strategy, ReplaceStrategy)
        self.assertEqual(strategy.pattern, b'Foo')
        self.assertEqual(strategy.replacement, b'Bar')


if __name__ == '__main__':
    unittest.main()
