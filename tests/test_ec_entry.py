#!/usr/bin/python3

# emoji-catalog - Emoji catalog lookup and text segmentation
#
# Copyright (c) 2023-2024 The emoji-catalog authors
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>

'''
This file implements test cases for the catalog records and the enums
'''

import sys
import dataclasses
import unittest

import testutils # pylint: disable=import-error

# pylint: disable=wrong-import-position
sys.path.insert(0, testutils.ENGINE_DIR)
from ec_entry import SkinTone # pylint: disable=import-error
from ec_entry import EmojiCategory # pylint: disable=import-error
from ec_entry import CatalogEntry # pylint: disable=import-error
from ec_entry import LegacyCodes # pylint: disable=import-error
from ec_entry import ImageAvailability # pylint: disable=import-error
sys.path.pop(0)
# pylint: enable=wrong-import-position

# pylint: disable=missing-function-docstring
# pylint: disable=missing-class-docstring
# pylint: disable=invalid-name

class SkinToneTestCase(unittest.TestCase):
    def test_tones(self) -> None:
        self.assertEqual(
            [tone.code for tone in SkinTone.tones()],
            ['1F3FB', '1F3FC', '1F3FD', '1F3FE', '1F3FF'])
        self.assertNotIn(SkinTone.NO_SKIN_TONE, SkinTone.tones())

    def test_from_code(self) -> None:
        self.assertIs(SkinTone.from_code('1F3FB'), SkinTone.LIGHT_SKIN_TONE)
        self.assertIs(SkinTone.from_code('1f3fd'), SkinTone.MEDIUM_SKIN_TONE)
        self.assertIs(SkinTone.from_code('1F600'), SkinTone.NO_SKIN_TONE)
        self.assertIs(SkinTone.from_code(''), SkinTone.NO_SKIN_TONE)

    def test_text_and_label(self) -> None:
        self.assertEqual(SkinTone.DARK_SKIN_TONE.text, '✋\U0001F3FF')
        self.assertEqual(SkinTone.NO_SKIN_TONE.text, '✋')
        self.assertEqual(
            SkinTone.MEDIUM_DARK_SKIN_TONE.label, 'MEDIUM DARK SKIN TONE')

    def test_variation_name(self) -> None:
        self.assertEqual(
            SkinTone.variation_name('1F3FB'), 'LIGHT SKIN TONE')
        self.assertEqual(
            SkinTone.variation_name('1F3FD-1F3FC'),
            'MEDIUM SKIN TONE, MEDIUM LIGHT SKIN TONE')

class EmojiCategoryTestCase(unittest.TestCase):
    def test_labels(self) -> None:
        self.assertEqual(len(list(EmojiCategory)), 8)
        self.assertIn('People & Body', EmojiCategory.SMILEYS_PEOPLE.label)
        self.assertIn('Smileys & Emotion', EmojiCategory.SMILEYS_PEOPLE.label)
        self.assertEqual(EmojiCategory.FLAGS.label, 'Flags')
        self.assertEqual(EmojiCategory.SMILEYS_PEOPLE.character, '\U0001F600')

class CatalogEntryTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.variant = CatalogEntry(
            canonical_code='1F44B-1F3FC',
            name='WAVING HAND SIGN: MEDIUM LIGHT SKIN TONE',
            short_name='wave:1F3FC',
            category='People & Body',
            sort_order=150)
        self.wave = CatalogEntry(
            canonical_code='1F44B',
            name='WAVING HAND SIGN',
            short_name='wave',
            short_name_aliases=('wave',),
            category='People & Body',
            sort_order=150,
            skin_variants={'1F3FC': self.variant})

    def test_defaults(self) -> None:
        entry = CatalogEntry(canonical_code='1F600')
        self.assertIsNone(entry.name)
        self.assertIsNone(entry.non_qualified_code)
        self.assertEqual(entry.legacy_codes, LegacyCodes())
        self.assertEqual(entry.has_image, ImageAvailability())
        self.assertFalse(entry.has_image.apple)
        self.assertEqual(entry.short_name_aliases, ())
        self.assertIsNone(entry.ascii_aliases)
        self.assertEqual(entry.skin_variants, {})
        self.assertFalse(entry.has_skin_variants)
        self.assertEqual(entry.skin_tone_keys, [])

    def test_character(self) -> None:
        self.assertEqual(self.wave.character, '👋')
        self.assertEqual(self.variant.character, '\U0001F44B\U0001F3FC')

    def test_code_name(self) -> None:
        self.assertEqual(self.wave.code_name, ':wave:')
        self.assertEqual(self.variant.code_name, ':wave:1F3FC:')
        self.assertEqual(CatalogEntry(canonical_code='1F44B').code_name, '')

    def test_multi_codepoint(self) -> None:
        self.assertFalse(self.wave.is_multi_codepoint)
        self.assertTrue(self.variant.is_multi_codepoint)

    def test_skin_variants(self) -> None:
        self.assertTrue(self.wave.has_skin_variants)
        self.assertEqual(self.wave.skin_tone_keys, ['1F3FC'])
        self.assertIs(self.wave.skin_variants['1F3FC'], self.variant)

    def test_immutable(self) -> None:
        with self.assertRaises(dataclasses.FrozenInstanceError):
            self.wave.short_name = 'hand' # type: ignore

    def test_skin_variants_read_only(self) -> None:
        with self.assertRaises(TypeError):
            self.wave.skin_variants['1F3FD'] = self.variant # type: ignore
        with self.assertRaises(TypeError):
            del self.wave.skin_variants['1F3FC'] # type: ignore
        self.assertEqual(self.wave.skin_tone_keys, ['1F3FC'])
        with self.assertRaises(TypeError):
            CatalogEntry(canonical_code='1F600').skin_variants['1F3FB'] = self.variant # type: ignore

    def test_compare_by_identity(self) -> None:
        copy = dataclasses.replace(self.wave)
        self.assertEqual(copy.canonical_code, self.wave.canonical_code)
        self.assertNotEqual(copy, self.wave)
        self.assertEqual(self.wave, self.wave)
        self.assertEqual(len({self.wave, copy, self.wave}), 2)

    def test_repr(self) -> None:
        self.assertEqual(
            repr(self.wave),
            "CatalogEntry(canonical_code='1F44B', short_name='wave')")

if __name__ == '__main__':
    unittest.main()
