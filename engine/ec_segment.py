# vim:et sts=4 sw=4
#
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

'''Splits text into runs of plain text and emoji from the catalog

This is not a general grapheme cluster segmentation (UAX #29), it
only knows the codepoint ranges emoji sequences are built from.

See https://unicode.org/Public/emoji/15.0/emoji-test.txt
'''

from typing import List
from typing import NamedTuple
from typing import Optional
from typing import Union
import logging

import ec_util
from ec_entry import CatalogEntry
from ec_catalog import Catalog

LOGGER = logging.getLogger('emoji-catalog')

ZERO_WIDTH_JOINER = 0x200D
VARIATION_SELECTOR_16 = 0xFE0F
COMBINING_ENCLOSING_KEYCAP = 0x20E3
CANCEL_TAG = 0xE007F

PERSON_CATEGORY = 'People & Body'

NO_CODEPOINT = -1

def is_skin_tone(codepoint: int) -> bool:
    '''The 5 Fitzpatrick modifiers U+1F3FB - U+1F3FF'''
    return 0x1F3FB <= codepoint <= 0x1F3FF

def is_hairstyle(codepoint: int) -> bool:
    '''The 4 hair components U+1F9B0 - U+1F9B3'''
    return 0x1F9B0 <= codepoint <= 0x1F9B3

def is_zwj(codepoint: int) -> bool:
    return codepoint == ZERO_WIDTH_JOINER

def is_variation_selector(codepoint: int) -> bool:
    return codepoint == VARIATION_SELECTOR_16

def is_flag_tag(codepoint: int) -> bool:
    '''Tag characters spelling out a subdivision flag, up to CANCEL TAG'''
    return 0xE0062 <= codepoint <= CANCEL_TAG

def is_regional_indicator(codepoint: int) -> bool:
    '''Regional indicator symbols, two of them make a country flag'''
    return 0x1F1E6 <= codepoint <= 0x1F1FF

def is_emoji_candidate(codepoint: int) -> bool:
    '''Whether a codepoint may start or be part of an emoji

    Examples:

    >>> is_emoji_candidate(0x1F44B)
    True

    >>> is_emoji_candidate(0x1F3FC)
    False

    >>> is_emoji_candidate(ord('a'))
    False
    '''
    return ((0x1F300 <= codepoint <= 0x1FAF8 and not is_skin_tone(codepoint))
            or 0x1F004 <= codepoint <= 0x1F251
            or ZERO_WIDTH_JOINER < codepoint <= 0x3299)

def is_connector(codepoint: int) -> bool:
    '''Codepoints which continue or close an emoji but never stand alone

    Examples:

    >>> is_connector(0x200D)
    True

    >>> is_connector(0x1F3FC)
    True

    >>> is_connector(0x1F44B)
    False
    '''
    return (is_skin_tone(codepoint)
            or is_hairstyle(codepoint)
            or is_zwj(codepoint)
            or is_variation_selector(codepoint)
            or is_flag_tag(codepoint))

class SegmentationItem(NamedTuple):
    '''A run of plain text or one emoji found in a text

    Exactly one of the fields is set.

    text: str                      The plain text, empty for emoji
    entry: Optional[CatalogEntry]  The emoji from the catalog
    '''
    text: str = ''
    entry: Optional[CatalogEntry] = None

    @property
    def is_emoji(self) -> bool:
        return self.entry is not None

    @property
    def value(self) -> Union[str, CatalogEntry]:
        '''The catalog entry for emoji, the text otherwise'''
        if self.entry is not None:
            return self.entry
        return self.text

class Segmenter():
    '''Finds the emoji of a catalog in text

    Keeps no state between calls, one Segmenter can be used
    from several threads at once.

    Examples:

    >>> import ec_entry
    >>> wave = ec_entry.CatalogEntry(
    ...     canonical_code='1F44B', short_name='wave',
    ...     category='People & Body')
    >>> segmenter = Segmenter(Catalog([wave]))
    >>> [item.value for item in segmenter.segment('hello 👋 world')]
    ['hello ', CatalogEntry(canonical_code='1F44B', short_name='wave'), ' world']
    '''
    def __init__(self, catalog: Catalog) -> None:
        self._catalog = catalog
        self._debug_level = ec_util.get_debug_level()

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    def resolve(self, canonical_code: str) -> Optional[CatalogEntry]:
        '''Looks up a chain of hex codepoints in the catalog

        :param canonical_code: Hex codepoints joined by “-”, any case
        '''
        return self._catalog.lookup_by_codepoints(canonical_code.upper())

    def is_person_emoji(self, codepoint: int) -> bool:
        '''Whether the catalog puts this single codepoint into “People & Body”

        Only these emoji absorb a following skin tone modifier.
        '''
        entry = self._catalog.lookup_by_codepoints(f'{codepoint:04X}')
        return entry is not None and entry.category == PERSON_CATEGORY

    def _chain_closed(
            self,
            codepoint: int,
            next_codepoint: int,
            chain: List[str]) -> bool:
        '''Whether the emoji chain ends with this codepoint

        :param codepoint: The codepoint just added to the chain
        :param next_codepoint: The following codepoint, NO_CODEPOINT at
                               the end of the text
        :param chain: The chain including codepoint
        '''
        if next_codepoint == NO_CODEPOINT:
            return True
        if (is_emoji_candidate(codepoint)
                and is_skin_tone(next_codepoint)
                and not self.is_person_emoji(codepoint)):
            return True
        if (not is_emoji_candidate(next_codepoint)
                and not is_connector(next_codepoint)):
            return True
        if ((is_skin_tone(codepoint) or is_hairstyle(codepoint))
                and not is_zwj(next_codepoint)):
            return True
        # Two regional indicators make one flag.
        if is_regional_indicator(codepoint) and (
                not is_regional_indicator(next_codepoint) or len(chain) > 1):
            return True
        if (not is_regional_indicator(codepoint)
                and is_regional_indicator(next_codepoint)):
            return True
        if (is_variation_selector(codepoint)
                and not is_zwj(next_codepoint)
                and next_codepoint != COMBINING_ENCLOSING_KEYCAP):
            return True
        if codepoint == CANCEL_TAG:
            return True
        if (is_emoji_candidate(next_codepoint)
                and not is_regional_indicator(next_codepoint)
                and not is_connector(codepoint)):
            return True
        return False

    def segment(self, text: str) -> List[SegmentationItem]:
        '''Splits text into plain text runs and emoji

        Consecutive plain text is merged into one item, each emoji
        found becomes one item.  A sequence of emoji codepoints which
        is not in the catalog is dropped, it is neither returned as
        an emoji nor as text.

        :param text: The text to split
        '''
        items: List[SegmentationItem] = []
        plain_text: List[str] = []
        chain: List[str] = []
        codepoints = [ord(character) for character in text]
        for index, codepoint in enumerate(codepoints):
            next_codepoint = (codepoints[index + 1]
                              if index + 1 < len(codepoints)
                              else NO_CODEPOINT)
            if not (is_emoji_candidate(codepoint)
                    or is_connector(codepoint)
                    or is_variation_selector(next_codepoint)):
                plain_text.append(chr(codepoint))
                continue
            if plain_text:
                items.append(SegmentationItem(text=''.join(plain_text)))
                plain_text = []
            chain.append(f'{codepoint:04X}')
            if not self._chain_closed(codepoint, next_codepoint, chain):
                continue
            code = '-'.join(chain)
            chain = []
            entry = self.resolve(code)
            if entry is not None:
                items.append(SegmentationItem(entry=entry))
            elif self._debug_level > 1:
                LOGGER.debug('Dropping unknown emoji sequence %s', code)
        if plain_text:
            items.append(SegmentationItem(text=''.join(plain_text)))
        return items

    def emoji_only(self, text: str) -> List[CatalogEntry]:
        '''The emoji found in text, in order, without the plain text'''
        return [item.entry for item in self.segment(text)
                if item.entry is not None]

    def contains_emoji(self, text: str) -> bool:
        return any(item.is_emoji for item in self.segment(text))

if __name__ == "__main__":
    import sys
    import doctest
    (FAILED, _ATTEMPTED) = doctest.testmod()
    sys.exit(FAILED)
