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

'''The records stored in the emoji catalog and the enums describing
skin tones and picker categories.

'''

from typing import Mapping
from typing import List
from typing import Tuple
from typing import Optional
from dataclasses import dataclass, field
from enum import Enum
import types

import ec_util

class SkinTone(Enum):
    '''The skin tone modifiers

    The value of each member is the hex codepoint of the modifier
    as used in the keys of CatalogEntry.skin_variants.

    Examples:

    >>> SkinTone.MEDIUM_LIGHT_SKIN_TONE.code
    '1F3FC'

    >>> SkinTone.from_code('1F3FF')
    <SkinTone.DARK_SKIN_TONE: '1F3FF'>

    >>> SkinTone.from_code('1F600')
    <SkinTone.NO_SKIN_TONE: ''>

    >>> SkinTone.variation_name('1F3FC-1F3FD')
    'MEDIUM LIGHT SKIN TONE, MEDIUM SKIN TONE'
    '''
    NO_SKIN_TONE = ''
    LIGHT_SKIN_TONE = '1F3FB'
    MEDIUM_LIGHT_SKIN_TONE = '1F3FC'
    MEDIUM_SKIN_TONE = '1F3FD'
    MEDIUM_DARK_SKIN_TONE = '1F3FE'
    DARK_SKIN_TONE = '1F3FF'

    @property
    def code(self) -> str:
        '''The hex codepoint of the modifier, empty for NO_SKIN_TONE'''
        return str(self.value)

    @property
    def text(self) -> str:
        '''A raised hand showing this tone'''
        return '✋' + ec_util.codepoints_to_text(self.code)

    @property
    def label(self) -> str:
        return self.name.replace('_', ' ')

    @classmethod
    def tones(cls) -> List['SkinTone']:
        '''All real tones, without NO_SKIN_TONE, in enumeration order'''
        return [tone for tone in cls if tone is not cls.NO_SKIN_TONE]

    @classmethod
    def from_code(cls, code: str) -> 'SkinTone':
        '''Returns the tone for a hex codepoint, NO_SKIN_TONE if unknown'''
        for tone in cls:
            if tone.code == code.upper():
                return tone
        return cls.NO_SKIN_TONE

    @classmethod
    def variation_name(cls, tone_key: str) -> str:
        '''Human readable name of a skin variation key

        :param tone_key: One tone code or two dash joined tone codes
        '''
        return ', '.join(cls.from_code(code).label
                         for code in tone_key.split('-'))

class EmojiCategory(Enum):
    '''The categories an emoji picker shows

    Each member is a tuple (label, character).  The label of the
    first one joins two catalog categories, Catalog.entries_in_category()
    matches an entry when its category is contained in the label.
    '''
    SMILEYS_PEOPLE = ('Smileys & Emotion, People & Body', '\U0001F600')
    NATURE = ('Animals & Nature', '\U0001F43B')
    FOOD_DRINK = ('Food & Drink', '\U0001F354')
    ACTIVITY = ('Activities', '⚽')
    TRAVEL = ('Travel & Places', '\U0001F680')
    OBJECTS = ('Objects', '\U0001F4A1')
    SYMBOLS = ('Symbols', '\U0001F495')
    FLAGS = ('Flags', '\U0001F38C')

    @property
    def label(self) -> str:
        return str(self.value[0])

    @property
    def character(self) -> str:
        return str(self.value[1])

@dataclass(frozen=True)
class LegacyCodes:
    '''Codepoints used by Japanese carriers before Unicode had emoji'''
    docomo: Optional[str] = None
    au: Optional[str] = None
    softbank: Optional[str] = None
    google: Optional[str] = None

@dataclass(frozen=True)
class ImageAvailability:
    '''Which image sets have a picture of the emoji'''
    apple: bool = False
    google: bool = False
    twitter: bool = False
    facebook: bool = False

@dataclass(frozen=True, eq=False)
class CatalogEntry:
    '''
    One emoji of the catalog, immutable

    name: Optional[str]             Unicode name.  Skin tone variants get
                                    “{base name}: {tone label}”.
    canonical_code: str             Hex codepoints joined by “-”, e.g.
                                    “1F44B-1F3FC”.  Unique in the catalog.
    non_qualified_code: Optional[str]
                                    The same without the trailing FE0F
    legacy_codes: LegacyCodes       docomo, au, softbank, google
    image_file: Optional[str]       Name of the image in the sprite set
    sheet_x: int                    Column in the sprite sheet
    sheet_y: int                    Row in the sprite sheet
    short_name: Optional[str]       Primary keyword.  Skin tone variants
                                    get “{base short name}:{tone key}”.
    short_name_aliases: Tuple[str, ...]
                                    All keywords, may be empty
    ascii_text: Optional[str]       Preferred ASCII smiley, like “:)”
    ascii_aliases: Optional[Tuple[str, ...]]
                                    More ASCII smileys
    category: Optional[str]         For example “People & Body”
    subcategory: Optional[str]      For example “hand-fingers-open”
    sort_order: int                 Position in the whole catalog
    added_in_version: Optional[str] Emoji version
    has_image: ImageAvailability    Image availability per image set
    skin_variants: Mapping[str, CatalogEntry]
                                    Keyed by one tone code or two dash
                                    joined tone codes.  Empty, never None,
                                    and read only.
    obsoletes: Optional[str]        canonical code of an older entry
    obsoleted_by: Optional[str]     canonical code of a newer entry

    Entries compare by identity, there is exactly one entry per
    canonical code in a catalog.
    '''
    canonical_code: str
    name: Optional[str] = None
    non_qualified_code: Optional[str] = None
    legacy_codes: LegacyCodes = field(default_factory=LegacyCodes)
    image_file: Optional[str] = None
    sheet_x: int = 0
    sheet_y: int = 0
    short_name: Optional[str] = None
    short_name_aliases: Tuple[str, ...] = ()
    ascii_text: Optional[str] = None
    ascii_aliases: Optional[Tuple[str, ...]] = None
    category: Optional[str] = None
    subcategory: Optional[str] = None
    sort_order: int = 0
    added_in_version: Optional[str] = None
    has_image: ImageAvailability = field(default_factory=ImageAvailability)
    skin_variants: Mapping[str, 'CatalogEntry'] = field(
        default_factory=lambda: types.MappingProxyType({}))
    obsoletes: Optional[str] = None
    obsoleted_by: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.skin_variants, types.MappingProxyType):
            object.__setattr__(
                self, 'skin_variants',
                types.MappingProxyType(dict(self.skin_variants)))

    @property
    def character(self) -> str:
        '''The emoji as text

        Examples:

        >>> CatalogEntry(canonical_code='1F44B-1F3FC').character
        '👋🏼'
        '''
        return ec_util.codepoints_to_text(self.canonical_code)

    @property
    def code_name(self) -> str:
        '''The short name wrapped in colons, empty if there is none

        Examples:

        >>> CatalogEntry(canonical_code='1F44B', short_name='wave').code_name
        ':wave:'

        >>> CatalogEntry(canonical_code='1F44B').code_name
        ''
        '''
        if not self.short_name:
            return ''
        return f':{self.short_name}:'

    @property
    def is_multi_codepoint(self) -> bool:
        '''True if the emoji is a sequence of more than one codepoint'''
        return '-' in self.canonical_code

    @property
    def has_skin_variants(self) -> bool:
        return bool(self.skin_variants)

    @property
    def skin_tone_keys(self) -> List[str]:
        return list(self.skin_variants)

    def __repr__(self) -> str:
        return (f'CatalogEntry(canonical_code={self.canonical_code!r}, '
                f'short_name={self.short_name!r})')

if __name__ == "__main__":
    import sys
    import doctest
    (FAILED, _ATTEMPTED) = doctest.testmod()
    sys.exit(FAILED)
