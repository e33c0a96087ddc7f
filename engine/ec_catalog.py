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

'''A module to load the emoji catalog and to look up emoji in it.

The catalog file has one emoji per line.  Each field is terminated
by “#”, list valued fields separate their items with “!”, and the
skin variation block separates variations with “!” and the fields
of each variation with “,”.

'''

from typing import Any
from typing import Dict
from typing import Mapping
from typing import List
from typing import Set
from typing import Tuple
from typing import Iterable
from typing import Optional
from typing import Union
import sys
import os
import gzip
import functools
import types
import logging

import rapidfuzz

import ec_util
from ec_entry import CatalogEntry
from ec_entry import LegacyCodes
from ec_entry import ImageAvailability
from ec_entry import SkinTone

LOGGER = logging.getLogger('emoji-catalog')

FIELD_DELIMITER = '#'
LIST_DELIMITER = '!'
SKIN_FIELD_DELIMITER = ','

RECORD_FIELDS = (
    'name', 'canonical_code', 'non_qualified_code',
    'docomo', 'au', 'softbank', 'google',
    'image_file', 'sheet_x', 'sheet_y',
    'short_name', 'short_name_aliases', 'ascii_text', 'ascii_aliases',
    'category', 'subcategory', 'sort_order', 'added_in_version',
    'has_image_apple', 'has_image_google',
    'has_image_twitter', 'has_image_facebook',
    'skin_variants', 'obsoletes', 'obsoleted_by',
)

SKIN_VARIANT_FIELDS = (
    'tone_key', 'canonical_code', 'non_qualified_code', 'image_file',
    'sheet_x', 'sheet_y', 'added_in_version',
    'has_image_apple', 'has_image_google',
    'has_image_twitter', 'has_image_facebook',
    'obsoletes', 'obsoleted_by',
)

# “obsoletes” and “obsoleted_by” may be missing at the end of a
# record or of a skin variation.
NUMBER_OF_OPTIONAL_FIELDS = 2

# rapidfuzz.fuzz.token_set_ratio() score needed to be a candidate
GOOD_MATCH_SCORE = 90.0

class MalformedRecordError(ValueError):
    '''Raised when a line of the catalog file cannot be parsed'''

def _nullable(value: str) -> Optional[str]:
    '''Empty fields mean “absent”

    Examples:

    >>> _nullable('')
    >>> _nullable('2764')
    '2764'
    '''
    return value if value else None

def _parse_list(value: str) -> Tuple[str, ...]:
    '''Splits a list valued field

    Examples:

    >>> _parse_list('+1!thumbsup!')
    ('+1', 'thumbsup')

    >>> _parse_list('')
    ()
    '''
    return tuple(item for item in value.split(LIST_DELIMITER) if item)

def _parse_int(value: str, field_name: str) -> int:
    try:
        return int(value)
    except ValueError as error:
        raise MalformedRecordError(
            f'{field_name}={value!r} is not an integer') from error

def _parse_bool(value: str) -> bool:
    '''Only “true”, ignoring case, is True'''
    return value.strip().lower() == 'true'

def _split_fields(
        text: str,
        delimiter: str,
        field_names: Tuple[str, ...]) -> Dict[str, str]:
    '''Splits text at delimiter and maps the values to the field names

    Each field may be terminated by the delimiter, the optional
    fields at the end may be missing.

    Examples:

    >>> _split_fields('a,b,', ',', ('x', 'y', 'z', 'w'))
    {'x': 'a', 'y': 'b', 'z': '', 'w': ''}

    >>> _split_fields('a,,c', ',', ('x', 'y', 'z', 'w'))
    {'x': 'a', 'y': '', 'z': 'c', 'w': ''}
    '''
    values = text.split(delimiter)
    if text.endswith(delimiter):
        values = values[:-1]
    minimum = len(field_names) - NUMBER_OF_OPTIONAL_FIELDS
    if not minimum <= len(values) <= len(field_names):
        raise MalformedRecordError(
            f'{len(values)} fields, expected at least {minimum} '
            f'and at most {len(field_names)}: {text!r}')
    values += [''] * (len(field_names) - len(values))
    return dict(zip(field_names, values))

def _image_availability(values: Dict[str, str]) -> ImageAvailability:
    return ImageAvailability(
        apple=_parse_bool(values['has_image_apple']),
        google=_parse_bool(values['has_image_google']),
        twitter=_parse_bool(values['has_image_twitter']),
        facebook=_parse_bool(values['has_image_facebook']))

def parse_skin_variants(
        block: str,
        name: Optional[str],
        short_name: Optional[str],
        category: Optional[str],
        subcategory: Optional[str],
        sort_order: int) -> Mapping[str, CatalogEntry]:
    '''Parses the skin variation block of a record

    The variations inherit category, subcategory and sort order
    from their base emoji and derive name and short name from it.

    :param block: The skin variation field of the record
    :param name: Name of the base emoji
    :param short_name: Short name of the base emoji
    :param category: Category of the base emoji
    :param subcategory: Subcategory of the base emoji
    :param sort_order: Sort order of the base emoji
    :return: The variations keyed by their tone key, read only
    '''
    skin_variants: Dict[str, CatalogEntry] = {}
    for variant in block.split(LIST_DELIMITER):
        if not variant:
            continue
        values = _split_fields(
            variant, SKIN_FIELD_DELIMITER, SKIN_VARIANT_FIELDS)
        tone_key = values['tone_key']
        if not tone_key or not values['canonical_code']:
            raise MalformedRecordError(
                f'skin variation without tone or code: {variant!r}')
        skin_variants[tone_key] = CatalogEntry(
            canonical_code=values['canonical_code'],
            name=(f'{name}: {SkinTone.variation_name(tone_key)}'
                  if name else None),
            non_qualified_code=_nullable(values['non_qualified_code']),
            image_file=_nullable(values['image_file']),
            sheet_x=_parse_int(values['sheet_x'], 'sheet_x'),
            sheet_y=_parse_int(values['sheet_y'], 'sheet_y'),
            short_name=f'{short_name}:{tone_key}' if short_name else None,
            category=category,
            subcategory=subcategory,
            sort_order=sort_order,
            added_in_version=_nullable(values['added_in_version']),
            has_image=_image_availability(values),
            obsoletes=_nullable(values['obsoletes']),
            obsoleted_by=_nullable(values['obsoleted_by']))
    return types.MappingProxyType(skin_variants)

def parse_record(line: str) -> CatalogEntry:
    '''Parses one line of the catalog file

    :param line: The line, with or without the line terminator
    :return: The emoji with its skin variations
    :raise MalformedRecordError: If the line cannot be parsed
    '''
    values = _split_fields(
        line.rstrip('\r\n'), FIELD_DELIMITER, RECORD_FIELDS)
    if not values['canonical_code']:
        raise MalformedRecordError(f'record without code: {line!r}')
    name = _nullable(values['name'])
    short_name = _nullable(values['short_name'])
    category = _nullable(values['category'])
    subcategory = _nullable(values['subcategory'])
    sort_order = _parse_int(values['sort_order'], 'sort_order')
    ascii_aliases = _parse_list(values['ascii_aliases'])
    return CatalogEntry(
        canonical_code=values['canonical_code'],
        name=name,
        non_qualified_code=_nullable(values['non_qualified_code']),
        legacy_codes=LegacyCodes(
            docomo=_nullable(values['docomo']),
            au=_nullable(values['au']),
            softbank=_nullable(values['softbank']),
            google=_nullable(values['google'])),
        image_file=_nullable(values['image_file']),
        sheet_x=_parse_int(values['sheet_x'], 'sheet_x'),
        sheet_y=_parse_int(values['sheet_y'], 'sheet_y'),
        short_name=short_name,
        short_name_aliases=_parse_list(values['short_name_aliases']),
        ascii_text=_nullable(values['ascii_text']),
        ascii_aliases=ascii_aliases if ascii_aliases else None,
        category=category,
        subcategory=subcategory,
        sort_order=sort_order,
        added_in_version=_nullable(values['added_in_version']),
        has_image=_image_availability(values),
        skin_variants=parse_skin_variants(
            values['skin_variants'], name, short_name,
            category, subcategory, sort_order),
        obsoletes=_nullable(values['obsoletes']),
        obsoleted_by=_nullable(values['obsoleted_by']))

# Called for every label of every emoji for each query
@functools.lru_cache(maxsize=None)
def _match_rapidfuzz(label: str, match_string: str) -> float:
    '''Matches a label from the catalog against the query string.'''
    return float(rapidfuzz.fuzz.token_set_ratio(
        label, match_string, score_cutoff=GOOD_MATCH_SCORE))

def _labels(entry: CatalogEntry) -> List[str]:
    '''The texts a query is matched against, lower case'''
    labels: List[str] = []
    for label in ((entry.name,)
                  + (entry.short_name,)
                  + entry.short_name_aliases):
        if not label:
            continue
        label = label.replace('_', ' ').lower()
        if label not in labels:
            labels.append(label)
    return labels

class Catalog():
    '''The emoji catalog

    Indexes all emoji and their skin tone variations by canonical
    code and by short name.  Read only once constructed, a Catalog
    can be shared between threads without locking.
    '''

    def __init__(self,
                 entries: Iterable[CatalogEntry] = (),
                 version: str = '',
                 source: str = '',
                 skipped_records: int = 0) -> None:
        '''
        Initialize the catalog

        :param entries: The top level emoji, skin variations are
                        indexed through their base emoji
        :param version: Version of the catalog data
        :param source: Where the data came from, for log messages
        :param skipped_records: Number of records which could not be parsed
        '''
        self._version = version
        self._source = source
        self._skipped_records = skipped_records
        self._by_code: Dict[str, CatalogEntry] = {}
        self._by_short_name: Dict[str, CatalogEntry] = {}
        self._base_entries: List[CatalogEntry] = []
        for entry in entries:
            self._base_entries.append(entry)
            self._index(entry)
            for variant in entry.skin_variants.values():
                self._index(variant)

    def _index(self, entry: CatalogEntry) -> None:
        if entry.canonical_code in self._by_code:
            LOGGER.warning('Duplicate canonical code %s in %s',
                           entry.canonical_code, self._source)
        self._by_code[entry.canonical_code] = entry
        if entry.short_name:
            self._by_short_name[entry.short_name] = entry

    @classmethod
    def from_records(cls,
                     lines: Iterable[Union[str, bytes]],
                     version: str = '',
                     source: str = '<records>') -> 'Catalog':
        '''Builds a catalog from lines in the catalog file format

        Lines which cannot be parsed are logged and skipped.  Lines
        given as bytes are decoded as UTF-8, a line which is not valid
        UTF-8 is skipped as well.

        :param lines: The records, one emoji per line
        :param version: Version of the catalog data
        :param source: Where the lines came from, for log messages
        '''
        entries: List[CatalogEntry] = []
        skipped = 0
        for line in lines:
            if not line.strip():
                continue
            try:
                if isinstance(line, bytes):
                    line = line.decode('utf-8')
                entries.append(parse_record(line))
            except (MalformedRecordError, UnicodeDecodeError):
                skipped += 1
                LOGGER.exception('Error parsing line: %r', line)
        catalog = cls(entries, version=version, source=source,
                      skipped_records=skipped)
        LOGGER.info(
            'Loaded %s emoji (%s short names) from %s, version “%s”, '
            '%s records skipped',
            len(catalog), len(catalog.short_names()), source,
            version, skipped)
        return catalog

    @classmethod
    def load(cls, path: str = '') -> 'Catalog':
        '''Loads the catalog from a file

        If a file “emoji.properties” is next to the catalog file,
        its “version” (or “commit”) value becomes the version of
        the catalog.

        :param path: Full path of the catalog file.  If empty,
                     $EMOJI_CATALOG_PATH or the data directories
                     are searched.
        :raise FileNotFoundError: If there is no catalog file
        '''
        if not path:
            (path, open_function) = ec_util.find_catalog_path()
            if not path or open_function is None:
                raise FileNotFoundError(
                    f'No emoji catalog {ec_util.CATALOG_BASENAMES} '
                    f'found in {ec_util.catalog_dirnames()}')
        elif path.endswith('.gz'):
            open_function = gzip.open
        else:
            open_function = open
        properties_path = os.path.join(
            os.path.dirname(path), ec_util.PROPERTIES_BASENAME)
        version = ''
        if os.path.exists(properties_path):
            properties = ec_util.read_properties(properties_path)
            version = properties.get('version', properties.get('commit', ''))
        # decoded line by line, one bad byte only loses its record
        with open_function(path, mode='rb') as catalog_file: # type: ignore
            return cls.from_records(catalog_file, version=version, source=path)

    @property
    def version(self) -> str:
        return self._version

    @property
    def source(self) -> str:
        return self._source

    @property
    def skipped_records(self) -> int:
        '''Number of records skipped because they could not be parsed'''
        return self._skipped_records

    def __len__(self) -> int:
        return len(self._by_code)

    def __contains__(self, canonical_code: Any) -> bool:
        return canonical_code in self._by_code

    def lookup_by_codepoints(self, code: str) -> Optional[CatalogEntry]:
        '''Returns the emoji for a canonical code, None if there is none

        If the code is not found as it is, it is tried again with
        a variation selector 16 appended, i.e. the unqualified form
        of a fully qualified emoji finds the emoji.

        :param code: Hex codepoints joined by “-”, e.g. “1F44B-1F3FC”
        '''
        entry = self._by_code.get(code)
        if entry is None:
            entry = self._by_code.get(code + '-FE0F')
        return entry

    def lookup_by_short_name(self, short_name: str) -> Optional[CatalogEntry]:
        return self._by_short_name.get(short_name)

    def lookup_by_code_name(self, code_name: str) -> Optional[CatalogEntry]:
        '''Looks up a short name wrapped in colons, like “:wave:”'''
        if (len(code_name) > 2
                and code_name.startswith(':') and code_name.endswith(':')):
            return self.lookup_by_short_name(code_name[1:-1])
        return None

    def lookup_by_character(self, text: str) -> Optional[CatalogEntry]:
        '''Returns the emoji which is exactly this text

        Compares with every emoji in the catalog, use
        lookup_by_codepoints() if speed matters.

        :param text: The emoji as text, e.g. “👋”
        '''
        for entry in self._by_code.values():
            if entry.character == text:
                return entry
        return None

    def character_for_short_name(self, short_name: str) -> Optional[str]:
        entry = self.lookup_by_short_name(short_name)
        if entry is None:
            return None
        return entry.character

    def short_names(self) -> Set[str]:
        return set(self._by_short_name)

    def entries(self) -> List[CatalogEntry]:
        '''All emoji, including all skin tone variations'''
        return list(self._by_code.values())

    def base_entries(self) -> List[CatalogEntry]:
        '''The emoji of the catalog file in file order, no variations'''
        return list(self._base_entries)

    def categories(self) -> Set[str]:
        return {entry.category
                for entry in self._by_short_name.values()
                if entry.category}

    def entries_in_category(self, category: str) -> List[CatalogEntry]:
        '''Returns the emoji of a category sorted by sort order

        An emoji matches if its category is contained in the string
        given, so a label joining several categories like
        “Smileys & Emotion, People & Body” returns all of them.

        :param category: A category or a label containing categories
        '''
        return sorted(
            (entry for entry in self._by_short_name.values()
             if entry.category and entry.category in category),
            key=lambda entry: entry.sort_order)

    def search(self, query: str) -> List[CatalogEntry]:
        '''Finds emoji whose short name contains a word of the query

        The results for each word of the query are sorted by sort
        order and appended one after the other.  An emoji matching
        several words is returned several times.

        :param query: Words separated by white space
        '''
        results: List[CatalogEntry] = []
        for word in query.split():
            results += sorted(
                (entry for short_name, entry in self._by_short_name.items()
                 if word in short_name),
                key=lambda entry: entry.sort_order)
        return results

    def candidates(
            self,
            query: str,
            match_limit: int = 20) -> List[CatalogEntry]:
        '''Finds the emoji which match a query best

        Scores names, short names and aliases of the emoji from the
        catalog file (not the skin tone variations) with
        rapidfuzz.fuzz.token_set_ratio().  Sorted by score, then
        by sort order.

        :param query: Words to match, “_” counts as a space
        :param match_limit: Maximum number of emoji returned
        '''
        query = query.replace('_', ' ').strip().lower()
        if not query:
            return []
        scored: List[Tuple[float, CatalogEntry]] = []
        for entry in self._base_entries:
            score = max(
                (_match_rapidfuzz(label, query) for label in _labels(entry)),
                default=0.0)
            if score >= GOOD_MATCH_SCORE:
                scored.append((score, entry))
        scored.sort(key=lambda item: (-item[0], item[1].sort_order))
        return [entry for (_score, entry) in scored[:match_limit]]

    def apply_tone(
            self,
            entry: Optional[CatalogEntry],
            tone1: SkinTone,
            tone2: Optional[SkinTone] = None) -> Optional[CatalogEntry]:
        '''Returns the variation of an emoji with the given skin tone(s)

        Returns the emoji unchanged if there is no such variation.

        :param entry: An emoji without skin tone
        :param tone1: The tone, or the tone of the first person
        :param tone2: The tone of the second person, same as tone1
                      if not given
        '''
        if entry is None:
            return None
        if tone2 is None:
            tone2 = tone1
        if (SkinTone.NO_SKIN_TONE in (tone1, tone2)
                or not entry.skin_variants):
            return entry
        if tone1 == tone2:
            if tone1.code in entry.skin_variants:
                return entry.skin_variants[tone1.code]
            return entry.skin_variants.get(
                f'{tone1.code}-{tone1.code}', entry)
        return entry.skin_variants.get(f'{tone1.code}-{tone2.code}', entry)

    def remove_tone(
            self,
            entry: Optional[CatalogEntry],
            tone: SkinTone) -> Optional[CatalogEntry]:
        '''Returns the emoji without the skin tone

        Tries to remove the tone at the end of the canonical code,
        then from inside the code, then from inside the code putting
        a variation selector 16 in its place.  If the tone is both at
        the end and inside the code, like in a variation with the same
        tone for two persons, both are removed.  The first of these
        which is the base of skin tone variations wins.  Returns the
        emoji unchanged if none is.

        :param entry: An emoji with skin tone
        :param tone: The skin tone contained in the emoji
        '''
        if entry is None:
            return None
        if tone is SkinTone.NO_SKIN_TONE:
            return entry
        code = entry.canonical_code
        suffix = f'-{tone.code}'
        infix = f'-{tone.code}-'
        candidate_codes: List[str] = []
        if code.endswith(suffix):
            candidate_codes.append(code[:-len(suffix)])
        if infix in code:
            candidate_codes.append(code.replace(infix, '-'))
            candidate_codes.append(code.replace(infix, '-FE0F-'))
        if code.endswith(suffix) and infix in code[:-len(suffix)]:
            # the same tone for both persons, like “1F3FB-1F3FB”
            stripped = code[:-len(suffix)]
            candidate_codes.append(stripped.replace(infix, '-'))
            candidate_codes.append(stripped.replace(infix, '-FE0F-'))
        for candidate_code in candidate_codes:
            base = self.lookup_by_codepoints(candidate_code)
            if base is not None and base.skin_variants:
                return base
        return entry

    def remove_any_tone(
            self, entry: Optional[CatalogEntry]) -> Optional[CatalogEntry]:
        '''Tries remove_tone() with every skin tone

        Returns the first result which differs from the emoji given,
        or the emoji unchanged.
        '''
        for tone in SkinTone.tones():
            base = self.remove_tone(entry, tone)
            if base is not entry:
                return base
        return entry

    def base_entry(
            self, entry: Optional[CatalogEntry]) -> Optional[CatalogEntry]:
        '''Returns the emoji a skin tone variation belongs to

        Uses the short name of the variation, “wave:1F3FC” belongs
        to “wave”.  Also works for variations with two different
        tones, which remove_tone() cannot reduce.  Returns the emoji
        unchanged if it is not a variation.
        '''
        if entry is None or not entry.short_name:
            return entry
        return self._by_short_name.get(
            entry.short_name.split(':')[0], entry)

BENCHMARK = True

def main() -> None:
    '''
    Used for testing and profiling.

    “python3 ec_catalog.py”

    runs the doctests, loads the catalog if one is installed
    and prints profiling data.
    '''
    ec_util.setup_logging()

    if BENCHMARK:
        import cProfile # pylint: disable=import-outside-toplevel
        import pstats # pylint: disable=import-outside-toplevel
        profile = cProfile.Profile()
        profile.enable()

    import doctest # pylint: disable=import-outside-toplevel
    flags = doctest.REPORT_NDIFF #|doctest.FAIL_FAST
    (failed, _attempted) = doctest.testmod(optionflags=flags)

    try:
        catalog = Catalog.load()
        for query in ('wave', 'flag', 'thumbs up'):
            LOGGER.info('candidates(%r) -> %s',
                        query, catalog.candidates(query, match_limit=5))
    except FileNotFoundError as error:
        LOGGER.info('Skipping catalog: %s', error)

    if BENCHMARK:
        profile.disable()
        stats = pstats.Stats(profile)
        stats.strip_dirs()
        stats.sort_stats('cumulative')
        stats.print_stats('ec_catalog', 25)

    LOGGER.info(
        '_match_rapidfuzz() cache info: %s',
        _match_rapidfuzz.cache_info()) # pylint: disable=no-value-for-parameter

    sys.exit(failed)

if __name__ == "__main__":
    main()
