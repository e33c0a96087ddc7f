# -*- coding: utf-8 -*-
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
'''
Utility functions used in emoji-catalog
'''

from typing import Any
from typing import Tuple
from typing import List
from typing import Dict
from typing import Optional
from typing import Iterable
from typing import Callable
import sys
import os
import gzip
import logging
import logging.handlers

import xdg.BaseDirectory # type: ignore

LOGGER = logging.getLogger('emoji-catalog')

RESOURCE_NAME = 'emoji-catalog'

CATALOG_BASENAMES = ('emoji.csv',)
PROPERTIES_BASENAME = 'emoji.properties'

LOG_FORMAT = (
    '%(asctime)s %(filename)s '
    'line %(lineno)d %(funcName)s %(levelname)s: '
    '%(message)s')

def get_debug_level() -> int:
    '''Returns the debug level from $EMOJI_CATALOG_DEBUG_LEVEL

    Returns 0 if the variable is not set or is not an integer.

    Examples:

    >>> old_level = os.environ.get('EMOJI_CATALOG_DEBUG_LEVEL')
    >>> os.environ['EMOJI_CATALOG_DEBUG_LEVEL'] = '2'
    >>> get_debug_level()
    2
    >>> os.environ['EMOJI_CATALOG_DEBUG_LEVEL'] = 'verbose'
    >>> get_debug_level()
    0
    >>> if old_level is None:
    ...     _ = os.environ.pop('EMOJI_CATALOG_DEBUG_LEVEL', None)
    ... else:
    ...     os.environ['EMOJI_CATALOG_DEBUG_LEVEL'] = old_level
    '''
    try:
        return max(int(str(os.getenv('EMOJI_CATALOG_DEBUG_LEVEL'))), 0)
    except (TypeError, ValueError):
        return 0

def catalog_dirnames() -> List[str]:
    '''Returns the directories searched for the catalog file

    These are the “emoji-catalog” subdirectories of the XDG data
    directories which exist, the user’s
    “~/.local/share/emoji-catalog” before the system wide ones.
    '''
    return list(xdg.BaseDirectory.load_data_paths(RESOURCE_NAME))

def find_path_and_open_function(
        dirnames: Iterable[str],
        basenames: Iterable[str],
        subdir: str = '') -> Tuple[str, Optional[Callable[..., Any]]]:
    '''Find the first existing file of a list of basenames and dirnames

    For each file in “basenames”, tries whether that file or the
    file with “.gz” added can be found in the list of directories
    “dirnames” where “subdir” is added to each directory in the list.

    Returns a tuple (path, open_function) where “path” is the
    complete path of the first file found and the open function
    is either “open()” or “gzip.open()”.

    :param dirnames: A list of directories to search in
    :param basenames: A list of file names to search for
    :param subdir: A subdirectory to be added to each directory in the list
    '''
    for basename in basenames:
        for dirname in dirnames:
            path = os.path.join(dirname, subdir, basename)
            if os.path.exists(path):
                if path.endswith('.gz'):
                    return (path, gzip.open)
                return (path, open)
            path = os.path.join(dirname, subdir, basename + '.gz')
            if os.path.exists(path):
                return (path, gzip.open)
    return ('', None)

def find_catalog_path() -> Tuple[str, Optional[Callable[..., Any]]]:
    '''Finds the catalog file to load

    $EMOJI_CATALOG_PATH takes precedence over the search path.
    Returns ('', None) if no catalog file can be found.
    '''
    env_path = os.getenv('EMOJI_CATALOG_PATH')
    if env_path:
        if not os.path.exists(env_path):
            LOGGER.warning(
                'EMOJI_CATALOG_PATH="%s" does not exist', env_path)
            return ('', None)
        if env_path.endswith('.gz'):
            return (env_path, gzip.open)
        return (env_path, open)
    return find_path_and_open_function(catalog_dirnames(), CATALOG_BASENAMES)

def read_properties(path: str) -> Dict[str, str]:
    '''Reads a simple “key=value” properties file

    Lines starting with “#” or “!” are comments.  Bytes which are not
    valid UTF-8 are replaced.  Returns an empty dictionary if the file
    cannot be read.

    :param path: Full path of the properties file
    '''
    properties: Dict[str, str] = {}
    try:
        with open(path, mode='rt', encoding='utf-8',
                  errors='replace') as properties_file:
            for line in properties_file:
                line = line.strip()
                if not line or line[0] in '#!':
                    continue
                key, separator, value = line.partition('=')
                if not separator:
                    key, separator, value = line.partition(':')
                if separator:
                    properties[key.strip()] = value.strip()
    except OSError as error:
        LOGGER.warning('Could not read "%s": %s', path, error)
    return properties

def codepoints_to_text(codepoints: str) -> str:
    '''Converts a dash separated string of hex codepoints to text

    :param codepoints: For example “1F44B-1F3FC”

    Examples:

    >>> codepoints_to_text('1F44B')
    '👋'

    >>> codepoints_to_text('1F44B-1F3FC')
    '👋🏼'

    >>> codepoints_to_text('0023-fe0f-20e3') == '#\ufe0f\u20e3'
    True

    >>> codepoints_to_text('')
    ''
    '''
    if not codepoints:
        return ''
    return ''.join(chr(int(codepoint, 16))
                   for codepoint in codepoints.split('-'))

def text_to_codepoints(text: str) -> str:
    '''Converts text to a dash separated string of hex codepoints

    Uses at least 4 uppercase hex digits per codepoint, the way
    canonical codes in the catalog are written.

    :param text: The text to convert

    Examples:

    >>> text_to_codepoints('👋🏼')
    '1F44B-1F3FC'

    >>> text_to_codepoints('#\ufe0f\u20e3')
    '0023-FE0F-20E3'
    '''
    return '-'.join(f'{ord(character):04X}' for character in text)

def setup_logging(
        logfile: str = '',
        level: int = logging.DEBUG) -> logging.Handler:
    '''Adds a handler to the emoji-catalog logger

    Library code only logs, applications using the catalog
    call this once if they want to see the messages.

    :param logfile: If not empty, log into this file, rotated at midnight.
                    Otherwise log to stderr.
    :param level: The log level to set on the logger
    :return: The handler which has been added
    '''
    log_handler: logging.Handler
    if logfile:
        logdir = os.path.dirname(os.path.abspath(logfile))
        if not os.path.isdir(logdir):
            os.makedirs(logdir, exist_ok=True)
        log_handler = logging.handlers.TimedRotatingFileHandler(
            logfile,
            when='midnight',
            interval=1,
            backupCount=7,
            encoding='UTF-8',
            delay=False,
            utc=False,
            atTime=None)
    else:
        log_handler = logging.StreamHandler(stream=sys.stderr)
    log_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    LOGGER.setLevel(level)
    LOGGER.addHandler(log_handler)
    return log_handler

if __name__ == "__main__":
    import doctest
    (FAILED, _ATTEMPTED) = doctest.testmod()
    sys.exit(FAILED)
