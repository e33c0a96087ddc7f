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
This file implements test cases for the utility functions in ec_util.py
'''

import os
import sys
import gzip
import shutil
import logging
import logging.handlers
import tempfile
import unittest
from unittest import mock

import testutils # pylint: disable=import-error

# pylint: disable=wrong-import-position
sys.path.insert(0, testutils.ENGINE_DIR)
import ec_util # pylint: disable=import-error
sys.path.pop(0)
# pylint: enable=wrong-import-position

# pylint: disable=missing-function-docstring
# pylint: disable=missing-class-docstring
# pylint: disable=invalid-name

class CodepointsTestCase(unittest.TestCase):
    def test_codepoints_to_text(self) -> None:
        self.assertEqual(ec_util.codepoints_to_text('1F44B'), '👋')
        self.assertEqual(
            ec_util.codepoints_to_text('1F44B-1F3FC'), '\U0001F44B\U0001F3FC')
        self.assertEqual(
            ec_util.codepoints_to_text('2764-fe0f'), '\u2764\ufe0f')
        self.assertEqual(ec_util.codepoints_to_text(''), '')

    def test_text_to_codepoints(self) -> None:
        self.assertEqual(
            ec_util.text_to_codepoints('\U0001F44B\U0001F3FC'), '1F44B-1F3FC')
        # at least 4 hex digits, upper case
        self.assertEqual(
            ec_util.text_to_codepoints('#\ufe0f\u20e3'), '0023-FE0F-20E3')
        self.assertEqual(ec_util.text_to_codepoints(''), '')

    def test_codepoints_round_trip(self) -> None:
        text = '\U0001F3F4\U000E0067\U000E0062\U000E0077\U000E006C\U000E0073\U000E007F'
        self.assertEqual(
            ec_util.codepoints_to_text(ec_util.text_to_codepoints(text)), text)

class DebugLevelTestCase(unittest.TestCase):
    def test_default(self) -> None:
        with mock.patch.dict(os.environ, clear=False):
            os.environ.pop('EMOJI_CATALOG_DEBUG_LEVEL', None)
            self.assertEqual(ec_util.get_debug_level(), 0)

    def test_from_environment(self) -> None:
        with mock.patch.dict(os.environ, {'EMOJI_CATALOG_DEBUG_LEVEL': '3'}):
            self.assertEqual(ec_util.get_debug_level(), 3)
        with mock.patch.dict(os.environ, {'EMOJI_CATALOG_DEBUG_LEVEL': '-1'}):
            self.assertEqual(ec_util.get_debug_level(), 0)
        with mock.patch.dict(os.environ, {'EMOJI_CATALOG_DEBUG_LEVEL': 'x'}):
            self.assertEqual(ec_util.get_debug_level(), 0)

class FindPathTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.tempdir = tempfile.mkdtemp(prefix='emoji-catalog-test-')

    def tearDown(self) -> None:
        shutil.rmtree(self.tempdir, ignore_errors=True)

    def test_catalog_dirnames(self) -> None:
        user_dir = os.path.join(self.tempdir, 'emoji-catalog')
        with mock.patch.object(
                ec_util.xdg.BaseDirectory, 'load_data_paths',
                return_value=iter([user_dir])) as load_data_paths:
            dirnames = ec_util.catalog_dirnames()
        load_data_paths.assert_called_once_with('emoji-catalog')
        # only the data directories, nothing inside the installed modules
        self.assertEqual(dirnames, [user_dir])

    def test_find_plain_file(self) -> None:
        shutil.copy(testutils.TEST_CATALOG_PATH, self.tempdir)
        (path, open_function) = ec_util.find_path_and_open_function(
            ['/nonexistent', self.tempdir], ec_util.CATALOG_BASENAMES)
        self.assertEqual(path, os.path.join(self.tempdir, 'emoji.csv'))
        self.assertIs(open_function, open)

    def test_find_gzipped_file(self) -> None:
        gz_path = os.path.join(self.tempdir, 'data', 'emoji.csv.gz')
        os.makedirs(os.path.dirname(gz_path))
        with open(testutils.TEST_CATALOG_PATH, 'rb') as source:
            with gzip.open(gz_path, 'wb') as target:
                shutil.copyfileobj(source, target)
        (path, open_function) = ec_util.find_path_and_open_function(
            [self.tempdir], ec_util.CATALOG_BASENAMES, subdir='data')
        self.assertEqual(path, gz_path)
        self.assertIs(open_function, gzip.open)

    def test_find_nothing(self) -> None:
        self.assertEqual(
            ec_util.find_path_and_open_function(
                [self.tempdir], ec_util.CATALOG_BASENAMES),
            ('', None))

    def test_find_catalog_path_from_environment(self) -> None:
        with mock.patch.dict(
                os.environ,
                {'EMOJI_CATALOG_PATH': testutils.TEST_CATALOG_PATH}):
            self.assertEqual(
                ec_util.find_catalog_path(),
                (testutils.TEST_CATALOG_PATH, open))
        missing = os.path.join(self.tempdir, 'missing.csv')
        with mock.patch.dict(os.environ, {'EMOJI_CATALOG_PATH': missing}):
            with self.assertLogs('emoji-catalog', level='WARNING'):
                self.assertEqual(ec_util.find_catalog_path(), ('', None))

class PropertiesTestCase(unittest.TestCase):
    def test_read_properties(self) -> None:
        properties = ec_util.read_properties(
            os.path.join(testutils.TEST_DATA_DIR, 'emoji.properties'))
        self.assertEqual(properties['version'], '15.0.1')
        self.assertEqual(
            properties['commit'], '063f328d7951cb2e2a6678b06dcbdf8dd599fad7')

    def test_comments_and_separators(self) -> None:
        with tempfile.NamedTemporaryFile(
                mode='w', suffix='.properties', delete=False,
                encoding='utf-8') as properties_file:
            properties_file.write(
                '# a comment\n'
                '! another comment\n'
                '\n'
                'version = 14.0\n'
                'commit: abc123\n'
                'no separator\n')
        try:
            self.assertEqual(
                ec_util.read_properties(properties_file.name),
                {'version': '14.0', 'commit': 'abc123'})
        finally:
            os.unlink(properties_file.name)

    def test_invalid_utf8(self) -> None:
        with tempfile.NamedTemporaryFile(
                mode='wb', suffix='.properties', delete=False) as properties_file:
            properties_file.write(b'commit=\xff\xfe\nversion=15.0\n')
        try:
            properties = ec_util.read_properties(properties_file.name)
        finally:
            os.unlink(properties_file.name)
        self.assertEqual(properties['version'], '15.0')
        self.assertEqual(properties['commit'], '\ufffd\ufffd')

    def test_missing_file(self) -> None:
        with self.assertLogs('emoji-catalog', level='WARNING'):
            self.assertEqual(
                ec_util.read_properties('/nonexistent/emoji.properties'), {})

class SetupLoggingTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.tempdir = tempfile.mkdtemp(prefix='emoji-catalog-test-')
        self.logger = logging.getLogger('emoji-catalog')
        self.old_level = self.logger.level

    def tearDown(self) -> None:
        self.logger.setLevel(self.old_level)
        shutil.rmtree(self.tempdir, ignore_errors=True)

    def test_log_into_file(self) -> None:
        logfile = os.path.join(self.tempdir, 'log', 'debug.log')
        handler = ec_util.setup_logging(logfile=logfile, level=logging.INFO)
        try:
            self.assertIsInstance(
                handler, logging.handlers.TimedRotatingFileHandler)
            self.assertEqual(self.logger.level, logging.INFO)
            self.logger.info('written to %s', logfile)
            handler.flush()
        finally:
            self.logger.removeHandler(handler)
            handler.close()
        with open(logfile, encoding='utf-8') as log:
            content = log.read()
        self.assertIn('INFO: written to', content)
        self.assertIn('test_log_into_file', content)

    def test_log_to_stderr(self) -> None:
        handler = ec_util.setup_logging()
        try:
            self.assertIsInstance(handler, logging.StreamHandler)
            self.assertEqual(self.logger.level, logging.DEBUG)
        finally:
            self.logger.removeHandler(handler)

if __name__ == '__main__':
    unittest.main()
