#!/usr/bin/env python
"""Tests for :py:mod:`genozone.util.scriptlib.help_formatters`"""
import unittest
from genozone.util.scriptlib.help_formatters import shorten_help, format_module_docstring

_DOCSTRING = """Count reads.

Use :func:`count_reads` with a |GenomicArray|, as in `htseq-count`_.

Example::

    count_features --count_files a.bam

Parameters
----------
x : int
    Ignored
"""

_EXPECTED = """Count reads.

Use count_reads with a GenomicArray, as in htseq-count.

Example:

    count_features --count_files a.bam
"""


class TestHelpFormatters(unittest.TestCase):

    def test_shorten_help(self):
        self.assertEqual(shorten_help(_DOCSTRING),_EXPECTED)

    def test_shorten_help_without_sections(self):
        self.assertEqual(shorten_help("Just text, :py:class:`~genozone.GenomicArray`.\n"),
                         "Just text, ~genozone.GenomicArray.\n")

    def test_stops_at_first_section(self):
        text = "Intro\n\nSee also\n--------\nthings\n\nReturns\n-------\nstuff\n"
        self.assertEqual(shorten_help(text),"Intro\n")

    def test_format_module_docstring(self):
        found = format_module_docstring(_DOCSTRING)
        sep = "\n" + 78*"-" + "\n"
        self.assertTrue(found.startswith(sep))
        self.assertTrue(found.endswith(sep))
        self.assertIn(_EXPECTED,found)
