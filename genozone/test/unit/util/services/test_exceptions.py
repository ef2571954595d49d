#!/usr/bin/env python
"""Tests for :py:mod:`genozone.util.services.exceptions`"""
import unittest
import warnings
from genozone.util.services.exceptions import MalformedFileError, AnnotationError,\
                                              UnknownChromosomeError, InvalidArgumentError,\
                                              DataWarning, ArgumentWarning,\
                                              warn_onceperfamily, formatwarning,\
                                              gz_once_registry


class TestExceptions(unittest.TestCase):

    def test_malformed_file_error_str(self):
        self.assertEqual(str(MalformedFileError("a.gtf","bad columns")),
                         "Error opening file 'a.gtf': bad columns")
        self.assertEqual(str(MalformedFileError("a.gtf","bad columns",line_num=3)),
                         "Error opening file 'a.gtf' at line 3: bad columns")

    def test_annotation_error_is_malformed_file_error(self):
        err = AnnotationError("a.gtf","missing attribute",5)
        self.assertIsInstance(err,MalformedFileError)
        self.assertEqual(err.line_num,5)
        self.assertEqual(err.filename,"a.gtf")

    def test_unknown_chromosome_error(self):
        err = UnknownChromosomeError("chrX")
        self.assertIsInstance(err,KeyError)
        self.assertEqual(err.chromosome,"chrX")
        self.assertEqual(str(err),"Unknown chromosome: chrX")

    def test_invalid_argument_error_is_value_error(self):
        self.assertTrue(issubclass(InvalidArgumentError,ValueError))


class TestWarnings(unittest.TestCase):

    def setUp(self):
        gz_once_registry.clear()

    def test_onceperfamily(self):
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            for n in range(5):
                warn_onceperfamily("Chromosome chr%s is odd." % n,
                                   pattern="Chromosome .* is odd",
                                   category=DataWarning)
            warn_onceperfamily("Something else entirely.",category=ArgumentWarning)

        messages = [str(X.message) for X in caught]
        self.assertEqual(messages,["Chromosome chr0 is odd.","Something else entirely."])
        self.assertTrue(issubclass(caught[0].category,DataWarning))

    def test_registry_clear_reenables(self):
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            warn_onceperfamily("Repeat me.",category=DataWarning)
            gz_once_registry.clear()
            warn_onceperfamily("Repeat me.",category=DataWarning)

        self.assertEqual(len(caught),2)

    def test_formatwarning(self):
        found = formatwarning("A short message",DataWarning,"nofile.py",10,line="x = 1")
        self.assertIn("DataWarning",found)
        self.assertIn("A short message",found)
        self.assertIn("nofile.py",found)
        self.assertIn("x = 1",found)
