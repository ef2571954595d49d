#!/usr/bin/env python
"""Tests for :py:mod:`genozone.readers.gff`"""
import unittest
from io import StringIO
from genozone.genomics.intervals import GenomicInterval
from genozone.readers.gff import GFFEntry, GTF2_Reader, GFF3_Reader
from genozone.util.services.exceptions import MalformedFileError

_GTF2_TEXT = """#!genome-build test
# a comment
chrI\ttest\tgene\t100\t500\t.\t+\t.\tgene_id "g1";
chrI\ttest\texon\t100\t200\t0.5\t+\t.\tgene_id "g1"; transcript_id "t1";

chrI\ttest\texon\t300\t500\t.\t+\t.\tgene_id "g1"; transcript_id "t1";
chrII\ttest\tCDS\t10\t90\t.\t-\t0\tgene_id "g2"; transcript_id "t2";
"""

_GFF3_TEXT = """##gff-version 3
##sequence-region chrI 1 1000
##species human
###
chrI\ttest\tgene\t100\t500\t.\t+\t.\tID=g1;Name=first%3Bgene
chrI\ttest\texon\t100\t200\t.\t+\t.\tID=e1;Parent=t1,t2
##FASTA
>chrI
ACGT
"""


class TestGFFEntry(unittest.TestCase):

    def setUp(self):
        self.entry = GFFEntry("chrI","test","exon",100,200,strand="-",
                              attr={ "gene_id" : "g1", "Parent" : ["t1","t2"] })

    def test_get_attribute_value(self):
        self.assertEqual(self.entry.get_attribute_value("gene_id"),"g1")
        self.assertEqual(self.entry.get_attribute_value("Parent"),"t1,t2")
        self.assertIsNone(self.entry.get_attribute_value("missing"))
        self.assertIsNone(self.entry.get_attribute_value(None))

    def test_attribute_names(self):
        self.assertTrue(self.entry.is_attribute("gene_id"))
        self.assertFalse(self.entry.is_attribute("ID"))
        self.assertEqual(self.entry.get_attributes_names(),set(["gene_id","Parent"]))

    def test_length(self):
        self.assertEqual(self.entry.length,101)

    def test_to_interval(self):
        self.assertEqual(self.entry.to_interval(),GenomicInterval("chrI",100,200,"-"))
        self.assertEqual(self.entry.to_interval(save_strand=False),GenomicInterval("chrI",100,200,"."))

    def test_equality(self):
        other = GFFEntry("chrI","test","exon",100,200,strand="-",
                         attr={ "gene_id" : "g1", "Parent" : ["t1","t2"] })
        self.assertEqual(self.entry,other)
        other.attr["gene_id"] = "g2"
        self.assertNotEqual(self.entry,other)


class TestGTF2_Reader(unittest.TestCase):

    def test_read_entries(self):
        reader = GTF2_Reader(StringIO(_GTF2_TEXT))
        entries = list(reader)
        self.assertEqual([X.type for X in entries],["gene","exon","exon","CDS"])

        exon = entries[1]
        self.assertEqual((exon.seqid,exon.source,exon.start,exon.end,exon.strand),("chrI","test",100,200,"+"))
        self.assertEqual(exon.score,0.5)
        self.assertIsNone(exon.phase)
        self.assertEqual(exon.attr,{ "gene_id" : "g1", "transcript_id" : "t1" })

        cds = entries[3]
        self.assertEqual(cds.phase,0)
        self.assertIsNone(cds.score)
        self.assertEqual(cds.strand,"-")

    def test_metadata_and_line_numbers(self):
        reader = GTF2_Reader(StringIO(_GTF2_TEXT))
        next(reader)
        self.assertEqual(reader.line_num,3)
        list(reader)
        self.assertEqual(reader.line_num,7)

    def test_wrong_column_count_raises(self):
        text = "chrI\ttest\texon\t100\t200\t.\t+\n"
        with self.assertRaises(MalformedFileError) as cm:
            list(GTF2_Reader(StringIO(text)))
        self.assertEqual(cm.exception.line_num,1)

    def test_bad_coordinates_raise(self):
        text = "chrI\ttest\texon\t100\tabc\t.\t+\t.\tgene_id \"g1\";\n"
        self.assertRaises(MalformedFileError,list,GTF2_Reader(StringIO(text)))

    def test_bad_attributes_raise(self):
        text = "chrI\ttest\texon\t100\t200\t.\t+\t.\tgene_id \"g1\"; transcript_id\n"
        self.assertRaises(MalformedFileError,list,GTF2_Reader(StringIO(text)))

    def test_filename(self):
        reader = GTF2_Reader(StringIO(_GTF2_TEXT))
        self.assertEqual(reader.filename,"GTF2 stream")


class TestGFF3_Reader(unittest.TestCase):

    def test_read_entries_and_pragmas(self):
        reader = GFF3_Reader(StringIO(_GFF3_TEXT))
        entries = list(reader)
        self.assertEqual(len(entries),2)
        self.assertEqual(entries[0].attr,{ "ID" : "g1", "Name" : "first;gene" })
        self.assertEqual(entries[1].attr["Parent"],["t1","t2"])
        self.assertEqual(entries[1].get_attribute_value("Parent"),"t1,t2")

        self.assertEqual(reader.metadata["gff-version"],"3")
        self.assertEqual(reader.metadata["species"],"human")
        self.assertEqual(reader.sequence_regions,{ "chrI" : ("1","1000") })

    def test_stops_at_fasta(self):
        reader = GFF3_Reader(StringIO(_GFF3_TEXT))
        self.assertEqual([X.type for X in reader],["gene","exon"])

    def test_malformed_sequence_region_raises(self):
        text = "##sequence-region chrI 1\n"
        self.assertRaises(MalformedFileError,list,GFF3_Reader(StringIO(text)))
