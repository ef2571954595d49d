#!/usr/bin/env python
"""Tests for :py:mod:`genozone.genomics.counting`"""
import unittest
from genozone.genomics.intervals import GenomicInterval
from genozone.genomics.genomic_array import GenomicArray
from genozone.genomics.counting import StrandUsage, OverlapMode, parse_cigar,\
                                      get_alignment_intervals, features_overlapped,\
                                      assign_features, count_reads,\
                                      NO_FEATURE, AMBIGUOUS, TOO_LOW_AQUAL,\
                                      NOT_ALIGNED, ALIGNMENT_NOT_UNIQUE, MISSING_MATE,\
                                      SUMMARY_KEYS
from genozone.util.services.exceptions import InvalidArgumentError, UnknownChromosomeError
from genozone.test.common import make_header, make_read

HEADER = make_header()


def _iv(start,end,strand="+",chrom="chrI"):
    return GenomicInterval(chrom,start,end,strand)

def _build_array(strand="+"):
    """Gene A at 100-200 and gene B at 150-300, both on `strand`"""
    ga = GenomicArray()
    ga.add_entry(_iv(100,200,strand),"A")
    ga.add_entry(_iv(150,300,strand),"B")
    return ga



#===============================================================================
# INDEX: counting modes
#===============================================================================

class TestModes(unittest.TestCase):

    def test_strand_usage_from_name(self):
        self.assertIs(StrandUsage.from_name("yes"),StrandUsage.YES)
        self.assertIs(StrandUsage.from_name("NO"),StrandUsage.NO)
        self.assertIs(StrandUsage.from_name("reverse"),StrandUsage.REVERSE)
        self.assertRaises(InvalidArgumentError,StrandUsage.from_name,"maybe")

    def test_save_strand_info(self):
        self.assertTrue(StrandUsage.YES.save_strand_info)
        self.assertTrue(StrandUsage.REVERSE.save_strand_info)
        self.assertFalse(StrandUsage.NO.save_strand_info)

    def test_overlap_mode_from_name(self):
        self.assertIs(OverlapMode.from_name("union"),OverlapMode.UNION)
        self.assertIs(OverlapMode.from_name("intersection-strict"),OverlapMode.INTERSECTION_STRICT)
        self.assertIs(OverlapMode.from_name("intersection_nonempty"),OverlapMode.INTERSECTION_NONEMPTY)
        self.assertRaises(InvalidArgumentError,OverlapMode.from_name,"intersection")



#===============================================================================
# INDEX: alignments to intervals
#===============================================================================

class TestParseCigar(unittest.TestCase):

    def test_spliced(self):
        found = parse_cigar([(0,20),(3,100),(0,30)],"chrI",1001,"+")
        self.assertEqual(found,[_iv(1001,1020),_iv(1121,1150)])

    def test_deletion_advances_position(self):
        found = parse_cigar([(0,10),(2,5),(0,10)],"chrI",1,"-")
        self.assertEqual(found,[_iv(1,10,"-"),_iv(16,25,"-")])

    def test_insertion_and_clipping_do_not_advance(self):
        found = parse_cigar([(4,5),(0,10),(1,3),(0,10),(5,2)],"chrI",1,"+")
        self.assertEqual(found,[_iv(1,10),_iv(11,20)])

    def test_sequence_match_and_mismatch(self):
        found = parse_cigar([(7,5),(8,1),(7,4)],"chrI",1,"+")
        self.assertEqual(found,[_iv(1,5),_iv(6,6),_iv(7,10)])

    def test_none(self):
        self.assertIsNone(parse_cigar(None,"chrI",1,"+"))


class TestGetAlignmentIntervals(unittest.TestCase):

    def test_single_end_strands(self):
        fw = make_read(HEADER,"r1","chrI",101,[(0,30)],strand="+")
        rc = make_read(HEADER,"r2","chrI",101,[(0,30)],strand="-")
        self.assertEqual(get_alignment_intervals(fw,StrandUsage.YES),[_iv(101,130,"+")])
        self.assertEqual(get_alignment_intervals(rc,StrandUsage.YES),[_iv(101,130,"-")])
        self.assertEqual(get_alignment_intervals(fw,StrandUsage.REVERSE),[_iv(101,130,"-")])
        self.assertEqual(get_alignment_intervals(rc,StrandUsage.REVERSE),[_iv(101,130,"+")])
        self.assertEqual(get_alignment_intervals(fw,StrandUsage.NO),[_iv(101,130,"+")])

    def test_second_mate_flipped(self):
        mate1 = make_read(HEADER,"p","chrI",101,[(0,30)],strand="+",paired=True,read1=True)
        mate2 = make_read(HEADER,"p","chrI",301,[(0,30)],strand="-",paired=True,read1=False)
        self.assertEqual(get_alignment_intervals(mate1,StrandUsage.YES),[_iv(101,130,"+")])
        self.assertEqual(get_alignment_intervals(mate2,StrandUsage.YES),[_iv(301,330,"+")])
        self.assertEqual(get_alignment_intervals(mate2,StrandUsage.REVERSE),[_iv(301,330,"-")])

    def test_spliced_read(self):
        read = make_read(HEADER,"r","chrII",51,[(4,3),(0,10),(3,40),(0,20)],strand="-")
        self.assertEqual(get_alignment_intervals(read,StrandUsage.YES),
                         [_iv(51,60,"-","chrII"),_iv(101,120,"-","chrII")])

    def test_none(self):
        self.assertIsNone(get_alignment_intervals(None,StrandUsage.YES))



#===============================================================================
# INDEX: overlap resolution
#===============================================================================

class TestFeaturesOverlapped(unittest.TestCase):

    def setUp(self):
        self.ga = _build_array()

    def check(self,mode,intervals,expected,stranded=StrandUsage.YES):
        found = features_overlapped(intervals,self.ga,mode,stranded)
        self.assertEqual(found,set(expected),"%s on %s: expected %s, got %s" % (mode,intervals,expected,found))

    def test_union(self):
        self.check(OverlapMode.UNION,[_iv(110,120)],["A"])
        self.check(OverlapMode.UNION,[_iv(90,110)],["A"])
        self.check(OverlapMode.UNION,[_iv(160,170)],["A","B"])
        self.check(OverlapMode.UNION,[_iv(280,320)],["B"])
        self.check(OverlapMode.UNION,[_iv(10,20)],[])
        self.check(OverlapMode.UNION,[_iv(110,120),_iv(250,260)],["A","B"])

    def test_intersection_strict(self):
        self.check(OverlapMode.INTERSECTION_STRICT,[_iv(110,120)],["A"])
        self.check(OverlapMode.INTERSECTION_STRICT,[_iv(90,110)],[])
        self.check(OverlapMode.INTERSECTION_STRICT,[_iv(140,160)],["A"])
        self.check(OverlapMode.INTERSECTION_STRICT,[_iv(160,170)],["A","B"])
        self.check(OverlapMode.INTERSECTION_STRICT,[_iv(280,320)],[])
        self.check(OverlapMode.INTERSECTION_STRICT,[_iv(110,120),_iv(250,260)],[])

    def test_intersection_nonempty(self):
        self.check(OverlapMode.INTERSECTION_NONEMPTY,[_iv(110,120)],["A"])
        self.check(OverlapMode.INTERSECTION_NONEMPTY,[_iv(90,110)],["A"])
        self.check(OverlapMode.INTERSECTION_NONEMPTY,[_iv(140,160)],["A"])
        self.check(OverlapMode.INTERSECTION_NONEMPTY,[_iv(280,320)],["B"])
        self.check(OverlapMode.INTERSECTION_NONEMPTY,[_iv(10,20)],[])

    def test_stranded_ignores_other_strand(self):
        for mode in OverlapMode:
            self.check(mode,[_iv(110,120,"-")],[])
            self.check(mode,[_iv(110,120,"-")],["A"],stranded=StrandUsage.NO)

    def test_unstranded_index(self):
        ga = GenomicArray()
        ga.add_entry(_iv(100,200,"."),"A")
        found = features_overlapped([_iv(110,120,"-")],ga,OverlapMode.UNION,StrandUsage.NO)
        self.assertEqual(found,set(["A"]))

    def test_registered_chromosome_without_features(self):
        self.ga.add_chromosome("chrII")
        for mode in OverlapMode:
            self.check(mode,[_iv(10,20,"+","chrII")],[])

    def test_unknown_chromosome_raises(self):
        self.assertRaises(UnknownChromosomeError,features_overlapped,
                          [_iv(10,20,"+","chrX")],self.ga,OverlapMode.UNION,StrandUsage.YES)


class TestAssignFeatures(unittest.TestCase):

    def test_assign(self):
        self.assertEqual(assign_features(set()),NO_FEATURE)
        self.assertEqual(assign_features(None),NO_FEATURE)
        self.assertEqual(assign_features(set(["A","B"])),AMBIGUOUS)
        self.assertEqual(assign_features(set(["A"])),"A")
        self.assertEqual(assign_features(set([7])),"7")



#===============================================================================
# INDEX: counting reads
#===============================================================================

class TestCountReads(unittest.TestCase):

    def setUp(self):
        self.ga = _build_array()
        self.ga.add_chromosome("chrII")
        self.counts = { "A" : 0, "B" : 0 }
        self.reads = [
            make_read(HEADER,"only_a","chrI",101,[(0,20)]),
            make_read(HEADER,"both","chrI",161,[(0,10)]),
            make_read(HEADER,"nothing","chrI",401,[(0,20)]),
            make_read(HEADER,"other_chrom","chrII",101,[(0,20)]),
            make_read(HEADER,"unmapped",unmapped=True),
            make_read(HEADER,"multi","chrI",101,[(0,20)],nh=2),
            make_read(HEADER,"low_qual","chrI",101,[(0,20)],mapq=5),
            make_read(HEADER,"antisense","chrI",101,[(0,20)],strand="-"),
            make_read(HEADER,"only_b","chrI",251,[(0,20)],nh=1),
        ]

    def test_summary_keys(self):
        summary = count_reads([],self.ga,self.counts)
        self.assertEqual(list(summary.keys()),list(SUMMARY_KEYS))
        self.assertTrue(all(X == 0 for X in summary.values()))

    def test_single_end(self):
        summary = count_reads(self.reads,self.ga,self.counts,min_qual=10)
        self.assertEqual(self.counts,{ "A" : 1, "B" : 1 })
        self.assertEqual(summary[NO_FEATURE],3)
        self.assertEqual(summary[AMBIGUOUS],1)
        self.assertEqual(summary[TOO_LOW_AQUAL],1)
        self.assertEqual(summary[NOT_ALIGNED],1)
        self.assertEqual(summary[ALIGNMENT_NOT_UNIQUE],1)
        self.assertNotIn(MISSING_MATE,summary)

    def test_min_qual_zero_keeps_low_quality(self):
        summary = count_reads(self.reads,self.ga,self.counts)
        self.assertEqual(summary[TOO_LOW_AQUAL],0)
        self.assertEqual(self.counts["A"],2)

    def test_keep_ambiguous(self):
        summary = count_reads(self.reads,self.ga,self.counts,min_qual=10,remove_ambiguous=False)
        self.assertEqual(summary[AMBIGUOUS],0)
        self.assertEqual(self.counts,{ "A" : 2, "B" : 2 })

    def test_reverse_stranded(self):
        summary = count_reads(self.reads,self.ga,self.counts,stranded=StrandUsage.REVERSE,min_qual=10)
        self.assertEqual(self.counts,{ "A" : 1, "B" : 0 })
        self.assertEqual(summary[NO_FEATURE],5)
        self.assertEqual(summary[AMBIGUOUS],0)

    def test_unstranded(self):
        ga = GenomicArray()
        ga.add_entry(_iv(100,200,"."),"A")
        ga.add_entry(_iv(150,300,"."),"B")
        ga.add_chromosome("chrII")
        count_reads(self.reads,ga,self.counts,stranded=StrandUsage.NO,min_qual=10)
        self.assertEqual(self.counts,{ "A" : 2, "B" : 1 })

    def test_intersection_strict(self):
        reads = [make_read(HEADER,"edge","chrI",91,[(0,20)])]
        summary = count_reads(reads,self.ga,self.counts,mode=OverlapMode.INTERSECTION_STRICT)
        self.assertEqual(summary[NO_FEATURE],1)

        summary = count_reads(reads,self.ga,self.counts,mode=OverlapMode.INTERSECTION_NONEMPTY)
        self.assertEqual(self.counts["A"],1)

    def test_paired_end(self):
        reads = [
            # pair assigned to A. Second mate listed first
            make_read(HEADER,"p1","chrI",131,[(0,10)],strand="-",paired=True,read1=False),
            make_read(HEADER,"p1","chrI",101,[(0,10)],strand="+",paired=True,read1=True),
            # orphan
            make_read(HEADER,"orphan","chrI",101,[(0,10)],paired=True,read1=True),
            # pair spanning both genes
            make_read(HEADER,"p2","chrI",101,[(0,10)],strand="+",paired=True,read1=True),
            make_read(HEADER,"p2","chrI",251,[(0,10)],strand="-",paired=True,read1=False),
            # one mate unmapped, other assigned to B
            make_read(HEADER,"p3","chrI",251,[(0,10)],strand="+",paired=True,read1=True),
            make_read(HEADER,"p3",paired=True,read1=False,unmapped=True),
            # both unmapped
            make_read(HEADER,"p4",paired=True,read1=True,unmapped=True),
            make_read(HEADER,"p4",paired=True,read1=False,unmapped=True),
            # one mate not unique
            make_read(HEADER,"p5","chrI",101,[(0,10)],paired=True,read1=True,nh=3),
            make_read(HEADER,"p5","chrI",131,[(0,10)],strand="-",paired=True,read1=False),
            # last read has no mate
            make_read(HEADER,"p6","chrI",101,[(0,10)],paired=True,read1=True),
        ]
        summary = count_reads(reads,self.ga,self.counts,paired_end=True)
        self.assertEqual(self.counts,{ "A" : 1, "B" : 1 })
        self.assertEqual(summary[AMBIGUOUS],1)
        self.assertEqual(summary[NOT_ALIGNED],1)
        self.assertEqual(summary[ALIGNMENT_NOT_UNIQUE],1)
        self.assertEqual(summary[MISSING_MATE],2)
        self.assertEqual(list(summary.keys()),list(SUMMARY_KEYS) + [MISSING_MATE])

    def test_printer_receives_progress(self):
        messages = []

        class ListWriter(object):
            def write(self,msg):
                messages.append(msg)

        count_reads(self.reads,self.ga,self.counts,printer=ListWriter())
        self.assertEqual(messages,[])
