#!/usr/bin/env python
"""Count high-throughput sequencing reads over genomic features.

This package provides:

  #. |GenomicArray|, a strand-aware index that maps every position of a genome
     to the set of features covering it, and answers range queries with the
     zones of constant feature content that a range overlaps (see |genomics|)

  #. Readers for `GTF2`_ and `GFF3`_ annotations, and tools to describe the
     chromosomes of a genome (see |readers| and |genomics|)

  #. A command-line script that counts reads per feature following the rules
     of `htseq-count`_ (see |bin|)


Package overview
----------------
genozone is divided into the following subpackages:

    ==============    =========================================================
    Package           Contents
    --------------    ---------------------------------------------------------
    |bin|             Command-line scripts
    |genomics|        Intervals, the feature index, genome descriptions, and counting rules
    |readers|         Parsers for annotation files
    |util|            Utilities (e.g. exceptions, warnings, argument parsers, file openers)
    |test|            Unit and functional tests
    ==============    =========================================================
"""
__version__ = "0.1.0"

from genozone.genomics.intervals import GenomicInterval
from genozone.genomics.genomic_array import GenomicArray
from genozone.genomics.genome_description import GenomeDescription

from genozone.readers.gff import GTF2_Reader, GFF3_Reader

from genozone.util.io.openers import read_pl_table

from genozone.util.services.exceptions import formatwarning
