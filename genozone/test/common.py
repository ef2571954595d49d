#!/usr/bin/env python
"""Helpers to build small alignment datasets in memory, or on disk, for tests"""
import pysam

_QUERY_OPS = frozenset([0,1,4,7,8])  # M, I, S, =, X

CHROMOSOMES = [("chrI",5000),("chrII",3000)]


def make_header(chromosomes=None):
    """Return a :class:`pysam.AlignmentHeader` describing `chromosomes`

    Parameters
    ----------
    chromosomes : list, optional
        List of `(name, length)` tuples (Default: :data:`CHROMOSOMES`)
    """
    chromosomes = CHROMOSOMES if chromosomes is None else chromosomes
    return pysam.AlignmentHeader.from_dict({ "HD" : { "VN" : "1.0", "SO" : "queryname" },
                                             "SQ" : [{ "SN" : X, "LN" : Y } for X, Y in chromosomes] })

def make_read(header,name,chrom=None,start=None,cigar=None,strand="+",
              mapq=255,nh=None,paired=False,read1=True,unmapped=False):
    """Build an aligned read

    Parameters
    ----------
    header : :class:`pysam.AlignmentHeader`
        Header naming the reference sequences

    name : str
        Query name

    chrom : str
        Reference name

    start : int
        First aligned position, 1-indexed

    cigar : list
        CIGAR as list of `(operation, length)` tuples (Default: 30M)

    strand : str, optional
        `'+'` or `'-'`

    mapq : int, optional
        Mapping quality

    nh : int or None, optional
        Value of `NH` tag, if any

    paired, read1 : bool, optional
        Pairing flags

    unmapped : bool, optional
        If `True`, build an unmapped read

    Returns
    -------
    :class:`pysam.AlignedSegment`
    """
    read = pysam.AlignedSegment(header)
    read.query_name = name
    read.is_paired = paired
    if paired == True:
        read.is_read1 = read1
        read.is_read2 = not read1

    if unmapped == True:
        read.is_unmapped = True
        read.reference_id = -1
        read.reference_start = -1
        read.query_sequence = "N"*30
        read.mapping_quality = 0
        return read

    cigar = [(0,30)] if cigar is None else cigar
    read.reference_name = chrom
    read.reference_start = start - 1
    read.query_sequence = "N"*sum(Y for X, Y in cigar if X in _QUERY_OPS)
    read.cigartuples = cigar
    read.is_reverse = strand == "-"
    read.mapping_quality = mapq
    if nh is not None:
        read.set_tag("NH",nh)

    return read

def write_bam(filename,header,reads):
    """Write `reads` to a `BAM`_ file, in the order given"""
    with pysam.AlignmentFile(filename,"wb",header=header) as fout:
        for read in reads:
            fout.write(read)
