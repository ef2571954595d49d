#!/usr/bin/env python
"""Rules for assigning aligned reads to features, following `htseq-count`_.

An alignment is decomposed into the reference blocks it matches (one block
per `M`, `=`, or `X` operation in its CIGAR string). Each block is looked up
in a |GenomicArray|, and the value sets of the zones it overlaps are combined
under an |OverlapMode|:

    ===========================  ==================================================
    Mode                         Features assigned to read
    ---------------------------  --------------------------------------------------
    `union`                      union of the value sets of all overlapped zones

    `intersection-strict`        intersection of the value sets of all overlapped
                                 zones, including zones with no features

    `intersection-nonempty`      intersection of the value sets of all overlapped
                                 zones that contain at least one feature
    ===========================  ==================================================

If exactly one feature remains, the read is assigned to it. If none remain,
the read is counted as `__no_feature`; if several remain, as `__ambiguous`.

Whether the strand of a read must match the strand of a feature is controlled
by |StrandUsage|:

    ===========  ===========================================================
    Usage        Meaning
    -----------  -----------------------------------------------------------
    `yes`        read (or first mate) must be on the same strand as feature

    `reverse`    read (or first mate) must be on the opposite strand

    `no`         strand is ignored
    ===========  ===========================================================


Important methods
-----------------
:func:`get_alignment_intervals`
    Convert a :class:`pysam.AlignedSegment` into a list of |GenomicInterval|

:func:`features_overlapped`
    Find the features assigned to a list of intervals under an |OverlapMode|

:func:`count_reads`
    Count reads from an alignment stream into a dictionary of feature counts


See also
--------
`htseq-count <https://htseq.readthedocs.io/en/release_0.11.1/count.html>`_
    Description of the counting modes
"""
from collections import OrderedDict
from enum import Enum
from genozone.genomics.intervals import GenomicInterval
from genozone.util.io.openers import NullWriter
from genozone.util.services.exceptions import InvalidArgumentError, UnknownChromosomeError

NO_FEATURE           = "__no_feature"
AMBIGUOUS            = "__ambiguous"
TOO_LOW_AQUAL        = "__too_low_aQual"
NOT_ALIGNED          = "__not_aligned"
ALIGNMENT_NOT_UNIQUE = "__alignment_not_unique"
MISSING_MATE         = "__missing_mate"

SUMMARY_KEYS = (NO_FEATURE,AMBIGUOUS,TOO_LOW_AQUAL,NOT_ALIGNED,ALIGNMENT_NOT_UNIQUE)
"""Names of summary counters reported for every run"""

# pysam CIGAR operation codes
_MATCH_OPS     = frozenset([0,7,8])     # M, =, X
_REF_SKIP_OPS  = frozenset([2,3])       # D, N



#===============================================================================
# INDEX: counting modes
#===============================================================================

class StrandUsage(Enum):
    """How read strand is compared to feature strand"""
    YES     = "yes"
    NO      = "no"
    REVERSE = "reverse"

    @property
    def save_strand_info(self):
        """`True` if features must be indexed with their strands"""
        return self is not StrandUsage.NO

    @classmethod
    def from_name(cls,name):
        """Return the |StrandUsage| called `name` (`'yes'`, `'no'`, or `'reverse'`)

        Raises
        ------
        InvalidArgumentError
            If `name` is not a known strand usage
        """
        for usage in cls:
            if usage.value == str(name).lower():
                return usage

        raise InvalidArgumentError("Unknown strand usage: '%s'" % name)


class OverlapMode(Enum):
    """Rule for combining the value sets of the zones overlapped by a read"""
    UNION                 = "union"
    INTERSECTION_STRICT   = "intersection-strict"
    INTERSECTION_NONEMPTY = "intersection-nonempty"

    @classmethod
    def from_name(cls,name):
        """Return the |OverlapMode| called `name`. Underscores and dashes
        are interchangeable, so `'intersection_strict'` is accepted.

        Raises
        ------
        InvalidArgumentError
            If `name` is not a known overlap mode
        """
        stmp = str(name).lower().replace("_","-")
        for mode in cls:
            if mode.value == stmp:
                return mode

        raise InvalidArgumentError("Unknown overlap mode: '%s'" % name)



#===============================================================================
# INDEX: alignments to intervals
#===============================================================================

def parse_cigar(cigartuples,chromosome,start,strand):
    """Convert a CIGAR string into the reference blocks it matches

    Match operations (`M`, `=`, `X`) produce an interval each. Deletions
    and skipped regions (`D`, `N`) advance the reference position without
    producing an interval. Insertions, clipping, and padding neither produce
    intervals nor advance the position.

    Parameters
    ----------
    cigartuples : list or None
        List of `(operation, length)` tuples, as in
        :attr:`pysam.AlignedSegment.cigartuples`

    chromosome : str
        Name of chromosome

    start : int
        First aligned reference position, 1-indexed

    strand : str
        Strand to assign to each interval

    Returns
    -------
    list or None
        List of |GenomicInterval|, or `None` if `cigartuples` is `None`

    Examples
    --------
    A read with a 100 nt intron::

        >>> parse_cigar([(0,20),(3,100),(0,30)],"chrI",1001,"+")
        [<GenomicInterval chrI:1001-1020(+)>, <GenomicInterval chrI:1121-1150(+)>]
    """
    if cigartuples is None:
        return None

    ltmp = []
    pos  = start
    for op, length in cigartuples:
        if op in _MATCH_OPS:
            ltmp.append(GenomicInterval(chromosome,pos,pos + length - 1,strand))
            pos += length
        elif op in _REF_SKIP_OPS:
            pos += length

    return ltmp

def _opposite(strand):
    return "-" if strand == "+" else "+"

def get_alignment_intervals(read,stranded):
    """Convert an aligned read into the |GenomicInterval| blocks it covers

    For single-end reads and first mates, intervals are on the read's strand,
    unless `stranded` is `REVERSE`. For second mates, this is inverted.

    Parameters
    ----------
    read : :class:`pysam.AlignedSegment`
        Aligned read

    stranded : |StrandUsage|
        Strand usage of library

    Returns
    -------
    list
        List of |GenomicInterval|, or `None` if `read` is `None`
    """
    if read is None:
        return None

    strand = "-" if read.is_reverse else "+"
    if read.is_paired and not read.is_read1:
        strand = _opposite(strand)

    if stranded == StrandUsage.REVERSE:
        strand = _opposite(strand)

    return parse_cigar(read.cigartuples,read.reference_name,read.reference_start + 1,strand) or []



#===============================================================================
# INDEX: overlap resolution
#===============================================================================

def _filter_strand(entries,strand):
    return { K : V for K, V in entries.items() if K.strand == strand }

def features_overlapped(intervals,genomic_array,mode,stranded):
    """Find the features overlapped by a set of aligned blocks

    Parameters
    ----------
    intervals : list
        |GenomicInterval| blocks of one read or read pair

    genomic_array : |GenomicArray|
        Index of features

    mode : |OverlapMode|
        Rule for combining value sets of overlapped zones

    stranded : |StrandUsage|
        Strand usage. If not `NO`, zones on strands other than the block's
        own are ignored

    Returns
    -------
    set
        Values of features assigned to the read

    Raises
    ------
    UnknownChromosomeError
        If a block lies on a chromosome unknown to `genomic_array`
    """
    fs = None
    for iv in intervals:
        if not genomic_array.contains_chromosome(iv.chromosome):
            raise UnknownChromosomeError(iv.chromosome)

        entries = genomic_array.get_entries(iv.chromosome,iv.start,iv.end)
        if stranded.save_strand_info:
            entries = _filter_strand(entries,iv.strand)

        if mode == OverlapMode.UNION:
            fs = set() if fs is None else fs
            for values in entries.values():
                fs |= values
        else:
            if len(entries) == 0:
                entries = { iv : set() }

            for values in entries.values():
                if len(values) > 0 or mode == OverlapMode.INTERSECTION_STRICT:
                    fs = set(values) if fs is None else fs & values

    return set() if fs is None else fs

def assign_features(feature_set):
    """Decide the assignment of a read from the features it overlaps

    Parameters
    ----------
    feature_set : set
        Features overlapped by read, as returned by :func:`features_overlapped`

    Returns
    -------
    str
        `'__no_feature'` if `feature_set` is empty, `'__ambiguous'` if it has
        more than one member, or else the string form of its only member
    """
    if feature_set is None or len(feature_set) == 0:
        return NO_FEATURE
    elif len(feature_set) > 1:
        return AMBIGUOUS

    return str(next(iter(feature_set)))



#===============================================================================
# INDEX: counting reads
#===============================================================================

def _is_multimapper(read):
    return read.has_tag("NH") and read.get_tag("NH") > 1

def _iter_mate_pairs(alignments,summary):
    """Pair adjacent alignments that share a query name. Unpaired alignments
    are counted as `__missing_mate` in `summary`

    Yields
    ------
    tuple
        `(first mate, second mate)`
    """
    pending = None
    for read in alignments:
        if pending is None:
            pending = read
        elif pending.query_name == read.query_name:
            yield (read, pending) if read.is_read1 else (pending, read)
            pending = None
        else:
            summary[MISSING_MATE] += 1
            pending = read

    if pending is not None:
        summary[MISSING_MATE] += 1

def _screen_reads(reads,min_qual):
    """Return the summary counter that should absorb `reads`, or `None` if
    they should be counted against features
    """
    mapped = [X for X in reads if not X.is_unmapped]
    if len(mapped) == 0:
        return NOT_ALIGNED
    if any(_is_multimapper(X) for X in mapped):
        return ALIGNMENT_NOT_UNIQUE
    if any(X.mapping_quality < min_qual for X in mapped):
        return TOO_LOW_AQUAL

    return None

def count_reads(alignments,genomic_array,counts,stranded=StrandUsage.YES,
                mode=OverlapMode.UNION,remove_ambiguous=True,min_qual=0,
                paired_end=False,printer=None):
    """Count aligned reads, or read pairs, against the features in `genomic_array`

    Unmapped reads, reads with an `NH` tag above 1, and reads with mapping
    quality below `min_qual` are not counted against features, but are
    tallied in the returned summary.

    Parameters
    ----------
    alignments : iterable
        :class:`pysam.AlignedSegment` objects. If `paired_end` is `True`,
        mates must be adjacent (e.g. sorted by read name)

    genomic_array : |GenomicArray|
        Index of features

    counts : dict
        Dictionary mapping feature IDs to counts, updated in place.
        Must already contain every feature ID in `genomic_array`

    stranded : |StrandUsage|, optional
        Strand usage of library (Default: `StrandUsage.YES`)

    mode : |OverlapMode|, optional
        Overlap resolution mode (Default: `OverlapMode.UNION`)

    remove_ambiguous : bool, optional
        If `True`, reads assigned to several features are tallied as
        `__ambiguous`. If `False`, each of those features is incremented.
        (Default: `True`)

    min_qual : int, optional
        Minimum mapping quality (Default: `0`)

    paired_end : bool, optional
        Count pairs of mates as single fragments (Default: `False`)

    printer : file-like, optional
        Stream for progress messages (Default: |NullWriter|)

    Returns
    -------
    :class:`collections.OrderedDict`
        Summary counters, keyed by the names in :data:`SUMMARY_KEYS`
        (plus `__missing_mate` if `paired_end` is `True`)
    """
    printer = NullWriter() if printer is None else printer

    summary = OrderedDict((K,0) for K in SUMMARY_KEYS)
    if paired_end == True:
        summary[MISSING_MATE] = 0
        groups = _iter_mate_pairs(alignments,summary)
    else:
        groups = ((X,) for X in alignments)

    for n, reads in enumerate(groups):
        if n % 1000000 == 0 and n > 0:
            printer.write("Processed %s %s ..." % (n,"pairs" if paired_end else "reads"))

        reason = _screen_reads(reads,min_qual)
        if reason is not None:
            summary[reason] += 1
            continue

        intervals = []
        for read in reads:
            if not read.is_unmapped:
                intervals.extend(get_alignment_intervals(read,stranded))

        fs = features_overlapped(intervals,genomic_array,mode,stranded)
        if len(fs) == 0:
            summary[NO_FEATURE] += 1
        elif len(fs) == 1:
            counts[assign_features(fs)] += 1
        elif remove_ambiguous == True:
            summary[AMBIGUOUS] += 1
        else:
            for feature_id in fs:
                counts[str(feature_id)] += 1

    return summary
