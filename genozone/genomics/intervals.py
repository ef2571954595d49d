#!/usr/bin/env python
"""This module defines |GenomicInterval|, the value type used to describe
a closed, 1-based, stranded range on a chromosome.

|GenomicInterval| objects are immutable and hashable, so they may be used as
dictionary keys. This is how |GenomicArray| reports the zones that overlap
a query: each zone's own coordinates become a |GenomicInterval| key, mapped
to the set of feature values stored in that zone.

Coordinates
-----------
Both `start` and `end` are inclusive, and counted from 1, as in `GTF2`_ and
`GFF3`_ files. So, the interval covering the first ten nucleotides of `chrI`
on the plus strand is::

    >>> iv = GenomicInterval("chrI",1,10,"+")
    >>> iv.length
    10

Strands
-------
Strands are given as `'+'`, `'-'`, or `'.'` (unstranded). When testing for
overlap with :meth:`GenomicInterval.intersect`, an unstranded interval is
compatible with intervals on either strand.

Ordering
--------
Intervals sort by chromosome name, then `start`, then `end`. Strand is
ignored for sorting, but not for equality::

    >>> a = GenomicInterval("chrI",10,20,"+")
    >>> b = GenomicInterval("chrI",10,20,"-")
    >>> a == b
    False
    >>> a < b or b < a
    False
"""
from numbers import Integral
from genozone.util.services.exceptions import InvalidArgumentError

STRANDS = ("+","-",".")
"""Strand codes accepted by |GenomicInterval|"""


def _check_position(name,value):
    if isinstance(value,bool) or not isinstance(value,Integral):
        raise InvalidArgumentError("%s must be an integer. Got '%s'" % (name,value))


class GenomicInterval(object):
    """Immutable, closed, 1-based range on one strand of a chromosome

    Attributes
    ----------
    chromosome : str
        Chromosome name

    start : int
        First position in interval, counting from 1

    end : int
        Last position in interval, inclusive

    strand : str
        `'+'`, `'-'`, or `'.'`

    length : int
        Number of positions covered by the interval, `end - start + 1`
    """

    __slots__ = ("_chromosome","_start","_end","_strand")

    def __init__(self,chromosome,start,end,strand="."):
        """Create a |GenomicInterval|

        Parameters
        ----------
        chromosome : str
            Chromosome name

        start : int
            First position of interval, counting from 1

        end : int
            Last position of interval, inclusive. Must be `>= start`

        strand : str, optional
            `'+'`, `'-'`, or `'.'` (Default: `'.'`)

        Raises
        ------
        InvalidArgumentError
            If `chromosome` is `None`, if either coordinate is not an
            integer, if `start < 1`, if `end < start`, or if `strand`
            is not one of `'+'`, `'-'`, or `'.'`
        """
        if chromosome is None:
            raise InvalidArgumentError("Chromosome name must not be None.")

        _check_position("start",start)
        _check_position("end",end)

        if start < 1:
            raise InvalidArgumentError("Start position must be >= 1. Got %s" % start)
        if end < start:
            raise InvalidArgumentError("End position (%s) must be >= start position (%s)" % (end,start))
        if strand not in STRANDS:
            raise InvalidArgumentError("Strand must be one of %s. Got '%s'" % (", ".join(STRANDS),strand))

        object.__setattr__(self,"_chromosome",str(chromosome))
        object.__setattr__(self,"_start",int(start))
        object.__setattr__(self,"_end",int(end))
        object.__setattr__(self,"_strand",strand)

    def __setattr__(self,key,value):
        raise AttributeError("GenomicInterval is immutable.")

    def __delattr__(self,key):
        raise AttributeError("GenomicInterval is immutable.")

    @property
    def chromosome(self):
        return self._chromosome

    @property
    def start(self):
        return self._start

    @property
    def end(self):
        return self._end

    @property
    def strand(self):
        return self._strand

    @property
    def length(self):
        return self._end - self._start + 1

    def __len__(self):
        return self.length

    def include(self,start,end):
        """Test whether the range `[start, end]` lies entirely within this interval.
        `start` and `end` may be given in either order.

        Parameters
        ----------
        start, end : int
            Boundaries of range to test

        Returns
        -------
        bool
        """
        if start > end:
            start, end = end, start

        return start >= self._start and end <= self._end

    def intersect(self,start_or_interval,end=None):
        """Test whether this interval overlaps another range.

        Accepts either a pair of coordinates, in either order, on this
        interval's own chromosome and strand, or another |GenomicInterval|.
        When given an interval, overlap requires that the chromosomes match
        and that the strands be compatible (equal, or either one `'.'`).

        Parameters
        ----------
        start_or_interval : int or |GenomicInterval|
            Start of a range, or an interval to compare to

        end : int, optional
            End of range, if `start_or_interval` is a coordinate

        Returns
        -------
        bool
            `False` if `start_or_interval` is `None`
        """
        if start_or_interval is None:
            return False

        if isinstance(start_or_interval,GenomicInterval):
            other = start_or_interval
            if not self._compatible(other):
                return False
            start, end = other.start, other.end
        else:
            start = start_or_interval

        if start > end:
            start, end = end, start

        return start <= self._end and end >= self._start

    def intersect_length(self,start_or_interval,end=None):
        """Count the positions shared by this interval and another range.

        Arguments are interpreted as in :meth:`intersect`.

        Returns
        -------
        int
            Number of shared positions, `0` if the ranges do not overlap
        """
        if not self.intersect(start_or_interval,end):
            return 0

        if isinstance(start_or_interval,GenomicInterval):
            start, end = start_or_interval.start, start_or_interval.end
        else:
            start = start_or_interval

        if start > end:
            start, end = end, start

        return min(end,self._end) - max(start,self._start) + 1

    def _compatible(self,other):
        if self._chromosome != other.chromosome:
            return False

        return self._strand == other.strand or "." in (self._strand,other.strand)

    def as_tuple(self):
        """Return interval as a tuple of `(chromosome, start, end, strand)`"""
        return (self._chromosome,self._start,self._end,self._strand)

    def __eq__(self,other):
        if not isinstance(other,GenomicInterval):
            return NotImplemented
        return self.as_tuple() == other.as_tuple()

    def __ne__(self,other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __lt__(self,other):
        if not isinstance(other,GenomicInterval):
            return NotImplemented
        return (self._chromosome,self._start,self._end) < (other.chromosome,other.start,other.end)

    def __le__(self,other):
        if not isinstance(other,GenomicInterval):
            return NotImplemented
        return (self._chromosome,self._start,self._end) <= (other.chromosome,other.start,other.end)

    def __gt__(self,other):
        if not isinstance(other,GenomicInterval):
            return NotImplemented
        return other.__lt__(self)

    def __ge__(self,other):
        if not isinstance(other,GenomicInterval):
            return NotImplemented
        return other.__le__(self)

    def __hash__(self):
        return hash(self.as_tuple())

    def __str__(self):
        return "GenomicInterval{%s [%s-%s]%s}" % self.as_tuple()

    def __repr__(self):
        return "<%s %s:%s-%s(%s)>" % (self.__class__.__name__,
                                      self._chromosome,
                                      self._start,
                                      self._end,
                                      self._strand)

    def __getstate__(self):
        return self.as_tuple()

    def __setstate__(self,state):
        for name, value in zip(self.__slots__,state):
            object.__setattr__(self,name,value)
