#!/usr/bin/env python
"""This module defines |GenomicArray|, a strand-aware index that maps genomic
positions to sets of feature values (e.g. gene or exon IDs).

Each chromosome is held in a |ChromosomeZones| object, which in turn holds one
|StrandTrack| for each strand. A |StrandTrack| partitions its strand into
contiguous, non-overlapping |Zone| objects, starting at position 1 and ending
at the last position any feature has reached. Each |Zone| carries the set of
values whose intervals cover it. When a new interval is added, the zones at its
boundaries are split, so that every zone is either entirely inside or entirely
outside the interval, and the value is added to every zone inside it.

Queries return a dictionary mapping the |GenomicInterval| of each overlapped
zone to a copy of its value set. Unstranded (`'.'`) features are stored on the
plus-strand track, and queries always consult both tracks.

Examples
--------
Build an index of two overlapping features and ask which features overlap
positions 1-100 of `chrI`::

    >>> ga = GenomicArray()
    >>> ga.add_entry(GenomicInterval("chrI",10,20,"-"),"geneA")
    >>> ga.add_entry(GenomicInterval("chrI",15,25,"-"),"geneB")
    >>> for iv, values in sorted(ga.get_entries("chrI",1,100).items()):
    >>>     print(iv, sorted(values))
    GenomicInterval{chrI [1-9]-} []
    GenomicInterval{chrI [10-14]-} ['geneA']
    GenomicInterval{chrI [15-20]-} ['geneA', 'geneB']
    GenomicInterval{chrI [21-25]-} ['geneB']
    GenomicInterval{chrI [26-100]-} []

Queries on chromosomes that were never registered return `None`, while
queries on chromosomes that are registered but not covered return gap entries
with empty value sets::

    >>> ga.get_entries("chrX",1,10) is None
    True
    >>> ga.add_chromosome("chrII")
    >>> ga.get_entries("chrII",1,10)
    {<GenomicInterval chrII:1-10(.)>: set()}


See also
--------
:mod:`genozone.genomics.annotation`
    Load features from `GTF2`_ or `GFF3`_ files into a |GenomicArray|

:mod:`genozone.genomics.counting`
    Combine the result of queries into feature assignments for aligned reads
"""
from genozone.genomics.intervals import GenomicInterval
from genozone.util.services.exceptions import InvalidArgumentError, UnknownChromosomeError



#===============================================================================
# INDEX: zones and tracks
#===============================================================================

class Zone(object):
    """Contiguous range of positions on one strand track, and the set of values
    whose intervals cover all of it

    Attributes
    ----------
    start : int
        First position of zone (1-indexed, inclusive)

    end : int
        Last position of zone (inclusive)

    strand : str
        Strand label of the |StrandTrack| holding the zone

    values : set
        Values covering the zone. May be empty
    """

    __slots__ = ("start","end","strand","values")

    def __init__(self,start,end,strand,values=None):
        self.start  = start
        self.end    = end
        self.strand = strand
        self.values = set() if values is None else values

    def add_value(self,value):
        self.values.add(value)

    def intersect(self,start,end):
        """Return `True` if the zone shares any position with `[start, end]`"""
        return start <= self.end and end >= self.start

    def split(self,pos):
        """Truncate this zone so that it ends at `pos - 1`, and return a new zone
        covering `[pos, old end]` carrying a copy of this zone's values

        Parameters
        ----------
        pos : int
            First position of the new zone. Must satisfy `start < pos <= end`

        Returns
        -------
        |Zone|
        """
        new_zone = Zone(pos,self.end,self.strand,set(self.values))
        self.end = pos - 1
        return new_zone

    def to_interval(self,chromosome):
        return GenomicInterval(chromosome,self.start,self.end,self.strand)

    def __eq__(self,other):
        if not isinstance(other,Zone):
            return NotImplemented
        return (self.start,self.end,self.strand,self.values) == (other.start,other.end,other.strand,other.values)

    def __ne__(self,other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __repr__(self):
        return "<%s [%s-%s]%s %s>" % (self.__class__.__name__,self.start,self.end,self.strand,sorted(self.values,key=str))


class StrandTrack(object):
    """Ordered, gap-free partition of one strand of one chromosome into |Zone| objects.

    At all times, `zones[0].start == 1`, `zones[-1].end == length`, and
    `zones[i].end + 1 == zones[i+1].start`. The track starts empty, with
    `length == 0`, and grows as intervals extending past its end are added.
    It never shrinks.

    Attributes
    ----------
    chromosome : str
        Name of chromosome

    zones : list
        |Zone| objects, in order

    length : int
        Last position covered by the track

    strand : str or None
        Strand label reported for every zone of the track. `None` until the
        first insertion. A stranded (`'+'` or `'-'`) insertion always
        takes precedence over `'.'`, so the label depends only on the set
        of intervals inserted, not on their order.
    """

    def __init__(self,chromosome,strand=None):
        self.chromosome = chromosome
        self.zones      = []
        self.length     = 0
        self.strand     = strand

    def find_index_pos(self,pos):
        """Find the index of the zone containing `pos`, by binary search

        Parameters
        ----------
        pos : int
            Position, 1-indexed

        Returns
        -------
        int
            Index of zone in `self.zones`, or `-1` if `pos < 1` or `pos > self.length`
        """
        if pos < 1 or pos > self.length:
            return -1

        lo = 0
        hi = len(self.zones) - 1
        while lo <= hi:
            mid  = (lo + hi) // 2
            zone = self.zones[mid]
            if pos < zone.start:
                hi = mid - 1
            elif pos > zone.end:
                lo = mid + 1
            else:
                return mid

        return -1

    def _set_strand(self,strand):
        if self.strand is None or (self.strand == "." and strand != "."):
            self.strand = strand
            for zone in self.zones:
                zone.strand = strand

    def _split(self,index,pos):
        self.zones.insert(index+1,self.zones[index].split(pos))

    def add_entry(self,interval,value):
        """Add `value` to every position of `interval` on this track,
        splitting the zones at the interval's boundaries as needed

        Parameters
        ----------
        interval : |GenomicInterval|
            Interval covered by `value`

        value : object
            Hashable feature value
        """
        start = interval.start
        end   = interval.end
        self._set_strand(interval.strand)

        if end > self.length:
            self.zones.append(Zone(self.length + 1,end,self.strand))
            self.length = end

        index_start = self.find_index_pos(start)
        index_end   = self.find_index_pos(end)

        if index_start == index_end:
            zone = self.zones[index_start]
            if zone.start != start:
                self._split(index_start,start)
                index_start += 1
                zone = self.zones[index_start]
            if zone.end != end:
                self._split(index_start,end + 1)
            zone.add_value(value)
            return

        if self.zones[index_start].start != start:
            self._split(index_start,start)
            index_start += 1
            index_end   += 1

        if self.zones[index_end].end != end:
            self._split(index_end,end + 1)

        for zone in self.zones[index_start:index_end+1]:
            zone.add_value(value)

    def get_entries(self,start,stop):
        """Find the zones overlapping `[start, stop]`

        If `stop` lies past the end of the track, a single entry with an empty
        value set is added, covering `[max(start, length + 1), stop]`.

        Parameters
        ----------
        start : int
            First position of query

        stop : int
            Last position of query, inclusive

        Returns
        -------
        dict or None
            Dictionary mapping each overlapped zone's |GenomicInterval| to
            a copy of its value set, or `None` if `start` is not covered by the track
        """
        index_start = self.find_index_pos(start)
        if index_start == -1:
            return None

        index_end = self.find_index_pos(stop)
        if index_end == -1:
            index_end = len(self.zones) - 1

        dtmp = {}
        for zone in self.zones[index_start:index_end+1]:
            if zone.intersect(start,stop):
                dtmp[zone.to_interval(self.chromosome)] = set(zone.values)

        if stop > self.length:
            gap = GenomicInterval(self.chromosome,max(start,self.length + 1),stop,self.strand)
            dtmp[gap] = set()

        return dtmp

    def get_values(self):
        """Return the union of the value sets of all zones on the track"""
        values = set()
        for zone in self.zones:
            values |= zone.values

        return values

    def __iter__(self):
        return iter(self.zones)

    def __len__(self):
        return len(self.zones)

    def __eq__(self,other):
        if not isinstance(other,StrandTrack):
            return NotImplemented
        return self.chromosome == other.chromosome and self.strand == other.strand \
               and self.length == other.length and self.zones == other.zones

    def __ne__(self,other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __repr__(self):
        return "<%s %s length=%s zones=%s>" % (self.__class__.__name__,self.chromosome,self.length,len(self.zones))


class ChromosomeZones(object):
    """Pair of |StrandTrack| objects describing both strands of one chromosome.

    Features on the `'+'` and `'.'` strands are stored on the `plus` track;
    features on the `'-'` strand are stored on the `minus` track.
    """

    def __init__(self,chromosome):
        self.chromosome = chromosome
        self.plus       = StrandTrack(chromosome)
        self.minus      = StrandTrack(chromosome,"-")

    def get_track(self,strand):
        """Return the |StrandTrack| that stores features on `strand`"""
        if strand == "-":
            return self.minus

        return self.plus

    def add_entry(self,interval,value):
        self.get_track(interval.strand).add_entry(interval,value)

    def get_entries(self,start,stop):
        """Query both strand tracks for zones overlapping `[start, stop]`

        Parameters
        ----------
        start : int
            First position of query

        stop : int
            Last position of query, inclusive

        Returns
        -------
        dict
            Union of results from both tracks. If neither track covers `start`,
            a single unstranded entry covering `[start, stop]` with an empty
            value set
        """
        plus  = self.plus.get_entries(start,stop)
        minus = self.minus.get_entries(start,stop)

        if plus is None and minus is None:
            return { GenomicInterval(self.chromosome,start,stop,".") : set() }

        dtmp = {}
        if plus is not None:
            dtmp.update(plus)
        if minus is not None:
            dtmp.update(minus)

        return dtmp

    def get_values(self):
        return self.plus.get_values() | self.minus.get_values()

    def __eq__(self,other):
        if not isinstance(other,ChromosomeZones):
            return NotImplemented
        return self.plus == other.plus and self.minus == other.minus

    def __ne__(self,other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __repr__(self):
        return "<%s %s plus=%s minus=%s>" % (self.__class__.__name__,
                                              self.chromosome,
                                              self.plus.length,
                                              self.minus.length)



#===============================================================================
# INDEX: GenomicArray
#===============================================================================

class GenomicArray(object):
    """Strand-aware index mapping genomic intervals to sets of feature values.

    Chromosomes are registered explicitly via :meth:`add_chromosome` or
    :meth:`add_chromosomes`, or implicitly the first time an entry is added
    to them.

    Parameters
    ----------
    chromosomes : iterable or |GenomeDescription|, optional
        Chromosome names to register at creation

    Examples
    --------
    Seed an index from a genome description, then add a feature::

        >>> ga = GenomicArray(GenomeDescription.load(open("genome.txt")))
        >>> ga.add_entry(GenomicInterval("chrI",1000,2000,"+"),"YAL001C")
        >>> "chrI" in ga
        True
    """

    def __init__(self,chromosomes=None):
        self._chromosomes = {}
        if chromosomes is not None:
            self.add_chromosomes(chromosomes)

    def add_chromosome(self,name):
        """Register a chromosome, if it is not registered already

        Parameters
        ----------
        name : str
            Chromosome name

        Raises
        ------
        InvalidArgumentError
            If `name` is `None`
        """
        if name is None:
            raise InvalidArgumentError("Chromosome name must not be None.")

        if name not in self._chromosomes:
            self._chromosomes[name] = ChromosomeZones(name)

    def add_chromosomes(self,names):
        """Register many chromosomes at once

        Parameters
        ----------
        names : iterable or |GenomeDescription|
            Chromosome names, or a genome description whose sequence names
            will be registered. Sequence lengths are not used.

        Raises
        ------
        InvalidArgumentError
            If `names` is `None`, or is a single `str`
        """
        if names is None:
            raise InvalidArgumentError("Chromosome names must not be None.")

        if isinstance(names,str):
            raise InvalidArgumentError("Chromosome names must be an iterable of names, not a single string. Got '%s'" % names)

        if hasattr(names,"get_sequences_names"):
            names = names.get_sequences_names()

        for name in names:
            self.add_chromosome(name)

    def add_entry(self,interval,value):
        """Associate `value` with every position in `interval`

        Parameters
        ----------
        interval : |GenomicInterval|
            Interval covered by the feature

        value : object
            Hashable feature value, e.g. a gene ID

        Raises
        ------
        InvalidArgumentError
            If `interval` or `value` is `None`, if `value` is not hashable,
            or if `interval` is not a |GenomicInterval|. The index is left unchanged.
        """
        if interval is None:
            raise InvalidArgumentError("Interval must not be None.")
        if value is None:
            raise InvalidArgumentError("Value must not be None.")
        if not isinstance(interval,GenomicInterval):
            raise InvalidArgumentError("Interval must be a GenomicInterval. Got '%s'" % type(interval).__name__)
        try:
            hash(value)
        except TypeError:
            raise InvalidArgumentError("Value must be hashable. Got '%s'" % type(value).__name__)

        self.add_chromosome(interval.chromosome)
        self._chromosomes[interval.chromosome].add_entry(interval,value)

    def get_entries(self,interval_or_chromosome,start=None,stop=None):
        """Find the zones, and their values, that overlap a query range

        May be called as `get_entries(interval)` or as
        `get_entries(chromosome, start, stop)`. The query strand is ignored:
        both strand tracks are consulted.

        Parameters
        ----------
        interval_or_chromosome : |GenomicInterval| or str
            Query interval, or name of chromosome

        start : int, optional
            First position of query, if a chromosome name was given

        stop : int, optional
            Last position of query, inclusive, if a chromosome name was given

        Returns
        -------
        dict or None
            Dictionary mapping the |GenomicInterval| of each overlapped zone to
            a copy of its value set. `None` if the chromosome was never registered.

        Raises
        ------
        InvalidArgumentError
            If the query range is not a valid interval (e.g. `start < 1`,
            or `stop < start`)
        """
        if isinstance(interval_or_chromosome,GenomicInterval):
            query = interval_or_chromosome
        else:
            query = GenomicInterval(interval_or_chromosome,start,stop)

        czones = self._chromosomes.get(query.chromosome)
        if czones is None:
            return None

        return czones.get_entries(query.start,query.end)

    def get_features_ids(self):
        """Return the string form of every value in the index, sorted and de-duplicated

        Returns
        -------
        list
        """
        values = set()
        for czones in self._chromosomes.values():
            values |= czones.get_values()

        return sorted(set(str(X) for X in values))

    def contains_chromosome(self,name):
        """Return `True` if `name` is a registered chromosome, `False` otherwise (including `None`)"""
        if name is None:
            return False

        return name in self._chromosomes

    def __contains__(self,name):
        return self.contains_chromosome(name)

    def get_chromosomes_names(self):
        """Return names of registered chromosomes

        Returns
        -------
        frozenset
        """
        return frozenset(self._chromosomes)

    def __getitem__(self,name):
        """Return the |ChromosomeZones| for chromosome `name`

        Raises
        ------
        UnknownChromosomeError
            If `name` is not registered
        """
        try:
            return self._chromosomes[name]
        except KeyError:
            raise UnknownChromosomeError(name)

    def clear(self):
        """Remove all chromosomes and entries"""
        self._chromosomes.clear()

    def __len__(self):
        return len(self._chromosomes)

    def __eq__(self,other):
        if not isinstance(other,GenomicArray):
            return NotImplemented
        return self._chromosomes == other._chromosomes

    def __ne__(self,other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __repr__(self):
        return "<%s chromosomes=%s features=%s>" % (self.__class__.__name__,
                                                    len(self._chromosomes),
                                                    len(self.get_features_ids()))
