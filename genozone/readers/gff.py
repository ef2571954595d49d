#!/usr/bin/env python
"""Readers for `GTF2`_ and `GFF3`_ annotation files.

|GTF2_Reader| and |GFF3_Reader| read annotation files line by line, and yield
a |GFFEntry| for each feature line. Each |GFFEntry| holds the nine columns of
its line, with the attributes in column 9 parsed into a dictionary. Entries are
not assembled into transcripts or genes: downstream code (e.g.
:func:`~genozone.genomics.annotation.store_annotation`) selects the entries
it needs by feature type, and groups them by attribute.

Comment lines, blank lines, and the `###` directive are skipped. Pragmas
(lines beginning with `##`) are collected in the reader's `metadata`
dictionary, except for `##sequence-region`, which is collected in
`sequence_regions`. Reading stops at a `##FASTA` pragma.


Examples
--------
Count exons per gene in a `GTF2`_ file::

    >>> from collections import Counter
    >>> exons = Counter()
    >>> for entry in GTF2_Reader(open("annotation.gtf")):
    >>>     if entry.type == "exon":
    >>>         exons[entry.get_attribute_value("gene_id")] += 1


See Also
--------
`GFF3 specification <http://song.sourceforge.net/gff3.shtml>`_
    GFF3 specification by the Sequence Ontology consortium

`GTF2.2 specification <http://mblab.wustl.edu/GTF22.html>`_
    Hosted by the Brent lab
"""
from abc import abstractmethod
from genozone.util.io.filters import AbstractReader
from genozone.genomics.intervals import GenomicInterval
from genozone.readers.gff_tokens import parse_GFF3_tokens, parse_GTF2_tokens
from genozone.util.services.exceptions import MalformedFileError



#===============================================================================
# INDEX: feature records
#===============================================================================

class GFFEntry(object):
    """One feature line of a `GTF2`_ or `GFF3`_ file

    Coordinates are 1-indexed and end-included, as in the file.

    Attributes
    ----------
    seqid : str
        Chromosome or contig name

    source : str
        Source of annotation

    type : str
        Feature type, e.g. `'exon'`

    start : int
        First position of feature

    end : int
        Last position of feature, inclusive

    score : float or None
        Score, or `None` if given as `'.'`

    strand : str
        `'+'`, `'-'`, or `'.'`

    phase : int or None
        Phase, or `None` if given as `'.'`

    attr : dict
        Attributes from column 9
    """

    def __init__(self,seqid,source,type,start,end,score=None,strand=".",phase=None,attr=None):
        self.seqid  = seqid
        self.source = source
        self.type   = type
        self.start  = start
        self.end    = end
        self.score  = score
        self.strand = strand
        self.phase  = phase
        self.attr   = {} if attr is None else attr

    def get_attribute_value(self,key):
        """Return the value of attribute `key`

        Multi-valued attributes (e.g. `Parent` in `GFF3`_) are joined
        with commas.

        Parameters
        ----------
        key : str
            Attribute name

        Returns
        -------
        str or None
            Value of attribute, or `None` if `key` is `None` or absent
        """
        if key is None:
            return None

        val = self.attr.get(key)
        if isinstance(val,list):
            return ",".join(val)

        return val

    def is_attribute(self,key):
        return key in self.attr

    def get_attributes_names(self):
        return set(self.attr)

    @property
    def length(self):
        return self.end - self.start + 1

    def to_interval(self,save_strand=True):
        """Return the |GenomicInterval| covered by this entry

        Parameters
        ----------
        save_strand : bool, optional
            If `False`, the interval is unstranded (`'.'`) regardless
            of the entry's strand. (Default: `True`)

        Returns
        -------
        |GenomicInterval|

        Raises
        ------
        InvalidArgumentError
            If the entry's coordinates or strand do not describe a valid interval
        """
        strand = self.strand if save_strand == True else "."
        return GenomicInterval(self.seqid,self.start,self.end,strand)

    def __eq__(self,other):
        if not isinstance(other,GFFEntry):
            return NotImplemented
        return self.__dict__ == other.__dict__

    def __ne__(self,other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __repr__(self):
        return "<%s %s %s:%s-%s(%s)>" % (self.__class__.__name__,
                                         self.type,
                                         self.seqid,
                                         self.start,
                                         self.end,
                                         self.strand)



#===============================================================================
# INDEX: readers
#===============================================================================

class AbstractGFF_Reader(AbstractReader):
    """Abstract base class for GFF readers.

    Parses GFF streams line by line into |GFFEntry| objects.

    Attributes
    ----------
    metadata : dict
        Dictionary of pragmas found in file, other than `sequence-region`

    sequence_regions : dict
        Dictionary mapping sequence names to `(start, end)` tuples,
        from `##sequence-region` pragmas

    line_num : int
        Number of lines read so far
    """

    format_name = "GFF"

    def __init__(self,stream):
        """Create an |AbstractGFF_Reader|

        Parameters
        ----------
        stream : file-like
            Input stream pointing to GFF information
        """
        AbstractReader.__init__(self,stream)
        self.filename         = getattr(stream,"name","%s stream" % self.format_name)
        self.metadata         = {}
        self.sequence_regions = {}
        self.line_num         = 0
        self._done            = False

    def __next__(self):
        while self._done == False:
            line = next(self.stream)
            self.line_num += 1
            entry = self.filter(line)
            if entry is not None:
                return entry

        raise StopIteration()

    def _parse_metatokens(self,inp):
        """Parse a pragma line, storing its contents in `self.metadata`
        or `self.sequence_regions`

        Parameters
        ----------
        inp : str
            Pragma, with leading `'##'` removed
        """
        items = inp.rstrip().split()
        if len(items) == 0:
            return

        key = items[0]
        if key == "FASTA":
            self._done = True
        elif key == "sequence-region":
            if len(items) != 4:
                raise MalformedFileError(self.filename,"Malformed sequence-region pragma: '%s'" % inp.strip(),line_num=self.line_num)
            self.sequence_regions[items[1]] = (items[2],items[3])
        elif key in self.metadata:
            self.metadata[key] += ";" + " ".join(items[1:])
        else:
            self.metadata[key] = " ".join(items[1:])

    @abstractmethod
    def _parse_tokens(self,attr_string):
        """Parse column 9, which is formatted differently in different GFF
        subtypes. Implement this in subclasses

        Parameters
        ----------
        attr_string : str
            Ninth column of GFF

        Returns
        -------
        dict
            Dictionary of parsed tokens from ninth GFF column
        """
        pass

    def _parse_feature(self,line):
        """Parse a GFF line into a |GFFEntry|

        Parameters
        ----------
        line : str
            Feature line of a GFF file

        Returns
        -------
        |GFFEntry|

        Raises
        ------
        MalformedFileError
            If the line does not have nine tab-delimited columns, if coordinates,
            score, or phase cannot be parsed, or if column 9 is malformed
        """
        items = line.rstrip("\n").split("\t")
        if len(items) != 9:
            raise MalformedFileError(self.filename,
                                     "Found %s fields, expected 9: '%s'" % (len(items),line.rstrip("\n")),
                                     line_num=self.line_num)

        seqid, source, feature_type, start, end, score, strand, phase, attr_string = items
        try:
            start = int(start)
            end   = int(end)
            score = None if score in ("",".") else float(score)
            phase = None if phase in ("",".") else int(phase)
            attr  = self._parse_tokens(attr_string)
        except ValueError as e:
            raise MalformedFileError(self.filename,str(e),line_num=self.line_num)

        if strand == "":
            strand = "."

        return GFFEntry(seqid,source,feature_type,start,end,
                        score=score,strand=strand,phase=phase,attr=attr)

    def filter(self,line):
        """Parse a line of the GFF stream.

        Pragmas are handed to :meth:`_parse_metatokens`. Comments, blank lines,
        and `###` directives yield `None`, and are skipped by :meth:`__next__`

        Parameters
        ----------
        line : str
            Next line from GFF stream

        Returns
        -------
        |GFFEntry| or None
        """
        if len(line.strip()) == 0 or line[0:3] == "###":
            return None
        elif line[0:2] == "##":
            self._parse_metatokens(line[2:])
            return None
        elif line[0:1] == "#":
            return None

        return self._parse_feature(line)


class GFF3_Reader(AbstractGFF_Reader):
    """Parse each feature line of a `GFF3`_ into a |GFFEntry|.

    `GFF3`_ attributes (from column 9) are unescaped strings, except for
    `Parent`, `Alias`, `Dbxref`, `dbxref`, `Ontology_term` and `Note`, which
    are lists, because the `GFF3`_ spec enables these to have multiple values.
    """

    format_name = "GFF3"

    def _parse_tokens(self,inp):
        return parse_GFF3_tokens(inp)


class GTF2_Reader(AbstractGFF_Reader):
    """Parse each feature line of a `GTF2`_ into a |GFFEntry|.

    All attributes are strings. Repeated attributes (e.g. `tag`) are
    catenated with commas.
    """

    format_name = "GTF2"

    def _parse_tokens(self,inp):
        return parse_GTF2_tokens(inp)
