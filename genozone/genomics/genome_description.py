#!/usr/bin/env python
"""This module defines |GenomeDescription|, an ordered catalogue of the
sequences (chromosomes, contigs, plasmids) in a genome and their lengths.

A |GenomeDescription| is used to pre-register chromosomes in a |GenomicArray|
before any features are loaded, and to check that alignments and annotations
refer to the same set of sequences.

Descriptions may be built from:

  - a `FASTA`_ file, via :meth:`GenomeDescription.from_fasta`, which also
    computes an MD5 digest of the genome

  - a `GFF3`_ file, via :meth:`GenomeDescription.from_gff`, from its embedded
    `##FASTA` section if present, or from its `##sequence-region` pragmas

  - a previously saved description, via :meth:`GenomeDescription.load`


File format
-----------
Descriptions are saved as `key=value` lines::

    genome.name=sacCer3
    genome.md5=3d4e1f3b0e1c5a7e5a1cdb3a8cc63c12
    genome.sequences=2
    genome.length=1043402
    genome.sequence.chrI=230218
    genome.sequence.chrII=813184
"""
import hashlib
import os
from collections import OrderedDict
from Bio import SeqIO
from Bio.Data.IUPACData import ambiguous_dna_letters
from genozone.util.services.exceptions import MalformedFileError

_PREFIX          = "genome."
_NAME_KEY        = _PREFIX + "name"
_MD5_KEY         = _PREFIX + "md5"
_COUNT_KEY       = _PREFIX + "sequences"
_LENGTH_KEY      = _PREFIX + "length"
_SEQUENCE_PREFIX = _PREFIX + "sequence."

_VALID_BASES = frozenset(ambiguous_dna_letters + ambiguous_dna_letters.lower() + "-")


def _get_filename(stream,default="genome"):
    name = getattr(stream,"name",None)
    if not isinstance(name,str):
        return default

    return os.path.basename(name).split(".")[0]


class GenomeDescription(object):
    """Ordered mapping of sequence names to sequence lengths

    Attributes
    ----------
    genome_name : str or None
        Name of genome

    md5 : str or None
        Hex MD5 digest of the genome's sequence names and sequences, if known
    """

    def __init__(self,genome_name=None,md5=None):
        self.genome_name = genome_name
        self.md5         = md5
        self._sequences  = OrderedDict()

    def add_sequence(self,name,length):
        """Add a sequence, or update its length if already present

        Parameters
        ----------
        name : str
            Sequence name

        length : int
            Sequence length, in nucleotides
        """
        self._sequences[name] = int(length)

    def get_sequence_length(self,name):
        """Return length of sequence `name`, or `-1` if `name` is unknown"""
        return self._sequences.get(name,-1)

    def contains_sequence(self,name):
        return name in self._sequences

    def get_sequences_names(self):
        """Return sequence names, in the order they were added

        Returns
        -------
        list
        """
        return list(self._sequences)

    def get_sequence_count(self):
        return len(self._sequences)

    def get_genome_length(self):
        """Return the sum of all sequence lengths"""
        return sum(self._sequences.values())

    def __contains__(self,name):
        return self.contains_sequence(name)

    def __iter__(self):
        return iter(self._sequences)

    def __len__(self):
        return len(self._sequences)

    def __eq__(self,other):
        if not isinstance(other,GenomeDescription):
            return NotImplemented
        return self.genome_name == other.genome_name and self.md5 == other.md5 and\
               list(self._sequences.items()) == list(other._sequences.items())

    def __ne__(self,other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __repr__(self):
        return "<%s name=%s sequences=%s length=%s md5=%s>" % (self.__class__.__name__,
                                                               self.genome_name,
                                                               self.get_sequence_count(),
                                                               self.get_genome_length(),
                                                               self.md5)

    def save(self,fh):
        """Write description to an open stream

        Parameters
        ----------
        fh : file-like
            Stream open for writing text
        """
        if self.genome_name is not None:
            fh.write("%s=%s\n" % (_NAME_KEY,self.genome_name))
        if self.md5 is not None:
            fh.write("%s=%s\n" % (_MD5_KEY,self.md5))

        fh.write("%s=%s\n" % (_COUNT_KEY,self.get_sequence_count()))
        fh.write("%s=%s\n" % (_LENGTH_KEY,self.get_genome_length()))
        for name, length in self._sequences.items():
            fh.write("%s%s=%s\n" % (_SEQUENCE_PREFIX,name,length))

    @staticmethod
    def load(fh):
        """Read a description written by :meth:`save`

        Lines without `'='`, unknown keys, and sequence lengths that are
        not integers are skipped.

        Parameters
        ----------
        fh : file-like
            Stream open for reading text

        Returns
        -------
        |GenomeDescription|
        """
        result = GenomeDescription()
        for line in fh:
            key, sep, value = line.rstrip("\n").partition("=")
            if sep == "":
                continue

            key   = key.strip()
            value = value.strip()
            if key == _NAME_KEY:
                result.genome_name = value
            elif key == _MD5_KEY:
                result.md5 = value
            elif key.startswith(_SEQUENCE_PREFIX):
                try:
                    result.add_sequence(key[len(_SEQUENCE_PREFIX):],int(value))
                except ValueError:
                    continue

        return result

    @staticmethod
    def from_fasta(fh,genome_name=None):
        """Build a description from a `FASTA`_ file

        Sequence names are the first word of each FASTA header. The MD5
        digest covers each sequence name followed by its sequence.

        Parameters
        ----------
        fh : file-like
            Stream open for reading text

        genome_name : str, optional
            Name of genome. If `None`, taken from the basename of `fh`

        Returns
        -------
        |GenomeDescription|

        Raises
        ------
        MalformedFileError
            If a sequence name appears twice, or if a sequence contains
            characters outside the ambiguous DNA alphabet
        """
        filename = getattr(fh,"name","FASTA stream")
        if genome_name is None:
            genome_name = _get_filename(fh)

        result = GenomeDescription(genome_name=genome_name)
        digest = hashlib.md5()
        for record in SeqIO.parse(fh,"fasta"):
            name = record.id
            if name == "":
                raise MalformedFileError(filename,"Sequence header is empty.")
            if name in result:
                raise MalformedFileError(filename,"Sequence name found twice: %s" % name)

            seq = str(record.seq)
            bad = set(seq) - _VALID_BASES
            if len(bad) > 0:
                raise MalformedFileError(filename,"Invalid base(s) in sequence %s: %s" % (name,", ".join(sorted(bad))))

            digest.update(name.encode("utf-8"))
            digest.update(seq.encode("utf-8"))
            result.add_sequence(name,len(seq))

        result.md5 = digest.hexdigest()
        return result

    @staticmethod
    def from_gff(fh,genome_name=None):
        """Build a description from a `GFF3`_ file

        If the file contains a `##FASTA` section, sequences are read from it
        as in :meth:`from_fasta`. Otherwise, names and lengths are taken from
        `##sequence-region seqid start end` pragmas.

        Parameters
        ----------
        fh : file-like
            Stream open for reading text

        genome_name : str, optional
            Name of genome. If `None`, taken from the basename of `fh`

        Returns
        -------
        |GenomeDescription|
        """
        filename = getattr(fh,"name","GFF3 stream")
        if genome_name is None:
            genome_name = _get_filename(fh)

        result = GenomeDescription(genome_name=genome_name)
        for line_num, line in enumerate(fh):
            if line.startswith("##FASTA"):
                return GenomeDescription.from_fasta(fh,genome_name=genome_name)

            if line.startswith("##sequence-region"):
                items = line.strip().split()
                if len(items) != 4:
                    raise MalformedFileError(filename,"Malformed sequence-region pragma: '%s'" % line.strip(),line_num=line_num)

                name = items[1]
                if name in result:
                    raise MalformedFileError(filename,"Sequence name found twice: %s" % name,line_num=line_num)
                try:
                    start, end = int(items[2]), int(items[3])
                except ValueError:
                    raise MalformedFileError(filename,"Non-integer coordinates in sequence-region pragma: '%s'" % line.strip(),line_num=line_num)

                result.add_sequence(name,end - start + 1)

        return result
