#!/usr/bin/env python
"""This module contains classes that:

  - build :class:`argparse.ArgumentParser` objects for the file types
    and options used to count reads over features

  - parse those arguments into useful objects


Arguments are grouped into the following sets:

    ===========================================================   ======================================
    **Parameter/argument set**                                    **Parser building class**
    -----------------------------------------------------------   --------------------------------------
    Read alignments, and rules for counting them                  :class:`AlignmentParser`

    Feature annotations                                           :class:`AnnotationParser`

    Chromosome names & lengths                                    :class:`GenomeParser`
    ===========================================================   ======================================


Example
-------
To use any of these in your own command line scripts, follow these steps:

  #. Import one or more of the classes above::

         >>> import argparse
         >>> from genozone.util.scriptlib.argparsers import AnnotationParser


  #. Create an :class:`~argparse.ArgumentParser` from the class, and supply
     it as a `parent` when you build your script's
     :py:class:`~argparse.ArgumentParser`::

         >>> ap = AnnotationParser()
         >>> annotation_file_parser = ap.get_parser()
         >>> my_own_parser = argparse.ArgumentParser(parents=[annotation_file_parser])
         >>> my_own_parser.add_argument("outfile",type=str)

  #. Then, parse the arguments and hand them back to the class::

         >>> args = my_own_parser.parse_args()
         >>> ga, counts = ap.get_genomic_array_from_args(args,StrandUsage.YES)
"""
import sys
import warnings
import argparse
import pysam
from genozone.util.services.exceptions import ArgumentWarning
from genozone.util.io.openers import opener, multiopen, NullWriter
from genozone.genomics.genome_description import GenomeDescription
from genozone.genomics.genomic_array import GenomicArray
from genozone.genomics.annotation import store_annotation
from genozone.genomics.counting import StrandUsage, OverlapMode
from genozone.readers.gff import GTF2_Reader, GFF3_Reader

#===============================================================================
# INDEX: Help strings for various parsers
#===============================================================================

_DEFAULT_ALIGNMENT_FILE_PARSER_TITLE = "alignment and counting options"
_DEFAULT_ALIGNMENT_FILE_PARSER_DESCRIPTION = \
"""Open alignment file(s), and choose how reads are assigned to features."""

_DEFAULT_ANNOTATION_PARSER_TITLE = "annotation file options (one or more annotation files required)"
_DEFAULT_ANNOTATION_PARSER_DESCRIPTION = \
"""Open one or more annotation files, and choose which features they
contribute to the index, and how those features are named."""

_DEFAULT_GENOME_PARSER_TITLE = "genome options (optional)"
_DEFAULT_GENOME_PARSER_DESCRIPTION = \
"""Register chromosomes before features are loaded. If neither option is
given, chromosome names are taken from the alignment file headers."""

_BAM_MODES = { "BAM" : "rb", "SAM" : "r", "CRAM" : "rc" }



#===============================================================================
# INDEX: Base class for parsers
#===============================================================================

class Parser(object):
    """Base class for argument parser factories used below

    Parameters
    ----------
    groupname : str, optional
        Name of argument group. If not `None`, an argument group with
        the specified name will be created and added to the parser.
        If not, arguments will be in the main group.

    prefix : str, optional
        string prefix to add to default argument options (Default: "")

    disabled : list, optional
        list of parameter names that should be disabled from parser,
        without preceding dashes
    """

    def __init__(self,groupname=None,prefix="",disabled=None,**kwargs):
        self.prefix = prefix
        self.disabled = [] if disabled is None else disabled
        self.groupname = groupname

        # define in __init__ of subclass
        self.arguments = []

    def get_parser(self,parser=None,groupname=None,arglist=None,title=None,description=None,**kwargs):
        """Create and populate an :class:`argparse.ArgumentParser` with arguments

        Parameters
        ----------
        parser : :class:`argparse.ArgumentParser` or None, optional
            If `None`, a new parser will be created, and arguments will be added
            to it. If not `None`, arguments will be added to `parser`.
            (Default: `None`)

        groupname : str or None, optional
            If `None`, default to `self.groupname`. If either `groupname`
            or `self.groupname` is not `None`, an option group with this name
            will be added to `parser`, and arguments added to that group
            instead of the main argument group of `parser`. In this case, `title`
            and `description` will be applied to the option group instead of to `parser`.

        arglist : list, optional
            If not `None`, arguments in this list will be added to `parser`.
            Otherwise, arguments will be taken from `self.arguments`.

            The list should be a list of tuples of ('argument_name',dict_of_options),
            where `argument_name` is a string, and `dict_of_options` a dictionary
            of keyword arguments to pass to :meth:`argparse.ArgumentParser.add_argument`.

        title : str, optional
            Optional title for parser

        description : str, optional
            Optional description for parser

        kwargs : keyword arguments
            Additional arguments passed during creation of :class:`argparse.ArgumentParser`


        Returns
        -------
        :class:`argparse.ArgumentParser`
        """
        if groupname is None:
            groupname = self.groupname

        if parser is None:
            if groupname is None:
                parser = argparse.ArgumentParser(description=description,add_help=False,**kwargs)
            else:
                parser = argparse.ArgumentParser(add_help=False,**kwargs)

        addto = parser
        if groupname is not None:
            addto = parser.add_argument_group(title=title,description=description)

        arglist = self.arguments if arglist is None else arglist
        for arg_name, arg_opts in filter(lambda x: x[0] not in self.disabled,arglist):
            addto.add_argument("--%s%s" % (self.prefix,arg_name),**arg_opts)

        return parser

    def _get_arg(self,args,name,default=None):
        """Fetch argument `name` from a wrapped namespace, or `default` if
        `name` was disabled
        """
        if name in self.disabled:
            return default

        return getattr(args,name)



#===============================================================================
# INDEX: Alignment file parser
#===============================================================================

class AlignmentParser(Parser):
    """Parser for alignment files, and for the rules that assign aligned
    reads to features

    Parameters
    ----------
    groupname : str, optional
        Name of argument group. If not `None`, an argument group with
        the specified name will be created and added to the parser.
        If not, arguments will be in the main group.

    prefix : str, optional
        string prefix to add to default argument options (Default: "")

    disabled : list, optional
        list of parameter names that should be disabled from parser,
        without preceding dashes

    input_choices : list, optional
        list of permitted alignment file type choices for input
    """

    def __init__(self,prefix="",disabled=None,
                 input_choices=("BAM","SAM","CRAM"),
                 groupname="alignment_options"):
        Parser.__init__(self,groupname=groupname,prefix=prefix,disabled=disabled)
        self.input_choices = input_choices
        self.arguments = [
            ("count_files"     , dict(type=str,
                                      default=[],
                                      nargs="+",
                                      help="One or more alignment file(s) from a single sample or set of samples to be pooled.")),
            ("countfile_format", dict(choices=input_choices,
                                      default="BAM",
                                      help="Format of file containing alignments (Default: %(default)s)")),
            ("stranded"        , dict(choices=[X.value for X in StrandUsage],
                                      default="yes",
                                      help="Whether reads must be on the same strand as features ('yes'), "+
                                           "on the opposite strand ('reverse'), or on either ('no'). "+
                                           "For paired-end reads, applies to the first mate. (Default: %(default)s)")),
            ("mode"            , dict(choices=[X.value for X in OverlapMode],
                                      default="union",
                                      help="Rule for assigning reads that overlap more than one feature, "+
                                           "or that only partly overlap features (Default: %(default)s)")),
            ("min_qual"        , dict(type=int,
                                      default=0,
                                      metavar="N",
                                      help="Skip alignments with mapping quality below N (Default: %(default)s)")),
            ("keep_ambiguous"  , dict(action="store_true",
                                      default=False,
                                      help="Count reads that overlap several features towards all of them, "+
                                           "instead of tallying them as '__ambiguous' (Default: %(default)s)")),
            ]

    def get_parser(self,
                   title=_DEFAULT_ALIGNMENT_FILE_PARSER_TITLE,
                   description=_DEFAULT_ALIGNMENT_FILE_PARSER_DESCRIPTION,
                   **kwargs):
        """Return an :py:class:`~argparse.ArgumentParser` that opens alignment files

        Parameters
        ----------
        title : str, optional
            title for option group (used in command-line help screen)

        description : str, optional
            description of parser (used in command-line help screen)

        kwargs : keyword arguments
            Additional arguments to pass to :meth:`Parser.get_parser`

        Returns
        -------
        :class:`argparse.ArgumentParser`
        """
        return Parser.get_parser(self,title=title,description=description,**kwargs)

    def get_alignment_files_from_args(self,args,printer=None):
        """Open the alignment files named in `args`

        Parameters
        ----------
        args : :py:class:`argparse.Namespace`
            Arguments from the parser

        printer : file-like, optional
            A stream to which stderr-like info can be written (Default: |NullWriter|)

        Returns
        -------
        list
            List of open :class:`pysam.AlignmentFile` objects
        """
        if printer is None:
            printer = NullWriter()

        args = PrefixNamespaceWrapper(args,self.prefix)

        # require at least one countfile
        if len(args.count_files) == 0:
            printer.write("Please include at least one input file.")
            sys.exit(1)

        fmt  = self._get_arg(args,"countfile_format","BAM")
        mode = _BAM_MODES[fmt]
        printer.write("Opening %s file(s) %s ..." % (fmt,", ".join(args.count_files)))
        return list(multiopen(args.count_files,fn=pysam.AlignmentFile,args=(mode,)))

    def get_strand_usage_from_args(self,args):
        """Return the |StrandUsage| named in `args`"""
        args = PrefixNamespaceWrapper(args,self.prefix)
        return StrandUsage.from_name(self._get_arg(args,"stranded","yes"))

    def get_overlap_mode_from_args(self,args):
        """Return the |OverlapMode| named in `args`"""
        args = PrefixNamespaceWrapper(args,self.prefix)
        return OverlapMode.from_name(self._get_arg(args,"mode","union"))

    def get_counting_options_from_args(self,args):
        """Collect the counting options in `args` as keyword arguments
        for :func:`~genozone.genomics.counting.count_reads`

        Parameters
        ----------
        args : :py:class:`argparse.Namespace`
            Arguments from the parser

        Returns
        -------
        dict
            Keys `stranded`, `mode`, `remove_ambiguous` and `min_qual`
        """
        wrapped = PrefixNamespaceWrapper(args,self.prefix)
        min_qual = self._get_arg(wrapped,"min_qual",0)
        if min_qual < 0:
            warnings.warn("Minimum mapping quality %s is negative. Using 0." % min_qual,ArgumentWarning)
            min_qual = 0

        return dict(stranded=self.get_strand_usage_from_args(args),
                    mode=self.get_overlap_mode_from_args(args),
                    remove_ambiguous=not self._get_arg(wrapped,"keep_ambiguous",False),
                    min_qual=min_qual)



#===============================================================================
# INDEX: Annotation file parser
#===============================================================================

class AnnotationParser(Parser):
    """Parser for annotation files, and for the features indexed from them

    Parameters
    ----------
    groupname : str, optional
        Name of argument group. If not `None`, an argument group with
        the specified name will be created and added to the parser.
        If not, arguments will be in the main group.

    prefix : str, optional
        string prefix to add to default argument options (Default: "")

    disabled : list, optional
        list of parameter names that should be disabled from parser,
        without preceding dashes

    input_choices : list, optional
        list of permitted annotation file type choices for input
    """

    def __init__(self,
                 prefix="",
                 disabled=None,
                 groupname="annotation_options",
                 input_choices=("GTF2","GFF3")
                ):
        Parser.__init__(self,groupname=groupname,prefix=prefix,disabled=disabled)
        self.input_choices = input_choices
        self.readers = { "GTF2" : GTF2_Reader, "GFF3" : GFF3_Reader }
        self.arguments = [
                ("annotation_files"      , dict(metavar="infile.[%s]" % " | ".join(input_choices),
                                                type=str,nargs="+",default=[],
                                                help="One or more annotation files")),
                ("annotation_format"     , dict(choices=input_choices,
                                                default="GTF2",
                                                help="Format of %sannotation_files (Default: %%(default)s)" % prefix)),
                ("feature_type"          , dict(type=str,
                                                default="exon",
                                                help="Feature type (column 3 of annotation file) to count. "+
                                                     "All other features are ignored. (Default: %(default)s)")),
                ("attribute_id"          , dict(type=str,
                                                default="gene_id",
                                                help="Attribute used to name features. Features sharing a value "+
                                                     "are counted together. (Default: %(default)s)")),
                ("split_attribute_values", dict(action="store_true",
                                                default=False,
                                                help="Treat comma-separated attribute values (e.g. GFF3 'Parent') "+
                                                     "as several features (Default: %(default)s)")),
            ]

    def get_parser(self,
                   title=_DEFAULT_ANNOTATION_PARSER_TITLE,
                   description=_DEFAULT_ANNOTATION_PARSER_DESCRIPTION,
                   **kwargs):
        """Return an :py:class:`~argparse.ArgumentParser` that opens annotation files

        Parameters
        ----------
        title : str, optional
            title for option group (used in command-line help screen)

        description : str, optional
            description of parser (used in command-line help screen)

        kwargs : keyword arguments
            Additional arguments to pass to :meth:`Parser.get_parser`

        Returns
        -------
        :class:`argparse.ArgumentParser`
        """
        return Parser.get_parser(self,title=title,description=description,**kwargs)

    def get_readers_from_args(self,args,printer=None):
        """Return one reader per annotation file named in `args`

        Parameters
        ----------
        args : :py:class:`argparse.Namespace`
            Arguments from the parser

        printer : file-like, optional
            A stream to which stderr-like info can be written (Default: |NullWriter|)

        Returns
        -------
        list
            |GTF2_Reader| or |GFF3_Reader| objects
        """
        if printer is None:
            printer = NullWriter()

        args = PrefixNamespaceWrapper(args,self.prefix)
        if len(args.annotation_files) == 0:
            printer.write("Please include at least one annotation file.")
            sys.exit(1)

        reader = self.readers[args.annotation_format]
        return [reader(opener(X)) for X in args.annotation_files]

    def get_genomic_array_from_args(self,args,stranded,genomic_array=None,printer=None):
        """Index the features named in `args`

        Parameters
        ----------
        args : :py:class:`argparse.Namespace`
            Arguments from the parser

        stranded : |StrandUsage|
            Strand usage, which decides whether features keep their strands

        genomic_array : |GenomicArray|, optional
            Index to fill, e.g. one with chromosomes registered already.
            If `None`, a new one is created

        printer : file-like, optional
            A stream to which stderr-like info can be written (Default: |NullWriter|)

        Returns
        -------
        |GenomicArray|
            Index of features

        dict
            Dictionary mapping each feature ID to `0`
        """
        if printer is None:
            printer = NullWriter()

        if genomic_array is None:
            genomic_array = GenomicArray()

        wrapped = PrefixNamespaceWrapper(args,self.prefix)
        feature_type = wrapped.feature_type
        attribute_id = wrapped.attribute_id
        split_values = self._get_arg(wrapped,"split_attribute_values",False)

        counts = {}
        printer.write("Parsing '%s' features in %s ..." % (feature_type,", ".join(wrapped.annotation_files)))
        for reader in self.get_readers_from_args(args,printer=printer):
            store_annotation(genomic_array,reader,feature_type,stranded,attribute_id,
                             split_attribute_values=split_values,counts=counts)
            reader.close()

        if len(counts) == 0:
            printer.write("No features of type '%s' found in %s. Exiting." % (feature_type,", ".join(wrapped.annotation_files)))
            sys.exit(1)

        printer.write("Indexed %s features." % len(counts))
        return genomic_array, counts



#===============================================================================
# INDEX: Genome parser
#===============================================================================

class GenomeParser(Parser):
    """Parser for files that name the chromosomes of a genome

    Parameters
    ----------
    groupname : str, optional
        Name of argument group. If not `None`, an argument group with
        the specified name will be created and added to the parser.
        If not, arguments will be in the main group.

    prefix : str, optional
        string prefix to add to default argument options (Default: "")

    disabled : list, optional
        list of parameter names that should be disabled from parser,
        without preceding dashes
    """

    def __init__(self,groupname="genome_options",prefix="",disabled=None):
        Parser.__init__(self,groupname=groupname,prefix=prefix,disabled=disabled)
        self.arguments = [
                ("genome_description", dict(type=str,
                                            default=None,
                                            metavar="infile.txt",
                                            help="Genome description file, as written by GenomeDescription.save")),
                ("fasta"             , dict(type=str,
                                            default=None,
                                            metavar="infile.fa",
                                            help="FASTA file of genome sequence. Ignored if %sgenome_description is given." % prefix)),
            ]

    def get_parser(self,
                   title=_DEFAULT_GENOME_PARSER_TITLE,
                   description=_DEFAULT_GENOME_PARSER_DESCRIPTION,
                   **kwargs):
        """Return an :py:class:`~argparse.ArgumentParser` that opens genome descriptions

        Parameters
        ----------
        title : str, optional
            title for option group (used in command-line help screen)

        description : str, optional
            description of parser (used in command-line help screen)

        kwargs : keyword arguments
            Additional arguments to pass to :meth:`Parser.get_parser`

        Returns
        -------
        :class:`argparse.ArgumentParser`
        """
        return Parser.get_parser(self,title=title,description=description,**kwargs)

    def get_genome_description_from_args(self,args,printer=None):
        """Return a |GenomeDescription| from the file named in `args`

        Parameters
        ----------
        args : :py:class:`argparse.Namespace`
            Arguments from the parser

        printer : file-like, optional
            A stream to which stderr-like info can be written (Default: |NullWriter|)

        Returns
        -------
        |GenomeDescription| or None
            `None` if no genome file was given
        """
        if printer is None:
            printer = NullWriter()

        args  = PrefixNamespaceWrapper(args,self.prefix)
        gdesc = self._get_arg(args,"genome_description")
        fasta = self._get_arg(args,"fasta")

        if gdesc is not None:
            if fasta is not None:
                warnings.warn("Both a genome description and a FASTA file were given. Using the genome description.",ArgumentWarning)

            printer.write("Reading genome description from '%s' ..." % gdesc)
            with opener(gdesc) as fh:
                return GenomeDescription.load(fh)

        if fasta is not None:
            printer.write("Reading sequence names and lengths from '%s' ..." % fasta)
            with opener(fasta) as fh:
                return GenomeDescription.from_fasta(fh)

        return None



#===============================================================================
# INDEX: Utility classes
#===============================================================================

class PrefixNamespaceWrapper(object):
    """Wrapper class to facilitate processing of :py:class:`~argparse.Namespace`
    objects created by parsers built with non-empty ``prefix`` values,
    as if no prefix had been used.

    Attributes
    ----------
    namespace : :py:class:`~argparse.Namespace`
        Result of calling :py:meth:`argparse.ArgumentParser.parse_args`

    prefix : str
        Prefix that will be prepended to names of attributes of `self.namespace`
        before they are fetched. Must match prefix that was used in creation
        of the :py:class:`argparse.ArgumentParser` that created `self.namespace`
    """

    def __init__(self,namespace,prefix):
        self.namespace = namespace
        self.prefix = prefix

    def __getattr__(self,k):
        """Fetch an attribute from `self.namespace`, prepending `self.prefix` to `k`
        before fetching

        Parameters
        ----------
        k : str
            Attribute to fetch
        """
        return getattr(self.namespace,"%s%s" % (self.prefix,k))
