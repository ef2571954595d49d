#!/usr/bin/env python
"""Count the number of :term:`read alignments<alignment>` overlapping each
feature in an annotation file, following the rules of `htseq-count`_.

Features of one type (e.g. `exon`) are read from a `GTF2`_ or `GFF3`_ file and
grouped by one of their attributes (e.g. `gene_id`). Each read (or read pair)
is assigned to the single group it overlaps, under the chosen overlap mode.
Reads that cannot be assigned are tallied in summary counters instead.

Results are output as a table with the following columns:

    ========================  ==================================================
    **Name**                  **Definition**
    ------------------------  --------------------------------------------------
    `feature_id`              Value of the attribute named by `--attribute_id`

    `counts`                  Number of reads or read pairs assigned to feature
    ========================  ==================================================

The table ends with the summary counters:

    ==========================  ================================================
    **Name**                    **Definition**
    --------------------------  ------------------------------------------------
    `__no_feature`              Reads overlapping no feature

    `__ambiguous`               Reads overlapping several features

    `__too_low_aQual`           Reads below `--min_qual`

    `__not_aligned`             Unaligned reads

    `__alignment_not_unique`    Reads with more than one reported alignment
                                (`NH` tag above 1)

    `__missing_mate`            Paired-end reads without an adjacent mate
                                (paired-end input only)
    ==========================  ================================================

Paired-end input is detected from the first read of each alignment file,
and must be sorted by read name.

See also
--------
:mod:`~genozone.genomics.counting`
    Rules for assigning reads to features
"""
import argparse
import inspect
import itertools
import sys
import warnings
from collections import OrderedDict
from genozone.util.io.filters import NameDateWriter
from genozone.util.io.openers import argsopener, get_short_name
from genozone.util.scriptlib.argparsers import AlignmentParser, AnnotationParser, GenomeParser
from genozone.util.scriptlib.help_formatters import format_module_docstring
from genozone.util.services.exceptions import DataWarning
from genozone.genomics.genomic_array import GenomicArray
from genozone.genomics.counting import count_reads, SUMMARY_KEYS, MISSING_MATE

warnings.simplefilter("once")
printer = NameDateWriter(get_short_name(inspect.stack()[-1][1]))


def peek_paired_end(alignment_file):
    """Check whether an alignment file holds paired-end reads, from its first read

    Parameters
    ----------
    alignment_file : :class:`pysam.AlignmentFile`
        Open alignment file

    Returns
    -------
    bool
        `True` if the first read is paired

    iterator
        Iterator over all reads of `alignment_file`, including the first
    """
    reads = iter(alignment_file)
    try:
        first = next(reads)
    except StopIteration:
        return False, iter(())

    return first.is_paired, itertools.chain([first],reads)

def register_chromosomes(genomic_array,genome,alignment_files):
    """Register chromosomes from a genome description, and from the headers of
    the alignment files, in `genomic_array`
    """
    if genome is not None:
        genomic_array.add_chromosomes(genome)

    for alignment_file in alignment_files:
        for name in alignment_file.references:
            if genome is not None and name not in genome:
                warnings.warn("Chromosome '%s' is in an alignment file header but not in the genome description." % name,
                              DataWarning)
            genomic_array.add_chromosome(name)

def main(argv=sys.argv[1:]):
    """Command-line program

    Parameters
    ----------
    argv : list, optional
        A list of command-line arguments, which will be processed
        as if the script were called from the command line if
        :func:`main` is called directly.

        Default: `sys.argv[1:]`. The command-line arguments, if the script is
        invoked from the command line
    """
    al = AlignmentParser()
    an = AnnotationParser()
    gp = GenomeParser()

    parser = argparse.ArgumentParser(description=format_module_docstring(__doc__),
                                     formatter_class=argparse.RawDescriptionHelpFormatter,
                                     parents=[al.get_parser(),
                                              an.get_parser(),
                                              gp.get_parser()],
                                     )
    parser.add_argument("outfile",type=str,help="Output filename")
    args = parser.parse_args(argv)

    options = al.get_counting_options_from_args(args)
    alignment_files = al.get_alignment_files_from_args(args,printer=printer)
    genome = gp.get_genome_description_from_args(args,printer=printer)

    ga = GenomicArray()
    register_chromosomes(ga,genome,alignment_files)
    ga, counts = an.get_genomic_array_from_args(args,options["stranded"],genomic_array=ga,printer=printer)

    summary = OrderedDict((K,0) for K in SUMMARY_KEYS)
    for filename, alignment_file in zip(args.count_files,alignment_files):
        paired_end, reads = peek_paired_end(alignment_file)
        printer.write("Counting %s reads in '%s' ..." % ("paired-end" if paired_end else "single-end",filename))
        file_summary = count_reads(reads,ga,counts,paired_end=paired_end,printer=printer,**options)
        for k, v in file_summary.items():
            summary[k] = summary.get(k,0) + v

        alignment_file.close()

    printer.write("Writing output to '%s' ..." % args.outfile)
    with argsopener(args.outfile,args,"w") as fout:
        fout.write("feature_id\tcounts\n")
        for feature_id in sorted(counts):
            fout.write("%s\t%s\n" % (feature_id,counts[feature_id]))

        for k, v in summary.items():
            fout.write("%s\t%s\n" % (k,v))

    if summary.get(MISSING_MATE,0) > 0:
        printer.write("%s reads had no adjacent mate. Is the input sorted by read name?" % summary[MISSING_MATE])

    printer.write("Done.")


if __name__ == "__main__":
    main()
