#!/usr/bin/env python
"""Load features from `GTF2`_ or `GFF3`_ annotation files into a |GenomicArray|.

Each feature of a chosen type (e.g. `'exon'`) is stored in the index under the
value of one of its attributes (e.g. `'gene_id'`). All exons of a gene thus
share one value, and a read overlapping any of them is assigned to the gene.

Examples
--------
Index the exons of a `GTF2`_ file by gene, and prepare a dictionary of counts::

    >>> ga = GenomicArray()
    >>> counts = store_annotation(ga,
    >>>                           GTF2_Reader(open("annotation.gtf")),
    >>>                           "exon",
    >>>                           StrandUsage.YES,
    >>>                           "gene_id")
"""
from genozone.util.services.exceptions import AnnotationError


def _split_values(value):
    return [X.strip() for X in value.split(",") if len(X.strip()) > 0]

def store_annotation(genomic_array,entries,feature_type,stranded,attribute_id,
                     split_attribute_values=False,counts=None):
    """Add features of type `feature_type` to `genomic_array`, keyed by their
    `attribute_id` attribute

    Parameters
    ----------
    genomic_array : |GenomicArray|
        Index to fill

    entries : iterable
        |GFFEntry| objects, typically a |GTF2_Reader| or |GFF3_Reader|

    feature_type : str
        Feature type to index (column 3 of the annotation file)

    stranded : |StrandUsage|
        If `save_strand_info` is `True`, features are indexed on their own
        strands, and features without a strand are refused. Otherwise, all
        features are indexed as unstranded

    attribute_id : str
        Attribute whose value identifies each feature

    split_attribute_values : bool, optional
        If `True`, attribute values are split on commas, and the feature
        is stored once under each resulting ID (Default: `False`)

    counts : dict, optional
        Dictionary of counts to extend. If `None`, a new one is created

    Returns
    -------
    dict
        `counts`, in which every stored ID maps to `0`

    Raises
    ------
    AnnotationError
        If a feature lacks `attribute_id`, or if a feature without strand
        information is found while `stranded` requires one
    """
    if counts is None:
        counts = {}

    save_strand = stranded.save_strand_info
    filename    = getattr(entries,"filename","annotation stream")

    for entry in entries:
        if entry.type != feature_type:
            continue

        line_num = getattr(entries,"line_num",None)
        value = entry.get_attribute_value(attribute_id)
        if value is None:
            raise AnnotationError(filename,
                                  "Feature %s does not contain a '%s' attribute." % (entry,attribute_id),
                                  line_num=line_num)

        if save_strand == True and entry.strand not in ("+","-"):
            raise AnnotationError(filename,
                                  "Feature %s does not have strand information, but counting is stranded." % entry,
                                  line_num=line_num)

        ids = _split_values(value) if split_attribute_values == True else [value]
        interval = entry.to_interval(save_strand)
        for feature_id in ids:
            genomic_array.add_entry(interval,feature_id)
            counts[feature_id] = 0

    return counts
