#!/usr/bin/env python
"""This package contains the object types used to index and count genomic features.

Package overview
================

    ================================================  ==================================================================
    **Submodule**                                     **Description**
    ------------------------------------------------  ------------------------------------------------------------------
    :py:mod:`~genozone.genomics.intervals`              Immutable, 1-indexed, end-inclusive genomic intervals

    :py:mod:`~genozone.genomics.genomic_array`          Strand-aware index associating each genomic position
                                                        with the set of features covering it

    :py:mod:`~genozone.genomics.genome_description`     Names and lengths of the sequences in a genome

    :py:mod:`~genozone.genomics.annotation`             Loading of annotation features into the index

    :py:mod:`~genozone.genomics.counting`               Rules for assigning aligned reads to features
    ================================================  ==================================================================
"""
