#!/usr/bin/env python
"""Command-line scripts

    =========================   =============================================================================
    |count_features|             Count the number of :term:`read alignments <alignment>` overlapping
                                 each feature of an annotation, following the rules of `htseq-count`_
    =========================   =============================================================================
"""
