#!/usr/bin/env python
"""
Package overview
================

This package contains parsers for annotation files. Parsers behave as
iterators, and report coordinates as they appear in the file (1-indexed,
end-inclusive).

    ======================================    =======================================
    **Module**                                **Contents**
    --------------------------------------    ---------------------------------------
    :py:mod:`genozone.readers.gff`            `GTF2`_ and `GFF3`_ readers
    :py:mod:`genozone.readers.gff_tokens`     Parsing of column 9 of `GTF2`_ and `GFF3`_ files
    ======================================    =======================================
"""
