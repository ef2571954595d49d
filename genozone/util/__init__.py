#!/usr/bin/env python
"""Miscellaneous, general utilities useful for scripting

Package overview
================

    ===================================   ======================================================================
    **Subpackages**                       **Contents**
    -----------------------------------   ----------------------------------------------------------------------
    :py:obj:`~genozone.util.io`            Wrappers for file I/O operations
    :py:obj:`~genozone.util.scriptlib`     Tools for writing command-line scripts that use :data:`genozone`
    :py:obj:`~genozone.util.services`      Exceptions and warnings
    ===================================   ======================================================================
"""
