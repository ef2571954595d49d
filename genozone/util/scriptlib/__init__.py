#!/usr/bin/env python
"""Library components for writing command-line scripts

Package overview
================

    =================================================    =========================
    **Package module**                                   **Contents**
    -------------------------------------------------    -------------------------
    :py:mod:`~genozone.util.scriptlib.argparsers`         :class:`~argparse.ArgumentParser` factories for alignment, annotation, and genome files
    :py:mod:`~genozone.util.scriptlib.help_formatters`    Utilities to reformat module docstrings for use as command-line help text
    =================================================    =========================
"""
