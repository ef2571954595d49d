#!/usr/bin/env python
"""Reformat module docstrings for use as command-line help, by removing
`reStructuredText`_ markup and substitutions, and truncating at the first
`numpydoc`_ section that only makes sense in the API documentation.

See also
--------
`reStructuredText <http://docutils.sourceforge.net/rst.html>`_
    Markup language used throughout the docstrings found in this package

`numpydoc <https://numpydoc.readthedocs.io/en/latest/format.html>`_
    Docstring standard followed in this package
"""
import re

pyrst_pattern = re.compile(r"(?P<spacing>^|\s+)(?::(?P<domain>[^:`<>]+))?:(?P<role>[^:`]*):`(?P<argument>[^`<>]+)(?: +<(?P<pointer>[^`]+)>)?`")
"""Matches `reStructuredText`_ markup of python tokens of the form
``:domain:role:`argument``` or ``:role:`argument```, if the token is preceded
by whitespace or begins a line.
"""

subst_pattern = re.compile(r"\|([^|\n]*)\|")
"""Matches `reStructuredText`_ substitution tokens of form ``|substitution|``"""

link_pattern = re.compile(r"`([^`<>]+)( <[^`]+>)?`_")
"""Matches `reStructuredText`_ link references of forms ```Linkname`_``
and ```Link text <url>`_``
"""

literal_pattern = re.compile(r"::$",re.M)
"""Matches the double colon that introduces a literal block"""

_STOP_TOKENS = ("Parameters",
                "Returns",
                "Yields",
                "Raises",
                "Attributes",
                "See also",
                "See Also")

_separator = "\n" + (78*"-") + "\n"


def shorten_help(inp):
    """Strip markup from a `numpydoc`_-formatted docstring, and truncate it
    at its first parameter, return-value or cross-reference section

    Parameters
    ----------
    inp : str
        Module, class, or function docstring

    Returns
    -------
    str
        Cleaned help text
    """
    inp = pyrst_pattern.sub(r"\g<spacing>\g<argument>",inp)
    inp = subst_pattern.sub(r"\g<1>",inp)
    inp = link_pattern.sub(r"\g<1>",inp)
    inp = literal_pattern.sub(":",inp)

    stop = len(inp)
    for token in _STOP_TOKENS:
        match = re.search(r"^\s*%s\s*\n\s*-+\s*$" % token,inp,re.M)
        if match is not None:
            stop = min(stop,match.start())

    return inp[:stop].strip() + "\n"

def format_module_docstring(inp):
    """Format a module docstring as command-line help, surrounded by separators

    Parameters
    ----------
    inp : str
        Module docstring to format

    Returns
    -------
    str
        Formatted docstring
    """
    return _separator + "\n" + shorten_help(inp) + "\n" + _separator
