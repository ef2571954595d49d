#!/usr/bin/env python
"""This module contains functions for unescaping and parsing tokens from
the ninth column of `GTF2`_ and `GFF3`_ files.

Important methods
-----------------
:py:func:`parse_GTF2_tokens`
    Parse `GTF2`_ column 9 tokens into a dictionary of key-value pairs

:py:func:`parse_GFF3_tokens`
    Parse `GFF3`_ column 9 tokens into a dictionary of key-value pairs

See also
--------
  - `The Sequence Ontology GFF3 specification <http://www.sequenceontology.org/gff3.shtml>`_
  - `The Brent lab GTF2.2 specification <http://mblab.wustl.edu/GTF22.html>`_
"""
import itertools
import re
import shlex
from genozone.util.services.exceptions import FileFormatWarning, warn_onceperfamily

# In addition to Parent, the Alias, Note, Dbxref and Ontology_term attributes can have multiple values.
# SGD uses 'dbxref' instead of 'Dbxref'
_GFF3_DEFAULT_LISTS = ("Parent","Alias","Note","Dbxref","Ontology_term","dbxref")


#===============================================================================
# INDEX: helper functions for unescaping
#===============================================================================

# percent signs are escaped first, and therefore unescaped last
_GFF3_escape_sequences = [("%","%25"),
                          (";","%3B"),
                          (",","%2C"),
                          ("=","%3D"),
                          ("&","%26"),
                          ] + [(chr(X),"%%%02X" % X) for X in itertools.chain(range(0,32),range(127,160))]
"""List mapping characters to their escape sequences, per the `GFF3`_ specification"""

_GTF2_escape_sequences = _GFF3_escape_sequences + [("\"","%22")]
"""List mapping characters to their escape sequences for `GTF2`_. These are undefined
by the format, so by convention we use the `GFF3`_ sequences plus double quotation marks.
"""


def unescape(inp,char_pairs):
    """Unescape reserved characters specified in the list of tuples `char_pairs`

    Parameters
    ----------
    inp : str
        Input string

    char_pairs : list
        List of tuples of (character, escape sequence for character)

    Returns
    -------
    str
        Unescaped output
    """
    for char_, seq in reversed(char_pairs):
        inp = inp.replace(seq,char_)

    return inp

def unescape_GFF3(inp):
    """Unescape reserved characters in `GFF3`_ tokens written in percentage notation
    (e.g. `'%3B'` for `';'`)

    Parameters
    ----------
    inp : str
        Input string

    Returns
    -------
    str
        Unescaped output
    """
    return unescape(inp,_GFF3_escape_sequences)

def unescape_GTF2(inp):
    return unescape(inp,_GTF2_escape_sequences)



#===============================================================================
# INDEX: attribute token parsing
#===============================================================================

def parse_GFF3_tokens(inp,list_types=_GFF3_DEFAULT_LISTS):
    """Parse tokens in the final column of a `GFF3`_ file into a dictionary
    of attributes. Attributes named in `list_types` may carry multiple
    comma-separated values in `GFF3`_, and are returned as lists. All other
    values are returned as strings.

    All keys and values are unescaped. Tokens lacking an `'='` are skipped.
    If a key appears more than once, its values are catenated with a comma,
    and a |FileFormatWarning| is issued.

    Examples
    --------
        >>> parse_GFF3_tokens("ID=exon01;Parent=tx01,tx02;Name=my%3Bexon")
        {'ID': 'exon01', 'Parent': ['tx01', 'tx02'], 'Name': 'my;exon'}

    Parameters
    ----------
    inp : str
        Ninth column of `GFF3`_ entry

    list_types : tuple, optional
        Names of attributes that should be returned as lists
        (Default: `Parent`, `Alias`, `Note`, `Dbxref`, `Ontology_term`, `dbxref`)

    Returns
    -------
    dict : key-value pairs
    """
    d = {}
    inp = inp.strip("\n").strip()
    if inp in ("","."):
        return d

    for item in inp.strip(";").split(";"):
        key, sep, val = item.partition("=")
        if sep == "":
            continue

        key = unescape_GFF3(key.strip(" "))
        if key in list_types:
            val = [unescape_GFF3(X) for X in val.strip(" ").split(",")]
        else:
            val = unescape_GFF3(val.strip(" "))

        if key in d:
            warn_onceperfamily("Found duplicate attribute key '%s' in GFF3 line. Catenating value with previous value for key in attr dict:\n    %s" % (key,inp),
                               "Found duplicate attribute key '%s' in GFF3" % re.escape(key),
                               FileFormatWarning)
            if isinstance(val,list):
                val = d[key] + val
            else:
                val = "%s,%s" % (d[key],val)
        d[key] = val

    return d

def parse_GTF2_tokens(inp):
    """Parse tokens in the final column of a `GTF2`_ file into a dictionary
    of attributes. All attributes are returned as strings, with surrounding
    quotation marks removed, and are unescaped if GFF escape sequences
    (e.g. `'%3B'`) are present.

    If duplicate keys are present (e.g. `tag` in GENCODE `GTF2`_ files),
    their values are catenated, separated by a comma.

    Examples
    --------
        >>> parse_GTF2_tokens('gene_id "mygene"; transcript_id "mytranscript";')
        {'gene_id' : 'mygene', 'transcript_id' : 'mytranscript'}

        >>> parse_GTF2_tokens('gene_id "mygene;"; transcript_id "myt;ranscript"')
        {'gene_id' : 'mygene;', 'transcript_id' : 'myt;ranscript'}

        >>> parse_GTF2_tokens('gene_id "g"; tag "basic"; tag "CCDS";')
        {'gene_id' : 'g', 'tag' : 'basic,CCDS'}

    Parameters
    ----------
    inp : str
        Ninth column of `GTF2`_ entry

    Returns
    -------
    dict : key-value pairs

    Raises
    ------
    ValueError
        If keys and values do not pair up, or if pairs are not separated
        by semicolons
    """
    d = {}
    inp = inp.strip("\n").strip()
    if inp in ("","."):
        return d

    items = shlex.split(inp)
    if len(items) % 2 != 0:
        raise ValueError("Unpaired key or value in GTF2 attributes: %s" % inp)

    for i in range(0,len(items),2):
        key = unescape_GTF2(items[i])
        val = items[i+1]
        # all but final token must end in a semicolon
        if i+1 < len(items) - 2 and not val.endswith(";"):
            raise ValueError("Missing semicolon after value '%s' in GTF2 attributes: %s" % (val,inp))

        if val.endswith(";"):
            val = val[:-1]

        val = unescape_GTF2(val)
        if key in d:
            warn_onceperfamily("Found duplicate attribute key '%s' in GTF2 line. Catenating value with previous value for key in attr dict:\n    %s" % (key,inp),
                               "Found duplicate attribute key '%s' in GTF2" % re.escape(key),
                               FileFormatWarning)
            d[key] = "%s,%s" % (d[key],val)
        else:
            d[key] = val

    return d
