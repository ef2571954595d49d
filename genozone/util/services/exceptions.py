#!/usr/bin/env python
"""This module contains custom exception and warning classes, implements
a custom warning filter action, called `"onceperfamily"`, and monkey-patches
warning output to improve legibility.

Contents:

.. contents::
   :local:

The `onceperfamily` action
--------------------------
`onceperfamily` groups warning messages by families regular expressions,
and only prints the first warning instance that matches a given family's
regular expression. In contrast, Python's native `once` action prints any string
literal once, even if it matches the same regex as another warning already given.

To use this action, use :func:`filterwarnings` to create the warnings filter,
and :func:`warn` to issue warnings. :func:`warn_onceperfamily` does both at
once, creating the filter only if it does not already exist.


Exception types
---------------
|InvalidArgumentError|
    Raised when a genomic interval, value, or chromosome name passed to
    a |GenomicArray| is missing or violates its invariants

|UnknownChromosomeError|
    Raised by overlap-resolution functions when a read aligns to a
    chromosome that the annotation does not know about

|MalformedFileError|
    Raised when a file cannot be parsed as expected, and
    execution must halt

|AnnotationError|
    Raised when an annotation file parses, but its records cannot be used
    as requested (e.g. a required attribute is missing)


Warning types
-------------
|ArgumentWarning|
    Warning for command-line arguments that are nonsensical, but recoverable

|FileFormatWarning|
    Warning for slightly malformed but usable files

|DataWarning|
    Warning raised when data has unexpected, but recoverable, attributes
    or values


See also
--------
:mod:`warnings`
    Warnings module
"""
import re
import warnings
import inspect
import linecache
import textwrap
from genozone.util.io.filters import colored

_wrapper = textwrap.TextWrapper(break_long_words=False,width=77)



#===============================================================================
# INDEX: Warning and exception classes
#===============================================================================

class InvalidArgumentError(ValueError):
    """Exception class for missing or invalid arguments to genomic data structures,
    e.g. a `start` coordinate below 1, or a strand outside `('+','-','.')`
    """
    pass


class UnknownChromosomeError(KeyError):
    """Exception class for queries on chromosomes that are absent from an index
    """

    def __init__(self,chromosome):
        """Create an |UnknownChromosomeError|

        Parameters
        ----------
        chromosome : str
            Name of the unknown chromosome
        """
        KeyError.__init__(self,chromosome)
        self.chromosome = chromosome

    def __str__(self):
        return "Unknown chromosome: %s" % self.chromosome


class MalformedFileError(Exception):
    """Exception class for when files cannot be parsed as they should be
    """

    def __init__(self,filename,message,line_num=None):
        """Create a |MalformedFileError|

        Parameters
        ----------
        filename : str
            Name of file causing problem

        message : str
            Message explaining how the file is malformed.

        line_num : int or None, optional
            Number of line causing problems
        """
        Exception.__init__(self,filename,message,line_num)
        self.filename = filename
        self.msg      = message
        self.line_num = line_num

    def __str__(self):
        if self.line_num is None:
            return "Error opening file '%s': %s" % (self.filename, self.msg)
        else:
            return "Error opening file '%s' at line %s: %s" % (self.filename, self.line_num, self.msg)


class AnnotationError(MalformedFileError):
    """Exception class for annotation records that parse correctly, but
    cannot be indexed as requested
    """
    pass


class ArgumentWarning(Warning):
    """Warning for nonsensical but recoverable combinations of command-line arguments,
    or arguments that risk slow program execution"""
    pass


class FileFormatWarning(Warning):
    """Warning for slightly malformed but usable files"""
    pass


class DataWarning(Warning):
    """Warning for unexpected attributes of data.
    Raised when:

      - data has unexpected attributes
      - data has nonsensical, but recoverable values
      - values are out of the domain of a given operation, but execution
        can continue if the value is estimated or the operation skipped
    """



#===============================================================================
# INDEX: genozone's extensions to Python warnings
#===============================================================================

gz_once_registry = {}
"""Registry of `onceperfamily` warnings that have been seen in the current execution context"""

gz_filters       = []
"""genozone's own warnings filters, which allow additional actions compared to Python's"""

def filterwarnings(action,message="",category=Warning,module="",lineno=0,append=0):
    """Insert an entry into the warnings filter. Behaviors are as in :func:`warnings.filterwarnings`,
    except the additional action `'onceperfamily'` can be used to allow one warning per `family`
    of messages, specified by a regex.

    Parameters
    ----------
    action : str
        How the warning should be filtered. Accceptable values are "error",
        "ignore", "always", "default", 'module", "once", and "onceperfamily"

    message : str, optional
        str that can be compiled to a regex, used to detect warnings. If "onceperfamily"
        is chosen, only the first warning to give a string that matches the regex
        will be shown. (Default: `""`, match any message)

    category : Warning or subclass, optional
        Type of warning. (Default: :class:`Warning`)

    module : str, optional
        str that can be compiled to a regex, limiting the warning behavior to modules
        that match that regex. (Default: `""`, match all modules)

    lineno : int, optional
        If 0 (default), match all warnings regardless of line number.

    append : int, optional
        If 1, add warning to end of filter list. If 0 (default), insert warning at
        beginning of filters list.
    """
    tup = (action,re.compile(message,re.I),category,re.compile(module),lineno)
    if action == "onceperfamily":
        if tup in gz_filters:
            return
        else:
            if append == 1:
                gz_filters.append(tup)
            else:
                gz_filters.insert(0,tup)
    else:
        warnings.filterwarnings(action,message=message,
                                category=category,module=module,
                                lineno=lineno,append=append)

def warn_onceperfamily(message,pattern=None,category=None,stacklevel=1):
    """Issue a warning and create a warning filter for that warning if it does not already exist

    Parameters
    ----------
    message : str
        Message of warning. Printed as warning text and used to create
        warning filter if `pattern` is `None`.

    pattern : str or None, optional
        If not `None`, override message when generating warnings filter

    category: :class:`Warning`, or subclass, optional
        Type of warning

    stacklevel : int
        Frame of the caller to which the warning is attributed
    """
    if category is None:
        category = UserWarning

    if pattern is None:
        pattern = re.escape(message)

    filterwarnings("onceperfamily",message=pattern,category=category)
    warn(message,category=category,stacklevel=stacklevel+1)

def warn(message,category=None,stacklevel=1):
    """Issue a non-essential warning to users, allowing `genozone`-specific warnings filters

    Parameters
    ----------
    message : str
        Message

    category: :class:`Warning`, or subclass, optional
        Type of warning

    stacklevel : int
        Frame of the caller to which the warning is attributed
    """
    if category is None:
        category = UserWarning

    _, filename, lineno, _, _, _ = inspect.stack()[stacklevel]
    warn_explicit(message,category,filename,lineno,module=filename)

def warn_explicit(message,category,filename,lineno,module=None,registry=None,module_globals=None):
    """Low-level interface to issue warnings, allowing `genozone`-specific warnings filters

    Parameters
    ----------
    message : str
        Message

    category: :class:`Warning`, or subclass, optional
        Type of warning

    filename : str
        Name of module from which warning is issued

    lineno : int, optional
        Line in module at which warning is called

    module : str, optional
        Module name

    registry : dict, optional
        Registry of ignore filters (see :func:`warnings.warn_explicit`)

    module_globals : dict, optional
        Dictionary of module-level variables
    """
    if module is None:
        frame = inspect.currentframe()
        if frame is None:
            module = __name__
        else:
            try:
                module = inspect.getmodule(frame.f_back.f_code).__name__
            finally:
                del frame

    for _, pat, filter_category, mod, filter_line in gz_filters:
        if pat.match(message) and issubclass(category,filter_category) and\
           (module is None or mod.match(module)) and\
           (filter_line == 0 or filter_line == lineno):

            tup = (pat.pattern,filter_category,mod,filter_line)
            if tup in gz_once_registry:
                return
            else:
                gz_once_registry[tup] = 1
                break

    warnings.warn_explicit(message,category,filename,lineno,
                           module=module,registry=registry,
                           module_globals=module_globals)


def formatwarning(message,category,filename,lineno,file=None,line=None):
    """Wrapper to colorize warnings for readability. Overrides :func:`warnings.formatwarning`

    Parameters
    ----------
    message : str
        Warning message

    category : Warning
        Class (not instance) of warning

    filename : str
        Name of file calling warning

    lineno : int
        Line in file calling warning

    file : something implementing a `write` method
        Ignored

    line : str
        Text of line in file calling warning. If `None`, `line` is taken
        to be line number `lineno` of `filename`

    Returns
    -------
    str
        Pretty-printed warning message
    """
    sep     = colored("-"*75,color="cyan")
    message = str(message)
    if not "\n" in message:
        message = _wrapper.fill(str(message))

    message = colored(message,color="white",attrs=["bold"])
    name    = colored(category.__name__,color="cyan",attrs=["bold"])

    if line is None:
        numwidth = len(str(lineno+3))
        fmtstr   = "{0: >%ss} {1}" % (numwidth)
        lines    = []
        for x in range(max(0,lineno-2),lineno+3):
            tmpline = linecache.getline(filename,x).strip("\n")
            if tmpline:
                attrs = ["bold"] if x == lineno else []
                lines.append(fmtstr.format(colored(x,color="green",attrs=attrs),
                                           colored(tmpline,attrs=attrs)
                                           ))
        line = "\n".join(lines)

    filename = "in %s, line %s:" % (colored(filename,color="cyan"),lineno)

    ltmp = [sep,name,message,filename,"",line,"",sep,""]

    return "\n".join(ltmp)


warnings.formatwarning = formatwarning
