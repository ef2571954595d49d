#!/usr/bin/env python
"""Setup script for genozone.

Command-line scripts are detected automatically from `genozone/bin`, and
installed as console entry points.
"""
import os
from setuptools import setup, find_packages

genozone_version = "0.1.0"


#===============================================================================
# Package metadata
#===============================================================================

with open("README.rst") as f:
    long_description = f.read()

# trim dependencies if on readthedocs server, where many dependencies are mocked
on_rtd = os.environ.get("READTHEDOCS", None) == "True"

if not on_rtd:
    install_requires = [
        "pysam>=0.15.0",
        "pandas>=0.17.0",
        "biopython>=1.64",
        "termcolor",
    ]
else:
    install_requires = ["pysam", "biopython", "termcolor"]


def get_scripts():
    """Detect command-line scripts automatically

    Returns
    -------
    list
        list of strings describing command-line scripts
    """
    binscripts = [
        X.replace(".py", "") for X in filter(
            lambda x: x.endswith(".py") and  "__init__" not in x,
            os.listdir(os.path.join("genozone",  "bin")),
        )
    ]
    return ["%s = genozone.bin.%s:main" % (X, X) for X in binscripts]


#===============================================================================
# Program body
#===============================================================================

setup(

    name             = "genozone",
    version          = genozone_version,
    long_description =  long_description,
    long_description_content_type = "text/x-rst",

    description      = "Strand-aware genomic feature index and read counting",
    license          = "BSD 3-Clause",
    keywords         = "rna-seq sequencing genomics htseq-count gff gtf",
    platforms        = "OS Independent",

    classifiers      = [
         'Development Status :: 3 - Alpha',
         'Programming Language :: Python :: 3',

         'Topic :: Scientific/Engineering :: Bio-Informatics',
         'Topic :: Software Development :: Libraries',

         'Intended Audience :: Science/Research',
         'Intended Audience :: Developers',

         'License :: OSI Approved :: BSD License',
         'Operating System :: POSIX',
         'Natural Language :: English',
    ],

    zip_safe = False,
    packages = find_packages(),

    entry_points = {
        "console_scripts" : get_scripts()
    },

    python_requires  = ">=3.6",
    install_requires = install_requires,

    extras_require   = {
        "tests" : [ "pytest>=3.0" ],
    },

) # yapf: disable
