# Configuration file for the Sphinx documentation builder.
#
# For the full list of built-in configuration values, see the documentation:
# https://www.sphinx-doc.org/en/master/usage/configuration.html

import importlib.metadata
import os
import sys

# -- Project information -----------------------------------------------------

project = "fylki"
copyright = "2026, fylki developers"
author = "fylki developers"

try:
    release = importlib.metadata.version(project)
except importlib.metadata.PackageNotFoundError:
    sys.path.insert(0, os.path.abspath(".."))
    from fylki.version import VERSION

    release = ".".join(str(x) for x in VERSION)

# -- General configuration ---------------------------------------------------

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.doctest",
    "sphinx.ext.intersphinx",
    "sphinx.ext.viewcode",
]

autoclass_content = "both"
autodoc_member_order = "groupwise"

templates_path = []
exclude_patterns = ["_build", "Thumbs.db", ".DS_Store"]

intersphinx_mapping = {
    "numpy": ("https://numpy.org/doc/2.0", None),
    "python": ("https://docs.python.org/3", None),
}

# -- Options for HTML output -------------------------------------------------

html_theme = "furo"
html_static_path = []
