# Configuration file for the Sphinx documentation builder.
#
# For the full list of built-in configuration values, see the documentation:
# https://www.sphinx-doc.org/en/master/usage/configuration.html

from datetime import datetime

from vector_path_editor import __version__ as version

# -- Project information -----------------------------------------------------

project = "vector-path-editor"
author = "vector-path-editor developers"
copyright = f"{datetime.now().year}, {author}"
release = version

# -- General configuration ---------------------------------------------------
extensions = [
    "autoapi.extension",
    "sphinx.ext.autodoc",
    "sphinx.ext.intersphinx",
    "sphinx.ext.mathjax",  # Arc and bounds formulas
    "sphinx.ext.viewcode",
]

templates_path = ["_templates"]
exclude_patterns = []

autodoc_member_order = "bysource"
autodoc_typehints = "description"

autoapi_dirs = ["../../src"]
autoapi_options = ["members", "undoc-members", "show-inheritance", "imported-members"]
autoapi_add_toctree_entry = True

intersphinx_mapping = {
    "python": ("https://docs.python.org/3", None),
    "numpy": ("https://numpy.org/doc/stable", None),
}

python_use_unqualified_type_names = True

# -- Options for HTML output -------------------------------------------------

html_theme = "furo"
html_title = f"{project} {version}"
