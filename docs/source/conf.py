# Sphinx configuration for the road traffic simulator API docs.
#
# Build with:  sphinx-build -b html docs/source docs/build

import os
import sys

sys.path.insert(0, os.path.abspath("../.."))  # project root, conf.py lives in docs/source

project = "Road Traffic Simulator"
copyright = "2026, Road Traffic Simulator contributors"
author = "Road Traffic Simulator contributors"
release = "1.0"

# -- General configuration ---------------------------------------------------

extensions = [
    "sphinx.ext.autodoc",    # docstrings of sim/, bus/, server/, ui/
    "sphinx.ext.napoleon",   # NumPy-style sections
    "sphinx.ext.viewcode",
    "sphinx_rtd_dark_mode",
]

templates_path = ["_templates"]
exclude_patterns = []

# -- HTML output -------------------------------------------------------------

html_theme = "sphinx_rtd_theme"
default_dark_mode = True
html_static_path = ["_static"]

# pygame needs a display-capable install; the viewer docs only need signatures.
autodoc_mock_imports = ["pygame"]
