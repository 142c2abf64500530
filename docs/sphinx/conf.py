# Copyright 2026 catsdecl Contributors
# SPDX-License-Identifier: Apache-2.0

"""Sphinx configuration for the catsdecl documentation."""

project = "catsdecl"
author = "catsdecl Contributors"
copyright = "2026, catsdecl Contributors"
release = "0.1.0"

extensions: list[str] = ["sphinx.ext.autodoc", "sphinx.ext.napoleon"]
autodoc_typehints = "description"

html_theme = "alabaster"
