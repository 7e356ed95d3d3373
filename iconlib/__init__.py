"""
Top-level package for the icon library catalog.

This package contains modules for deriving search keywords from icon
filenames, synthesizing aliases, building the persisted icon catalog
from the asset tree, scoring icons against free-text queries, and
serving a small catalog query API.  There are no side-effects on
import and each pipeline step can be run from :mod:`iconlib.cli`.
"""
from __future__ import annotations
