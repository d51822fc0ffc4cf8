"""
bundle-pipeline

Converts npm-style front-end projects into deployable module bundles by
running configured rule loaders over package files and writing the results
into a parallel destination tree.
"""

__version__ = "1.0.0"
