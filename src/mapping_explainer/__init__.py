"""Explain how standard fields are produced from MLS source data.

Resolves a standard field name to its published transformation rule and
renders that rule as plain language for non-technical readers.
"""

__version__ = "0.1.0"
