"""Core of a data-access code generator: query templates, clauses, model metadata and a token pool."""

__version__ = "0.1.0"