"""Convert tabular database snapshots into RDF quads.

Two modelling schemes are available: Facade-X (one graph per table, blank
node rows linked from a root container) and CSV (one context per table with
IRI-identified rows).
"""

from __future__ import annotations

from .coercion import ColumnType, coerce_value
from .generator import (
    ConfigurationError,
    GeneratorOptions,
    QuadGenerator,
    QuadMode,
)
from .nquads import compute_dataset_stats, format_quad, serialize_nquads
from .reader import Column, DatabaseError, JsonDatabase, MemoryDatabase, Table
from .store import QuadStore, QuadStream, StreamClosedError
from .terms import IRI, BNode, DataFactory, Literal, Quad

__version__ = "0.1.0"

__all__ = [
    "BNode",
    "Column",
    "ColumnType",
    "ConfigurationError",
    "DataFactory",
    "DatabaseError",
    "GeneratorOptions",
    "IRI",
    "JsonDatabase",
    "Literal",
    "MemoryDatabase",
    "Quad",
    "QuadGenerator",
    "QuadMode",
    "QuadStore",
    "QuadStream",
    "StreamClosedError",
    "Table",
    "coerce_value",
    "compute_dataset_stats",
    "format_quad",
    "serialize_nquads",
]
