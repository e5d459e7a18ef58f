"""Generate RDF quads from the tables of a database snapshot."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator
from urllib.parse import quote

from .coercion import coerce_value
from .namespaces import CSV_NS, FX_ROOT_IRI, RDF_TYPE_IRI, XYZ_NS, rdf_member_iri
from .reader import Row, Table, TableReader
from .store import QuadStore, QuadStream
from .terms import DEFAULT_FACTORY, IRI, BNode, DataFactory, Node, Quad

logger = logging.getLogger(__name__)

DEFAULT_BASE_IRI = "http://example.org/data#"

LABEL_CHARS = frozenset("ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789")


class ConfigurationError(ValueError):
    """Raised for invalid generator options."""


class QuadMode(str, Enum):
    FACADE_X = "facade-x"
    CSV = "csv"


@dataclass
class GeneratorOptions:
    """Options controlling how quads are modelled."""
    quad_mode: QuadMode | str = QuadMode.FACADE_X
    base_iri: str = DEFAULT_BASE_IRI
    data_factory: DataFactory = field(default_factory=lambda: DEFAULT_FACTORY)


def encode_name(name: str) -> str:
    """Percent-encode a table or column name for use inside an IRI."""
    return quote(name, safe="")


def encode_label(name: str) -> str:
    """Encode a name into blank node label characters.

    ASCII letters and digits are kept; every other character becomes
    ``_<hex>_``. The result never contains ``-``.
    """
    return "".join(ch if ch in LABEL_CHARS else f"_{ord(ch):x}_" for ch in name)


def table_label(table_name: str) -> str:
    """Return the blank node label of a table root."""
    return f"table-{encode_label(table_name)}"


def row_label(table_name: str, index: int) -> str:
    """Return the blank node label of the row at 1-based ``index``."""
    return f"{table_label(table_name)}-row-{index}"


class QuadGenerator:
    """Quad source over a database snapshot.

    ``quads()`` starts a fresh lazy pass each time it is called. ``store()``
    drains one pass into a ``QuadStore`` on first use and keeps it.
    """

    def __init__(
        self,
        database: TableReader,
        base_iri: str | None = None,
        quad_mode: QuadMode | str = QuadMode.FACADE_X,
        data_factory: DataFactory | None = None,
    ):
        try:
            self.quad_mode = QuadMode(quad_mode)
        except ValueError:
            modes = ", ".join(mode.value for mode in QuadMode)
            raise ConfigurationError(
                f"unsupported quad mode {quad_mode!r} (expected one of: {modes})"
            ) from None
        if base_iri is not None and not base_iri:
            raise ConfigurationError("base IRI must not be empty")
        self.database = database
        self.base_iri = base_iri or DEFAULT_BASE_IRI
        self.factory = data_factory or DEFAULT_FACTORY
        self._store: QuadStore | None = None

    @classmethod
    def from_options(cls, database: TableReader, options: GeneratorOptions) -> QuadGenerator:
        """Create a generator from a ``GeneratorOptions`` record."""
        return cls(
            database,
            base_iri=options.base_iri,
            quad_mode=options.quad_mode,
            data_factory=options.data_factory,
        )

    def quads(self) -> Iterator[Quad]:
        """Start a new lazy pass with the emitter of the configured mode."""
        if self.quad_mode is QuadMode.CSV:
            return self.csv_quads()
        return self.facade_x_quads()

    def __iter__(self) -> Iterator[Quad]:
        return self.quads()

    def stream(self) -> QuadStream:
        """Return a pull-mode stream over a new generation pass."""
        return QuadStream(self.quads())

    def store(self) -> QuadStore:
        """Return the materialized store, draining one pass on first use."""
        if self._store is None:
            self._store = QuadStore.from_quads(self.quads())
            logger.debug("materialized %d quads", len(self._store))
        return self._store

    def match(
        self,
        subject: Node | None = None,
        predicate: Node | None = None,
        obj: Node | None = None,
        graph: Node | None = None,
    ) -> list[Quad]:
        """Look up quads by pattern in the materialized store."""
        return self.store().match(subject, predicate, obj, graph)

    def facade_x_quads(self) -> Iterator[Quad]:
        """Yield quads with one root container per table and blank node rows."""
        df = self.factory
        rdf_type = df.named_node(RDF_TYPE_IRI)
        fx_root = df.named_node(FX_ROOT_IRI)

        for table_name in self.database.table_names():
            table = self.database.get_table(table_name)
            logger.debug("emitting table %r as Facade-X", table_name)

            graph = df.named_node(self.base_iri + encode_name(table_name))
            root = df.blank_node(table_label(table_name))
            yield df.quad(root, rdf_type, fx_root, graph)

            for index, row in enumerate(table.get_rows(), start=1):
                row_node = df.blank_node(row_label(table_name, index))
                yield df.quad(root, df.named_node(rdf_member_iri(index)), row_node, graph)
                yield from self._cell_quads(table, row, row_node, XYZ_NS, graph)

    def csv_quads(self) -> Iterator[Quad]:
        """Yield one quad per non-null cell, with IRI rows and a context per table."""
        df = self.factory

        for table_name in self.database.table_names():
            table = self.database.get_table(table_name)
            logger.debug("emitting table %r as CSV", table_name)

            context_iri = f"{CSV_NS}table/{encode_name(table_name)}"
            context = df.named_node(context_iri)

            for index, row in enumerate(table.get_rows(), start=1):
                subject = df.named_node(f"{context_iri}/row/{index}")
                yield from self._cell_quads(table, row, subject, CSV_NS, context)

    def _cell_quads(
        self,
        table: Table,
        row: Row,
        subject: IRI | BNode,
        namespace: str,
        graph: IRI,
    ) -> Iterator[Quad]:
        """Yield one quad per non-null cell of ``row``."""
        df = self.factory
        for column, value in row.items():
            if value is None:
                continue
            column_type = table.get_column(column).type
            predicate = df.named_node(namespace + encode_name(column))
            yield df.quad(subject, predicate, coerce_value(value, column_type, df), graph)
