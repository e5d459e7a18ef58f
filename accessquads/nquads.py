"""N-Quads serialization and dataset statistics."""

from __future__ import annotations

from typing import Iterable, Iterator

from .namespaces import XSD_STRING_IRI
from .terms import IRI, BNode, Literal, Node, Quad


def encode_iri_ref(value: str) -> str:
    """Encode IRI reference."""
    out: list[str] = ["<"]
    for ch in value:
        cp = ord(ch)
        if ch in '<>"{}|^`\\' or cp <= 0x20:
            if cp <= 0xFFFF:
                out.append(f"\\u{cp:04X}")
            else:
                out.append(f"\\U{cp:08X}")
        else:
            out.append(ch)
    out.append(">")
    return "".join(out)


_STRING_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\t": "\\t",
    "\b": "\\b",
    "\n": "\\n",
    "\r": "\\r",
    "\f": "\\f",
}


def escape_string_value(value: str) -> str:
    """Escape a literal's lexical form for a quoted N-Quads string."""
    out: list[str] = []
    for ch in value:
        cp = ord(ch)
        if ch in _STRING_ESCAPES:
            out.append(_STRING_ESCAPES[ch])
        elif cp < 0x20 or cp in (0x7F, 0xFFFE, 0xFFFF):
            out.append(f"\\u{cp:04X}")
        else:
            out.append(ch)
    return "".join(out)


def format_term(node: Node) -> str:
    """Format an RDF term using N-Quads syntax."""
    if isinstance(node, IRI):
        return encode_iri_ref(node.value)
    if isinstance(node, BNode):
        return f"_:{node.label}"
    if isinstance(node, Literal):
        base = f'"{escape_string_value(node.value)}"'
        if node.lang is not None:
            return f"{base}@{node.lang}"
        if node.datatype is not None and node.datatype != XSD_STRING_IRI:
            return f"{base}^^{encode_iri_ref(node.datatype)}"
        return base
    raise TypeError(f"unsupported node type: {type(node)!r}")


def format_quad(quad: Quad) -> str:
    """Format one quad as an N-Quads line without the trailing newline."""
    subject, predicate, obj, graph = quad
    return f"{format_term(subject)} {format_term(predicate)} {format_term(obj)} {format_term(graph)} ."


def serialize_nquads(quads: Iterable[Quad]) -> Iterator[str]:
    """Yield newline-terminated N-Quads lines, one per quad."""
    for quad in quads:
        yield format_quad(quad) + "\n"


def compute_dataset_stats(quads: Iterable[Quad]) -> dict[str, int]:
    """Count quads and unique terms of a quad sequence."""
    subjects: set[Node] = set()
    predicates: set[Node] = set()
    objects: set[Node] = set()
    graphs: set[Node] = set()
    blank_nodes: set[str] = set()
    literals: set[Literal] = set()
    count = 0

    for quad in quads:
        count += 1
        subject, predicate, obj, graph = quad
        subjects.add(subject)
        predicates.add(predicate)
        objects.add(obj)
        graphs.add(graph)
        for node in quad:
            if isinstance(node, BNode):
                blank_nodes.add(node.label)
            elif isinstance(node, Literal):
                literals.add(node)

    return {
        "quads": count,
        "graphs_unique": len(graphs),
        "subjects_unique": len(subjects),
        "predicates_unique": len(predicates),
        "objects_unique": len(objects),
        "blank_nodes_unique": len(blank_nodes),
        "literals_unique": len(literals),
    }
