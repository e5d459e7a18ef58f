"""RDF term values and the factory used by the quad emitters."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class IRI:
    """Named node identified by an absolute IRI."""
    value: str

    @property
    def kind(self) -> str:
        return "NamedNode"


@dataclass(frozen=True)
class BNode:
    """Blank node with a label scoped to one generation run."""
    label: str

    @property
    def kind(self) -> str:
        return "BlankNode"


@dataclass(frozen=True)
class Literal:
    """RDF literal with either a datatype IRI or a language tag."""
    value: str
    lang: str | None = None
    datatype: str | None = None

    def __post_init__(self) -> None:
        """Reject literals carrying both a language tag and a datatype."""
        if self.lang is not None and self.datatype is not None:
            raise ValueError("literal cannot have both a language tag and a datatype")

    @property
    def kind(self) -> str:
        return "Literal"


Node = IRI | BNode | Literal
Subject = IRI | BNode
Quad = tuple[Subject, IRI, Node, IRI]


class DataFactory:
    """Create terms and quads.

    Emitters only build terms through a factory, so a caller may pass a
    subclass that interns terms or wraps them for another RDF library.
    """

    def named_node(self, iri: str) -> IRI:
        """Create a named node."""
        return IRI(iri)

    def blank_node(self, label: str) -> BNode:
        """Create a blank node."""
        return BNode(label)

    def literal(
        self, value: str, datatype_or_language: IRI | str | None = None
    ) -> Literal:
        """Create a literal.

        An ``IRI`` argument is taken as the datatype, a string as the
        language tag, and ``None`` gives a plain literal.
        """
        if isinstance(datatype_or_language, IRI):
            return Literal(value, datatype=datatype_or_language.value)
        if datatype_or_language:
            return Literal(value, lang=datatype_or_language)
        return Literal(value)

    def quad(self, subject: Subject, predicate: IRI, obj: Node, graph: IRI) -> Quad:
        """Create a quad."""
        return (subject, predicate, obj, graph)


DEFAULT_FACTORY = DataFactory()
