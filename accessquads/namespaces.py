"""Fixed IRI namespaces used by the quad emitters."""

from __future__ import annotations

RDF_NS = "http://www.w3.org/1999/02/22-rdf-syntax-ns#"
XSD_NS = "http://www.w3.org/2001/XMLSchema#"
FX_NS = "http://sparql.xyz/facade-x/ns/"
XYZ_NS = "http://sparql.xyz/facade-x/data/"
CSV_NS = "csv:"

RDF_TYPE_IRI = f"{RDF_NS}type"
FX_ROOT_IRI = f"{FX_NS}root"

XSD_STRING_IRI = f"{XSD_NS}string"
XSD_BOOLEAN_IRI = f"{XSD_NS}boolean"
XSD_BYTE_IRI = f"{XSD_NS}byte"
XSD_INT_IRI = f"{XSD_NS}int"
XSD_LONG_IRI = f"{XSD_NS}long"
XSD_INTEGER_IRI = f"{XSD_NS}integer"
XSD_FLOAT_IRI = f"{XSD_NS}float"
XSD_DOUBLE_IRI = f"{XSD_NS}double"
XSD_DATETIME_IRI = f"{XSD_NS}dateTime"
XSD_BASE64_IRI = f"{XSD_NS}base64Binary"
# Not an XSD datatype: marks values of the extended numeric ("complex") type.
XSD_NUMBER_IRI = f"{XSD_NS}number"


def rdf_member_iri(index: int) -> str:
    """Return the ``rdf:_n`` container membership property for ``index``."""
    if index < 1:
        raise ValueError(f"container membership index must be >= 1, got {index}")
    return f"{RDF_NS}_{index}"
