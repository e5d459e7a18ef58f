from types import MappingProxyType

import pytest

from accessquads import (
    IRI,
    BNode,
    Column,
    ColumnType,
    ConfigurationError,
    DatabaseError,
    DataFactory,
    GeneratorOptions,
    Literal,
    MemoryDatabase,
    QuadGenerator,
    Table,
)
from accessquads import coercion, generator, store
from accessquads.generator import DEFAULT_BASE_IRI, encode_label, row_label, table_label
from accessquads.namespaces import CSV_NS, FX_ROOT_IRI, RDF_NS, RDF_TYPE_IRI, XSD_NS, XYZ_NS

BASE = "http://ex.org/#"
TRUE = Literal("true", datatype=f"{XSD_NS}boolean")


def membership_quads(quads):
    return [q for q in quads if q[1].value.startswith(f"{RDF_NS}_")]


def root_quads(quads):
    return [q for q in quads if q[1] == IRI(RDF_TYPE_IRI)]


def test_facade_x_single_flag(flag_db):
    """Root type, membership and one cell quad in the table graph"""
    quads = list(QuadGenerator(flag_db, base_iri=BASE, quad_mode="facade-x").quads())
    graph = IRI("http://ex.org/#T1")
    root = BNode(table_label("T1"))
    row = BNode(row_label("T1", 1))

    assert quads == [
        (root, IRI(RDF_TYPE_IRI), IRI(FX_ROOT_IRI), graph),
        (root, IRI(f"{RDF_NS}_1"), row, graph),
        (row, IRI(f"{XYZ_NS}flag"), TRUE, graph),
    ]


def test_csv_single_flag(flag_db):
    """Exactly one quad per non-null cell"""
    quads = list(QuadGenerator(flag_db, base_iri=BASE, quad_mode="csv").quads())
    assert quads == [
        (IRI("csv:table/T1/row/1"), IRI("csv:flag"), TRUE, IRI("csv:table/T1")),
    ]


def test_facade_x_structure_counts(people_db):
    quads = list(QuadGenerator(people_db, base_iri=BASE).quads())
    people = [q for q in quads if q[3] == IRI(BASE + "People")]
    notes = [q for q in quads if q[3] == IRI(BASE + "Field%20Notes")]

    assert len(root_quads(people)) == 1
    assert [q[1].value for q in membership_quads(people)] == [
        f"{RDF_NS}_1",
        f"{RDF_NS}_2",
        f"{RDF_NS}_3",
    ]
    # 3 ids + 2 names + 2 scores
    assert len(people) == 1 + 3 + 7

    assert len(root_quads(notes)) == 1
    assert len(membership_quads(notes)) == 2
    assert len(notes) == 1 + 2 + 2


def test_csv_counts_only_cells(people_db):
    quads = list(QuadGenerator(people_db, quad_mode="csv").quads())
    assert len(quads) == 7 + 2
    assert not root_quads(quads)
    assert not membership_quads(quads)
    assert {q[3] for q in quads} == {
        IRI(f"{CSV_NS}table/People"),
        IRI(f"{CSV_NS}table/Field%20Notes"),
    }
    assert all(isinstance(q[0], IRI) for q in quads)


def test_null_cells_produce_no_quads(people_db):
    for mode in ("facade-x", "csv"):
        quads = list(QuadGenerator(people_db, quad_mode=mode).quads())
        predicates_of_row_2 = [
            q[1].value
            for q in quads
            if q[0] in (BNode(row_label("People", 2)), IRI("csv:table/People/row/2"))
        ]
        assert all(not p.endswith(("/name", "/score", ":name", ":score")) for p in predicates_of_row_2)


def test_all_null_row():
    db = MemoryDatabase(
        [
            Table(
                name="Empty",
                columns=[Column("a", ColumnType.TEXT), Column("b", ColumnType.LONG)],
                rows=[{"a": None, "b": None}],
            )
        ]
    )
    facade = list(QuadGenerator(db, base_iri=BASE).quads())
    assert len(facade) == 2
    assert len(root_quads(facade)) == 1
    assert len(membership_quads(facade)) == 1

    assert list(QuadGenerator(db, quad_mode="csv").quads()) == []


def test_output_is_deterministic(people_db):
    first = list(QuadGenerator(people_db, base_iri=BASE).quads())
    second = list(QuadGenerator(people_db, base_iri=BASE).quads())
    assert first == second


def test_quads_restart_on_each_call(people_db):
    generator = QuadGenerator(people_db)
    iterator = generator.quads()
    next(iterator)
    assert list(generator.quads()) == list(generator)


def test_columns_follow_row_key_order():
    db = MemoryDatabase(
        [
            Table(
                name="T",
                columns=[Column("a", ColumnType.TEXT), Column("b", ColumnType.TEXT)],
                rows=[{"b": "2", "a": "1"}],
            )
        ]
    )
    quads = list(QuadGenerator(db, quad_mode="csv").quads())
    assert [q[1].value for q in quads] == ["csv:b", "csv:a"]


def test_names_are_percent_encoded():
    db = MemoryDatabase(
        [
            Table(
                name="a/b c",
                columns=[Column("x#y", ColumnType.TEXT)],
                rows=[{"x#y": "v"}],
            )
        ]
    )
    facade = list(QuadGenerator(db, base_iri=BASE).quads())
    assert facade[0][3] == IRI(BASE + "a%2Fb%20c")
    assert facade[-1][1] == IRI(XYZ_NS + "x%23y")

    csv = list(QuadGenerator(db, quad_mode="csv").quads())
    assert csv[0][0] == IRI("csv:table/a%2Fb%20c/row/1")
    assert csv[0][1] == IRI("csv:x%23y")


def test_blank_node_labels_do_not_collide():
    """Table and row labels differ for names that would concatenate alike"""
    labels = {
        table_label("T1"),
        row_label("T", 11),
        row_label("T1", 1),
        table_label("T11"),
        table_label("T1-row-1"),
        table_label("T_1"),
        table_label("T 1"),
    }
    assert len(labels) == 7


def test_blank_node_labels_are_nquads_safe():
    assert encode_label("Ab9") == "Ab9"
    assert encode_label("a b_c-é") == "a_20_b_5f_c_2d__e9_"
    assert table_label("") == "table-"


def test_default_base_iri(flag_db):
    quads = list(QuadGenerator(flag_db).quads())
    assert quads[0][3] == IRI(DEFAULT_BASE_IRI + "T1")


def test_unknown_mode_is_rejected(flag_db):
    with pytest.raises(ConfigurationError, match="unsupported quad mode"):
        QuadGenerator(flag_db, quad_mode="xml")


def test_empty_base_iri_is_rejected(flag_db):
    with pytest.raises(ConfigurationError):
        QuadGenerator(flag_db, base_iri="")


def test_from_options(flag_db):
    options = GeneratorOptions(quad_mode="csv", base_iri=BASE)
    generator = QuadGenerator.from_options(flag_db, options)
    assert len(list(generator.quads())) == 1


def test_custom_factory_builds_every_term(flag_db):
    class CountingFactory(DataFactory):
        def __init__(self):
            self.literals = 0
            self.quads = 0

        def literal(self, value, datatype_or_language=None):
            self.literals += 1
            return super().literal(value, datatype_or_language)

        def quad(self, subject, predicate, obj, graph):
            self.quads += 1
            return super().quad(subject, predicate, obj, graph)

    factory = CountingFactory()
    quads = list(QuadGenerator(flag_db, data_factory=factory).quads())
    assert factory.quads == len(quads) == 3
    assert factory.literals == 1


def test_store_is_built_once(people_db):
    generator = QuadGenerator(people_db)
    calls = []
    original = generator.quads

    def counting_quads():
        calls.append(1)
        return original()

    generator.quads = counting_quads
    store = generator.store()
    assert generator.store() is store
    generator.match(predicate=IRI(RDF_TYPE_IRI))
    assert len(calls) == 1
    assert len(store) == len(list(original()))


def test_match_through_generator(flag_db):
    generator = QuadGenerator(flag_db, base_iri=BASE)
    matches = generator.match(obj=TRUE)
    assert len(matches) == 1
    assert matches[0][1] == IRI(f"{XYZ_NS}flag")
    assert len(generator.match(graph=IRI(BASE + "T1"))) == 3
    assert generator.match(graph=IRI(BASE + "T2")) == []


def test_stream_yields_all_quads(people_db):
    generator = QuadGenerator(people_db)
    assert list(generator.stream()) == list(generator.quads())


def test_reader_errors_propagate():
    class BrokenReader:
        def table_names(self):
            return ["missing"]

        def get_table(self, name):
            return MemoryDatabase([]).get_table(name)

    with pytest.raises(DatabaseError):
        list(QuadGenerator(BrokenReader()).quads())


def test_rows_may_be_read_only_mappings():
    """Any mapping works as a row, not only dict"""
    db = MemoryDatabase(
        [
            Table(
                name="T1",
                columns=[Column("flag", ColumnType.BOOLEAN)],
                rows=[MappingProxyType({"flag": True})],
            )
        ]
    )
    assert list(QuadGenerator(db, quad_mode="csv").quads()) == [
        (IRI("csv:table/T1/row/1"), IRI("csv:flag"), TRUE, IRI("csv:table/T1")),
    ]


def test_public_helpers_are_documented():
    helpers = [
        coercion.boolean_lexical,
        coercion.base64_lexical,
        coercion.datetime_lexical,
        generator.table_label,
        generator.row_label,
        QuadGenerator.from_options,
        store.QuadStream.on_end,
        store.QuadStream.resume,
    ]
    assert all(helper.__doc__ for helper in helpers)
