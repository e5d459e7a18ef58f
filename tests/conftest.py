import pytest

from accessquads import Column, ColumnType, MemoryDatabase, Table


# One table, one boolean column, one row
@pytest.fixture
def flag_db():
    return MemoryDatabase(
        [
            Table(
                name="T1",
                columns=[Column("flag", ColumnType.BOOLEAN)],
                rows=[{"flag": True}],
            )
        ]
    )


# Two tables with mixed types and null cells
@pytest.fixture
def people_db():
    people = Table(
        name="People",
        columns=[
            Column("id", ColumnType.LONG),
            Column("name", ColumnType.TEXT),
            Column("score", ColumnType.DOUBLE),
        ],
        rows=[
            {"id": 1, "name": "Ada", "score": 9.5},
            {"id": 2, "name": None, "score": None},
            {"id": 3, "name": "Grace", "score": 7.25},
        ],
    )
    notes = Table(
        name="Field Notes",
        columns=[Column("text", ColumnType.MEMO), Column("done", ColumnType.BOOLEAN)],
        rows=[
            {"text": "first line\nsecond", "done": False},
            {"text": None, "done": None},
        ],
    )
    return MemoryDatabase([people, notes])
