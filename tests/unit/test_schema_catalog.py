"""Unit tests for the schema catalog."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from rowdb.adapters.outbound import AtomicJsonWriter, JsonCatalogStore
from rowdb.domain.entities import ColumnSpec
from rowdb.domain.errors import (
    CorruptCatalogError,
    DuplicateColumnError,
    EmptyColumnListError,
    InvalidNameError,
    StorageIOError,
    TableExistsError,
    UnknownTypeError,
)
from rowdb.domain.services import SchemaCatalog, build_schema
from rowdb.domain.value_objects import ColumnType
from rowdb.ports.outbound import SyncMode


@pytest.fixture
def store(temp_dir: Path) -> JsonCatalogStore:
    return JsonCatalogStore(temp_dir, writer=AtomicJsonWriter(sync_mode=SyncMode.NONE))


@pytest.fixture
def catalog(store: JsonCatalogStore) -> SchemaCatalog:
    c = SchemaCatalog(store)
    c.initialize()
    c.load()
    return c


@pytest.mark.unit
class TestBuildSchema:
    """Tests for CREATE TABLE validation."""

    def test_positions_follow_input_order(self) -> None:
        schema = build_schema(
            "Planets", [ColumnSpec("Name", "STRING"), ColumnSpec("id", "Integer")]
        )

        assert schema.name == "planets"
        assert schema.column_names() == ["name", "id"]
        assert schema.column("id").type is ColumnType.INTEGER

    def test_mapping_specs(self) -> None:
        schema = build_schema("t", [{"name": "a", "type": "integer"}])
        assert schema.column_names() == ["a"]

    def test_invalid_table_name(self) -> None:
        with pytest.raises(InvalidNameError):
            build_schema("no spaces", [ColumnSpec("a", "integer")])

    def test_empty_columns(self) -> None:
        with pytest.raises(EmptyColumnListError):
            build_schema("t", [])

    def test_invalid_column_name(self) -> None:
        with pytest.raises(InvalidNameError):
            build_schema("t", [ColumnSpec("", "integer")])

    def test_duplicate_column_case_insensitive(self) -> None:
        with pytest.raises(DuplicateColumnError):
            build_schema("t", [ColumnSpec("a", "integer"), ColumnSpec("A", "string")])

    def test_unknown_type(self) -> None:
        with pytest.raises(UnknownTypeError):
            build_schema("t", [ColumnSpec("a", "float")])

    def test_name_checked_before_columns(self) -> None:
        """An invalid table name wins over an empty column list."""
        with pytest.raises(InvalidNameError):
            build_schema("", [])


@pytest.mark.unit
class TestSchemaCatalog:
    """Tests for SchemaCatalog."""

    def test_initialize_is_idempotent(self, store: JsonCatalogStore) -> None:
        catalog = SchemaCatalog(store)

        assert catalog.initialize() is True
        assert json.loads(store.path.read_text()) == {}
        assert catalog.initialize() is False

    def test_create_persists_all_tables(
        self, catalog: SchemaCatalog, store: JsonCatalogStore
    ) -> None:
        catalog.create_table("a", [ColumnSpec("x", "integer")])
        catalog.create_table("b", [ColumnSpec("y", "string")])

        document = json.loads(store.path.read_text())

        assert sorted(document) == ["a", "b"]
        assert document["b"]["columns"]["y"] == {"name": "y", "type": "string", "position": 0}

    def test_table_exists_any_casing(self, catalog: SchemaCatalog) -> None:
        catalog.create_table("Planets", [ColumnSpec("x", "integer")])

        with pytest.raises(TableExistsError):
            catalog.create_table("PLANETS", [ColumnSpec("x", "integer")])

    def test_lookup_is_case_insensitive(self, catalog: SchemaCatalog) -> None:
        catalog.create_table("planets", [ColumnSpec("x", "integer")])

        assert "PLANETS" in catalog
        assert catalog.get("Planets").name == "planets"
        assert catalog.get(5) is None  # type: ignore[arg-type]
        assert catalog.table_names() == ["planets"]

    def test_reload(self, catalog: SchemaCatalog, store: JsonCatalogStore) -> None:
        schema = catalog.create_table(
            "planets", [ColumnSpec("id", "integer"), ColumnSpec("n", "string")]
        )

        reloaded = SchemaCatalog(store).load()

        assert reloaded == {"planets": schema}

    @pytest.mark.chaos
    def test_failed_persist_keeps_table_invisible(
        self, catalog: SchemaCatalog, store: JsonCatalogStore
    ) -> None:
        """If the catalog write fails the new table does not appear."""
        with patch.object(store, "write", side_effect=StorageIOError("disk full")):
            with pytest.raises(StorageIOError):
                catalog.create_table("planets", [ColumnSpec("x", "integer")])

        assert "planets" not in catalog
        assert len(catalog) == 0
        assert json.loads(store.path.read_text()) == {}

    @pytest.mark.parametrize(
        "content",
        [
            "{not json",
            "[]",
            '{"t": {"name": "t", "columns": {"a": {"name": "a", "type": "blob", "position": 0}}}}',
            '{"t": {"name": "u", "columns": '
            '{"a": {"name": "a", "type": "integer", "position": 0}}}}',
        ],
    )
    def test_corrupt_catalog(self, store: JsonCatalogStore, content: str) -> None:
        store.path.write_text(content)

        with pytest.raises(CorruptCatalogError):
            SchemaCatalog(store).load()
