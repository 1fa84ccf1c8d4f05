from __future__ import annotations

from collections.abc import Iterator  # noqa: TC003
from pathlib import Path  # noqa: TC003

import pytest
from sqlalchemy import create_engine, insert

from modelbridge.adapters.bridge_store import BridgeStoreError, SqlAlchemyBridgeStore
from modelbridge.adapters.bridge_store.sqlalchemy import bridge_table
from modelbridge.domain.model import ConstantRule, TransformRule
from tests.support.builders import make_bridge


@pytest.fixture
def store(tmp_path: Path) -> Iterator[SqlAlchemyBridgeStore]:
    engine = create_engine(f"sqlite+pysqlite:///{tmp_path / 'bridges.db'}", future=True)
    sql_store = SqlAlchemyBridgeStore(engine)
    yield sql_store
    sql_store.dispose()


def test_empty_database_loads_nothing(store: SqlAlchemyBridgeStore) -> None:
    assert store.load() == []


def test_round_trip_preserves_order_and_rules(store: SqlAlchemyBridgeStore) -> None:
    bridges = [
        make_bridge("z-last-alphabetically", mappings={"kind": ConstantRule({"a": [1, 2]})}),
        make_bridge("a-first", mappings={"size": TransformRule("bytes", "to_int")}),
    ]

    store.save(bridges)

    assert store.load() == bridges


def test_save_replaces_previous_contents(store: SqlAlchemyBridgeStore) -> None:
    store.save([make_bridge("old")])

    store.save([make_bridge("new")])

    assert [bridge.id for bridge in store.load()] == ["new"]


def test_second_store_on_same_database_sees_saved_bridges(tmp_path: Path) -> None:
    uri = f"sqlite+pysqlite:///{tmp_path / 'shared.db'}"
    writer = SqlAlchemyBridgeStore.from_uri(uri)
    writer.save([make_bridge("b1")])
    writer.dispose()

    reader = SqlAlchemyBridgeStore.from_uri(uri)

    assert [bridge.id for bridge in reader.load()] == ["b1"]
    reader.dispose()


def test_malformed_row_raises(store: SqlAlchemyBridgeStore) -> None:
    with store.engine.begin() as connection:
        connection.execute(
            insert(bridge_table).values(position=0, id="broken", payload={"id": "broken"})
        )

    with pytest.raises(BridgeStoreError, match="Malformed bridge row"):
        store.load()


def test_unserialisable_payload_raises(store: SqlAlchemyBridgeStore) -> None:
    with pytest.raises(BridgeStoreError, match="Cannot write bridges"):
        store.save([make_bridge(mappings={"when": ConstantRule(object())})])
