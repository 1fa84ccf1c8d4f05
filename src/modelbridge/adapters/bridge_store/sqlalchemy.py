"""Bridge store backed by a SQLAlchemy engine."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError
from sqlalchemy import JSON, Column, Integer, MetaData, String, Table, create_engine, delete, select
from sqlalchemy.exc import SQLAlchemyError

from .errors import BridgeStoreError
from .schema import BridgeRecord
from .translator import bridge_to_record, translate_record

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlalchemy.engine import Engine

    from modelbridge.domain.model import Bridge

log = logging.getLogger(__name__)

metadata = MetaData()

bridge_table = Table(
    "bridges",
    metadata,
    Column("position", Integer, primary_key=True, autoincrement=False),
    Column("id", String(255), nullable=False, unique=True),
    Column("payload", JSON, nullable=False),
)


class SqlAlchemyBridgeStore:
    """Keeps each bridge record as a JSON payload, ordered by ``position``."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        try:
            metadata.create_all(engine, checkfirst=True)
        except SQLAlchemyError as exc:
            raise BridgeStoreError(f"Cannot initialise bridge table: {exc}") from exc

    @classmethod
    def from_uri(cls, uri: str) -> SqlAlchemyBridgeStore:
        return cls(create_engine(uri, future=True))

    def load(self) -> list[Bridge]:
        stmt = select(bridge_table.c.payload).order_by(bridge_table.c.position)
        try:
            with self.engine.connect() as connection:
                payloads = connection.execute(stmt).scalars().all()
        except SQLAlchemyError as exc:
            raise BridgeStoreError(f"Cannot read bridges: {exc}") from exc
        try:
            return [translate_record(BridgeRecord.model_validate(p)) for p in payloads]
        except ValidationError as exc:
            raise BridgeStoreError(f"Malformed bridge row: {exc}") from exc

    def save(self, bridges: Iterable[Bridge]) -> None:
        rows = [
            {"position": position, "id": bridge.id, "payload": bridge_to_record(bridge)}
            for position, bridge in enumerate(bridges)
        ]
        try:
            with self.engine.begin() as connection:
                connection.execute(delete(bridge_table))
                if rows:
                    connection.execute(bridge_table.insert(), rows)
        except (SQLAlchemyError, TypeError) as exc:
            raise BridgeStoreError(f"Cannot write bridges: {exc}") from exc
        log.debug("Saved %s bridge(s) to %s", len(rows), self.engine.url)

    def dispose(self) -> None:
        self.engine.dispose()
