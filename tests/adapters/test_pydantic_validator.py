from __future__ import annotations

import gc

from modelbridge.adapters.pydantic_validator import PydanticSchemaValidator
from modelbridge.domain.model import EntitySchema, FieldSpec, FieldType

SCHEMA = EntitySchema(
    fields={
        "name": FieldSpec(FieldType.STRING),
        "age": FieldSpec(FieldType.INTEGER, required=False),
        "score": FieldSpec(FieldType.NUMBER, required=False),
        "active": FieldSpec(FieldType.BOOLEAN, required=False),
        "tags": FieldSpec(FieldType.ARRAY, required=False),
        "extra": FieldSpec(FieldType.OBJECT, required=False),
        "anything": FieldSpec(FieldType.ANY, required=False),
    }
)


def test_valid_record_keeps_only_declared_fields() -> None:
    outcome = PydanticSchemaValidator().validate(
        SCHEMA,
        {"name": "Ada", "age": 36, "tags": ["x"], "anything": None, "undeclared": 1},
    )

    assert outcome.ok
    assert outcome.value == {"name": "Ada", "age": 36, "tags": ["x"], "anything": None}


def test_types_are_checked_strictly() -> None:
    outcome = PydanticSchemaValidator().validate(
        SCHEMA, {"name": "Ada", "age": "36", "active": "yes"}
    )

    assert not outcome.ok
    assert outcome.value is None
    assert {issue.path for issue in outcome.issues} == {"age", "active"}


def test_missing_required_field_is_reported() -> None:
    outcome = PydanticSchemaValidator().validate(SCHEMA, {"age": 3})

    assert [issue.path for issue in outcome.issues] == ["name"]
    assert str(outcome.issues[0]).startswith("name: ")


def test_non_object_record_is_invalid() -> None:
    outcome = PydanticSchemaValidator().validate(SCHEMA, ["Ada"])

    assert not outcome.ok


def test_compiled_model_is_reused() -> None:
    validator = PydanticSchemaValidator()

    validator.validate(SCHEMA, {"name": "a"})
    first = validator._compiled[id(SCHEMA)]  # noqa: SLF001
    validator.validate(SCHEMA, {"name": "b"})

    assert validator._compiled[id(SCHEMA)] is first  # noqa: SLF001


def test_compiled_model_is_dropped_with_its_schema() -> None:
    validator = PydanticSchemaValidator()
    for index in range(5):
        schema = EntitySchema(fields={f"field_{index}": FieldSpec(FieldType.STRING)})
        assert validator.validate(schema, {f"field_{index}": "x"}).ok
        del schema
        gc.collect()

    assert validator._compiled == {}  # noqa: SLF001
    assert validator.validate(SCHEMA, {"name": "a"}).ok
    assert list(validator._compiled) == [id(SCHEMA)]  # noqa: SLF001
