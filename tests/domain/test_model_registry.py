from __future__ import annotations

import pytest

from modelbridge.domain.errors import DuplicateModelError, ModelNotFoundError, SchemaError
from modelbridge.domain.model import (
    Compatibility,
    CompatibilityDirection,
    EntitySchema,
    FieldSpec,
    FieldType,
    GraphSchema,
    Model,
    RelationshipSchema,
)
from modelbridge.domain.registry import ModelRegistry
from tests.support.builders import make_model


def _graph_schema(**overrides: object) -> GraphSchema:
    values: dict[str, object] = {
        "version": "1",
        "entities": {
            "person": EntitySchema(fields={"name": FieldSpec(FieldType.STRING)}),
            "company": EntitySchema(fields={"title": FieldSpec(FieldType.STRING)}),
        },
        "relationships": {
            "works_at": RelationshipSchema(
                source="person",
                target="company",
                fields={"since": FieldSpec(FieldType.STRING, required=False)},
            )
        },
        "constraints": {"unique_name": ("person.name",), "tenure": ("works_at.since",)},
    }
    values.update(overrides)
    return GraphSchema(**values)  # type: ignore[arg-type]


def test_register_and_get_model(model_registry: ModelRegistry) -> None:
    model = Model(name="network", version="1.0", schema=_graph_schema())

    model_registry.register_model(model)

    assert model_registry.get_model("network") is model
    assert model_registry.has_model("network")
    assert [m.name for m in model_registry.models()] == ["network"]


def test_get_unknown_model_raises(model_registry: ModelRegistry) -> None:
    with pytest.raises(ModelNotFoundError) as excinfo:
        model_registry.get_model("missing")

    assert excinfo.value.model_name == "missing"


def test_duplicate_registration_is_rejected_unless_replaced(
    model_registry: ModelRegistry,
) -> None:
    model_registry.register_model(make_model("asset"))
    replacement = make_model("asset")

    with pytest.raises(DuplicateModelError):
        model_registry.register_model(replacement)

    model_registry.register_model(replacement, replace=True)
    assert model_registry.get_model("asset") is replacement


def test_relationship_to_undeclared_entity_is_a_schema_error(
    model_registry: ModelRegistry,
) -> None:
    schema = _graph_schema(
        relationships={"owns": RelationshipSchema(source="person", target="vehicle")}
    )

    with pytest.raises(SchemaError) as excinfo:
        model_registry.register_model(Model(name="broken", version="1", schema=schema))

    assert excinfo.value.model_name == "broken"
    assert any("vehicle" in problem for problem in excinfo.value.problems)
    assert not model_registry.has_model("broken")


@pytest.mark.parametrize(
    ("path", "fragment"),
    [
        ("person.age", "undeclared field"),
        ("robot.name", "unknown entity"),
        ("person", "malformed"),
    ],
)
def test_constraint_problems_are_reported(
    model_registry: ModelRegistry, path: str, fragment: str
) -> None:
    schema = _graph_schema(constraints={"check": (path,)})

    with pytest.raises(SchemaError, match=fragment):
        model_registry.register_model(Model(name="broken", version="1", schema=schema))


def test_list_compatible_models_by_direction(model_registry: ModelRegistry) -> None:
    model_registry.register_model(
        make_model(
            "content",
            compatibility=Compatibility(
                direct_compatible=("media",),
                translatable_from=("legacy",),
                translatable_to=("asset", "content"),
            ),
        )
    )

    assert model_registry.list_compatible_models("content", CompatibilityDirection.TO) == {
        "media",
        "asset",
    }
    assert model_registry.list_compatible_models("content", "from") == {"media", "legacy"}
    assert model_registry.list_compatible_models("content") == {"media", "legacy", "asset"}


def test_list_compatible_models_is_not_transitive(model_registry: ModelRegistry) -> None:
    model_registry.register_model(
        make_model("a", compatibility=Compatibility(translatable_to=("b",)))
    )
    model_registry.register_model(
        make_model("b", compatibility=Compatibility(translatable_to=("c",)))
    )

    assert model_registry.list_compatible_models("a", "to") == {"b"}


def test_validate_entity_uses_configured_validator(model_registry: ModelRegistry) -> None:
    model_registry.register_model(make_model("asset"))

    good = model_registry.validate_entity("asset", "asset", {"url": "https://x/y.png"})
    bad = model_registry.validate_entity("asset", "asset", {"title": "no url"})

    assert good.ok
    assert good.value == {"url": "https://x/y.png"}
    assert not bad.ok
    assert bad.issues[0].path == "url"


def test_validate_entity_without_validator_is_a_schema_error() -> None:
    registry = ModelRegistry()
    registry.register_model(make_model("asset"))

    with pytest.raises(SchemaError, match="no schema validator"):
        registry.validate_entity("asset", "asset", {"url": "x"})

    with pytest.raises(SchemaError, match="unknown entity"):
        registry.validate_entity("asset", "photo", {"url": "x"})
