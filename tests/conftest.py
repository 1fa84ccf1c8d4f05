from __future__ import annotations

from pathlib import Path

import pytest

from modelbridge.adapters.pydantic_validator import PydanticSchemaValidator
from modelbridge.domain.registry import BridgeRegistry, ModelRegistry


@pytest.fixture
def bridge_registry() -> BridgeRegistry:
    return BridgeRegistry()


@pytest.fixture
def model_registry() -> ModelRegistry:
    return ModelRegistry(validator=PydanticSchemaValidator())


@pytest.fixture(autouse=True)
def isolated_data_dir(
    tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch
) -> Path:
    data_dir = tmp_path_factory.mktemp("modelbridge-data")
    monkeypatch.setenv("MODELBRIDGE_DATA_DIR", str(data_dir))
    monkeypatch.delenv("MODELBRIDGE_STORE_URI", raising=False)
    monkeypatch.delenv("MODELBRIDGE_LOG_LEVEL", raising=False)
    return data_dir
