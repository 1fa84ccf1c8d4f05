from __future__ import annotations

import json
from pathlib import Path  # noqa: TC003

import pytest

from modelbridge.adapters.bridge_store import SqlAlchemyBridgeStore
from modelbridge.ui import cli

MAPPINGS = json.dumps(
    {"url": "content", "title": {"from": "name", "required": False}, "kind": {"const": "image"}}
)


def _create(bridge_id: str = "b1", *extra: str) -> None:
    cli.main(
        [
            "bridge",
            "create",
            "--id",
            bridge_id,
            "--version",
            "1.0.0",
            "--source",
            "content",
            "--target",
            "asset",
            "--mappings",
            MAPPINGS,
            *extra,
        ]
    )


def _output(capsys: pytest.CaptureFixture[str]) -> object:
    return json.loads(capsys.readouterr().out)


def test_create_persists_bridge(capsys: pytest.CaptureFixture[str], isolated_data_dir: Path) -> None:
    _create("b1", "--transformations", '{"title": "strip"}', "--efficiency", "0.7")

    assert _output(capsys) == {"created": "b1"}
    stored = json.loads((isolated_data_dir / "bridges.json").read_text(encoding="utf-8"))
    assert stored[0]["mappings"] == {
        "url": "content",
        "title": {"from": "name", "required": False},
        "kind": {"const": "image"},
    }
    assert stored[0]["transformations"] == {"title": "strip"}

    cli.main(["bridge", "list"])
    (summary,) = _output(capsys)  # type: ignore[misc]
    assert summary == {
        "id": "b1",
        "version": "1.0.0",
        "source": "content",
        "target": "asset",
        "efficiency": 0.7,
        "confidence": 1.0,
    }

    cli.main(["bridge", "show", "b1"])
    assert _output(capsys)["id"] == "b1"  # type: ignore[index]


def test_validate_reports_structure(capsys: pytest.CaptureFixture[str]) -> None:
    _create()
    capsys.readouterr()

    cli.main(["bridge", "validate", "b1"])

    assert _output(capsys) == {"id": "b1", "valid": True, "problems": []}


def test_bridge_test_runs_sample_data(capsys: pytest.CaptureFixture[str]) -> None:
    _create()
    capsys.readouterr()

    cli.main(["bridge", "test", "b1", "--data", '[{"content": "x", "name": "N"}, {}]'])

    payload = _output(capsys)
    assert payload["data"] == [{"url": "x", "title": "N", "kind": "image"}]  # type: ignore[index]
    assert payload["metadata"]["stats"] == {"processed": 2, "succeeded": 1, "failed": 1}  # type: ignore[index]
    assert len(payload["errors"]) == 1  # type: ignore[index]


def test_translate_reads_file_and_writes_output(
    capsys: pytest.CaptureFixture[str], tmp_path: Path
) -> None:
    _create()
    capsys.readouterr()
    source = tmp_path / "in.json"
    source.write_text('{"content": "https://x/y.png"}', encoding="utf-8")
    target = tmp_path / "out" / "result.json"

    cli.main(["graph", "translate", "content", "asset", "-i", f"@{source}", "-o", str(target)])

    assert json.loads(target.read_text(encoding="utf-8")) == {
        "url": "https://x/y.png",
        "kind": "image",
    }
    assert capsys.readouterr().out == ""


def test_normalize_prints_result(capsys: pytest.CaptureFixture[str]) -> None:
    _create()
    capsys.readouterr()

    cli.main(["graph", "normalize", "content", "asset", "-i", '[{"content": "a"}]'])

    assert _output(capsys) == [{"url": "a", "kind": "image"}]


def test_discover_lists_neighbours(capsys: pytest.CaptureFixture[str]) -> None:
    _create()
    capsys.readouterr()

    cli.main(["graph", "discover", "--model", "content"])
    assert _output(capsys) == ["asset"]

    cli.main(["graph", "discover"])
    assert _output(capsys) == ["asset", "content"]


def test_missing_bridge_exits_with_error() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["graph", "translate", "content", "asset", "-i", "{}"])

    assert excinfo.value.code == 1


def test_total_translation_failure_exits_with_error() -> None:
    _create()

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["bridge", "test", "b1", "--data", "[{}]"])

    assert excinfo.value.code == 1


def test_invalid_json_input_exits_with_usage_error() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["bridge", "test", "b1", "--data", "{not json"])

    assert excinfo.value.code == 2


def test_invalid_bridge_is_not_persisted(isolated_data_dir: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        _create("b1", "--efficiency", "2")

    assert excinfo.value.code == 1
    assert not (isolated_data_dir / "bridges.json").exists()


def test_malformed_mappings_exit_with_error() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(
            [
                "bridge",
                "create",
                "--id",
                "b1",
                "--version",
                "1",
                "--source",
                "a",
                "--target",
                "b",
                "--mappings",
                '{"url": 5}',
            ]
        )

    assert excinfo.value.code == 1


def test_unknown_log_level_exits(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MODELBRIDGE_LOG_LEVEL", "chatty")

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["bridge", "list"])

    assert excinfo.value.code == 2


def test_unknown_command_exits_with_usage_error() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["bridge", "frobnicate"])

    assert excinfo.value.code == 2


def test_database_store_is_disposed_after_each_command(
    capsys: pytest.CaptureFixture[str],
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
    isolated_data_dir: Path,
) -> None:
    monkeypatch.setenv("MODELBRIDGE_STORE_URI", f"sqlite+pysqlite:///{tmp_path / 'bridges.db'}")
    disposed: list[str] = []
    original = SqlAlchemyBridgeStore.dispose

    def tracking_dispose(store: SqlAlchemyBridgeStore) -> None:
        disposed.append(str(store.engine.url))
        original(store)

    monkeypatch.setattr(SqlAlchemyBridgeStore, "dispose", tracking_dispose)

    _create("b1")
    assert _output(capsys) == {"created": "b1"}
    cli.main(["bridge", "list"])

    assert [summary["id"] for summary in _output(capsys)] == ["b1"]  # type: ignore[attr-defined]
    assert len(disposed) == 2
    assert not (isolated_data_dir / "bridges.json").exists()


def test_database_store_is_disposed_when_a_command_fails(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("MODELBRIDGE_STORE_URI", f"sqlite+pysqlite:///{tmp_path / 'bridges.db'}")
    disposed: list[SqlAlchemyBridgeStore] = []
    original = SqlAlchemyBridgeStore.dispose

    def tracking_dispose(store: SqlAlchemyBridgeStore) -> None:
        disposed.append(store)
        original(store)

    monkeypatch.setattr(SqlAlchemyBridgeStore, "dispose", tracking_dispose)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["bridge", "show", "missing"])

    assert excinfo.value.code == 1
    assert len(disposed) == 1
