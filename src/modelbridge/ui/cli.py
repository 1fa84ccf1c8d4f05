# ruff: noqa: T201

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING, Any

from dotenv import load_dotenv

from modelbridge.adapters.bridge_store import SqlAlchemyBridgeStore, bridge_to_record
from modelbridge.app import (
    build_bridge,
    build_bridge_store,
    create_bridge,
    open_bridge_registry,
    require_bridge,
    run_bridge,
    summarize_bridges,
    translate,
)
from modelbridge.config import ConfigurationError, configure_logging
from modelbridge.domain.errors import ModelBridgeError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from modelbridge.domain.etl import ETLResult
    from modelbridge.domain.ports import BridgeStore

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Translate data between named models")
    subparsers = parser.add_subparsers(dest="command", required=True)

    bridge = subparsers.add_parser("bridge", help="Manage translation bridges")
    bridge_sub = bridge.add_subparsers(dest="bridge_command", required=True)
    bridge_sub.add_parser("list", help="List registered bridges")

    show = bridge_sub.add_parser("show", help="Show a full bridge record")
    show.add_argument("bridge_id")

    create = bridge_sub.add_parser("create", help="Register and persist a bridge")
    create.add_argument("--id", dest="bridge_id", required=True, help="Bridge identifier")
    create.add_argument("--version", required=True, help="Bridge version")
    create.add_argument("--source", required=True, help="Source model name")
    create.add_argument("--target", required=True, help="Target model name")
    create.add_argument(
        "--mappings",
        required=True,
        help="JSON object of target path -> rule (or @file)",
    )
    create.add_argument(
        "--transformations",
        default="{}",
        help="JSON object of target field -> transform id (or @file)",
    )
    create.add_argument("--efficiency", type=float, default=1.0)
    create.add_argument("--confidence", type=float, default=1.0)

    validate = bridge_sub.add_parser("validate", help="Check a bridge's structure")
    validate.add_argument("bridge_id")

    test = bridge_sub.add_parser("test", help="Run a bridge against sample data")
    test.add_argument("bridge_id")
    test.add_argument("--data", required=True, help="Sample JSON payload (or @file)")

    graph = subparsers.add_parser("graph", help="Graph translation operations")
    graph_sub = graph.add_subparsers(dest="graph_command", required=True)

    translate_cmd = graph_sub.add_parser("translate", help="Translate between models")
    translate_cmd.add_argument("source")
    translate_cmd.add_argument("target")
    translate_cmd.add_argument("-i", "--input", required=True, help="Input JSON (or @file)")
    translate_cmd.add_argument("-o", "--output", type=Path, help="Write the result here")

    normalize = graph_sub.add_parser("normalize", help="Normalize to a standard model")
    normalize.add_argument("source")
    normalize.add_argument("model")
    normalize.add_argument("-i", "--input", required=True, help="Input JSON (or @file)")
    normalize.add_argument("-o", "--output", type=Path, help="Write the result here")

    discover = graph_sub.add_parser("discover", help="Find models linked by bridges")
    discover.add_argument("-m", "--model", help="Only models bridged to this one")

    return parser.parse_args(list(argv))


def _load_json(value: str, *, option: str) -> Any:
    text = value
    if value.startswith("@"):
        try:
            text = Path(value[1:]).read_text(encoding="utf-8")
        except OSError as exc:
            raise ValueError(f"Cannot read {option} file {value[1:]}: {exc}") from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON for {option}: {exc}") from exc


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, BaseException):
        return str(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _emit(payload: Any) -> None:
    print(json.dumps(payload, indent=2, default=_json_default))


def _result_payload(result: ETLResult[Any]) -> dict[str, Any]:
    return {
        "data": result.data,
        "metadata": result.metadata,
        "errors": [str(error) for error in result.errors],
    }


def _write_or_emit(data: Any, output: Path | None, *, label: str) -> None:
    if output is None:
        _emit(data)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(data, indent=2, default=_json_default) + "\n", encoding="utf-8")
    log.info("%s saved to %s", label, output)


def _run_bridge_command(args: argparse.Namespace, store: BridgeStore) -> None:
    registry = open_bridge_registry(store)
    match args.bridge_command:
        case "list":
            _emit(summarize_bridges(registry))
        case "show":
            _emit(bridge_to_record(require_bridge(registry, args.bridge_id)))
        case "create":
            bridge = build_bridge(
                bridge_id=args.bridge_id,
                version=args.version,
                source=args.source,
                target=args.target,
                mappings=_load_json(args.mappings, option="--mappings"),
                transformations=_load_json(args.transformations, option="--transformations"),
                efficiency=args.efficiency,
                confidence=args.confidence,
            )
            create_bridge(registry, store, bridge)
            _emit({"created": bridge.id})
        case "validate":
            bridge = require_bridge(registry, args.bridge_id)
            problems = registry.problems(bridge)
            _emit({"id": bridge.id, "valid": not problems, "problems": problems})
        case "test":
            data = _load_json(args.data, option="--data")
            bridge = require_bridge(registry, args.bridge_id)
            _emit(_result_payload(run_bridge(registry, bridge, data)))
        case _:
            raise ValueError(f"Unsupported bridge command: {args.bridge_command}")


def _run_graph_command(args: argparse.Namespace, store: BridgeStore) -> None:
    registry = open_bridge_registry(store)
    match args.graph_command:
        case "translate" | "normalize":
            target = args.target if args.graph_command == "translate" else args.model
            data = _load_json(args.input, option="--input")
            result = translate(registry, args.source, target, data)
            label = "Translation" if args.graph_command == "translate" else "Normalized data"
            _write_or_emit(result.data, args.output, label=label)
        case "discover":
            models = sorted(registry.discover(args.model))
            if not models:
                log.info("No compatible models found")
            _emit(models)
        case _:
            raise ValueError(f"Unsupported graph command: {args.graph_command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        configure_logging()
    except ConfigurationError:
        configure_logging(level=logging.INFO)
        log.exception("Invalid logging configuration")
        sys.exit(2)

    parsed_args = _parse_args(args_list)
    store: BridgeStore | None = None
    try:
        store = build_bridge_store()
        if parsed_args.command == "bridge":
            _run_bridge_command(parsed_args, store)
        else:
            _run_graph_command(parsed_args, store)
    except ValueError as exc:
        log.error("Invalid input: %s", exc)  # noqa: TRY400
        sys.exit(2)
    except ModelBridgeError as exc:
        log.error("%s", exc)  # noqa: TRY400
        sys.exit(1)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)
    finally:
        if isinstance(store, SqlAlchemyBridgeStore):
            store.dispose()


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console-script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
