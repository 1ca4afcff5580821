"""Command-line interface for tablecalc."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

import uvicorn
from pydantic import ValidationError

from .config import settings

logger = logging.getLogger(__name__)


def configure_logging(level: Optional[str] = None):
    """Apply the configured log level to the root logger."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv: Optional[list[str]] = None):
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="tablecalc - Formula evaluation for document-template tables"
    )
    parser.add_argument("--log-level", help="Override LOG_LEVEL (e.g. DEBUG)")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Eval command
    eval_parser = subparsers.add_parser("eval", help="Evaluate a single cell's text")
    eval_parser.add_argument("text", help="Raw cell text, e.g. '=SUM(A1:A3)'")
    eval_parser.add_argument(
        "--grid", "-g", type=Path, help="JSON file holding the grid (list of rows)"
    )
    eval_parser.add_argument(
        "--json", action="store_true", help="Print the full evaluation result as JSON"
    )

    # Render command
    render_parser = subparsers.add_parser(
        "render", help="Render a table JSON file to display values"
    )
    render_parser.add_argument(
        "table", type=Path, help="JSON file with {'header': ..., 'rows': [[...], ...]}"
    )
    render_parser.add_argument(
        "--json", action="store_true", help="Print rendered rows as JSON"
    )

    # Server command
    server_parser = subparsers.add_parser("serve", help="Start the web server")
    server_parser.add_argument(
        "--host", default=settings.host, help=f"Host to bind to (default: {settings.host})"
    )
    server_parser.add_argument(
        "--port", type=int, default=settings.port, help=f"Port to bind to (default: {settings.port})"
    )
    server_parser.add_argument(
        "--reload", action="store_true", help="Enable auto-reload for development"
    )

    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if args.command == "eval":
        run_eval(args.text, args.grid, args.json)
    elif args.command == "render":
        run_render(args.table, args.json)
    elif args.command == "serve":
        run_server(args.host, args.port, args.reload)
    else:
        parser.print_help()
        sys.exit(1)


def _load_json(path: Path):
    """Read a JSON file, exiting with status 1 when it cannot be read."""
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        print(f"Could not read {path}: {e}", file=sys.stderr)
        sys.exit(1)


def run_eval(text: str, grid_path: Optional[Path] = None, as_json: bool = False):
    """Evaluate one cell and print its display value."""
    from .tables import TableData
    from .formulas import get_engine

    grid: list[list[str]] = []
    if grid_path is not None:
        data = _load_json(grid_path)
        if isinstance(data, dict):
            data = data.get("rows", [])
        try:
            grid = TableData(rows=data).rows
        except ValidationError as e:
            print(f"Invalid grid in {grid_path}: {e}", file=sys.stderr)
            sys.exit(1)

    engine = get_engine()
    if as_json:
        result = engine.evaluate(text, grid)
        print(result.model_dump_json(by_alias=True))
    else:
        print(engine.display_value(text, grid))


def run_render(table_path: Path, as_json: bool = False):
    """Render every cell of a table file."""
    from .tables import TableData

    data = _load_json(table_path)
    if isinstance(data, list):
        data = {"rows": data}
    try:
        table = TableData.model_validate(data)
    except ValidationError as e:
        print(f"Invalid table in {table_path}: {e}", file=sys.stderr)
        sys.exit(1)

    rows, errors = table.render()
    for error in errors:
        logger.warning(f"{error.cell}: {error.error.value} in {error.formula!r}")

    if as_json:
        print(json.dumps({"header": table.header, "rows": rows}))
        return

    if table.header:
        print(table.header)
    for row in rows:
        print("\t".join(row))


def run_server(host: str, port: int, reload: bool):
    """Run the web server."""
    uvicorn.run(
        "tablecalc.api:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
    )


if __name__ == "__main__":
    main()
