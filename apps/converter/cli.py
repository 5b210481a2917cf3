from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from apps.converter.client import LayoutApiClient
from packages.contracts.logging_utils import configure_logging
from packages.contracts.models import ConversionOptions, ConvertRequest, ConvertResponse, LayerNode
from packages.contracts.schema_export import export_schemas
from packages.contracts.utils import new_trace_id
from packages.grid import build_area_map, parse_area_spec, resolve_track_list
from packages.layers import convert_layer_tree

logger = logging.getLogger("converter.cli")

DEFAULT_API_URL = "http://localhost:8002"


def _load_layer(path: Path) -> LayerNode:
    if not path.exists():
        raise SystemExit(f"Input file {path} not found.")
    return LayerNode.model_validate(json.loads(path.read_text(encoding="utf-8")))


def _cmd_convert(args: argparse.Namespace) -> None:
    root = _load_layer(Path(args.input))
    options = ConversionOptions(
        row_tolerance_px=args.row_tolerance,
        max_tracks=args.max_tracks,
        convert_flex=not args.no_flex,
    )
    if args.remote:
        client = LayoutApiClient(args.api_url)
        response = client.convert(ConvertRequest(root=root, options=options))
    else:
        trace_id = new_trace_id()
        result = convert_layer_tree(root, options, trace_id=trace_id)
        response = ConvertResponse(root=result.root, diagnostics=result.diagnostics, trace_id=trace_id)

    for diag in response.diagnostics:
        if diag.status == "failed":
            logger.warning("grid %s kept its original children: %s", diag.node_id, diag.message)

    payload = response.root.model_dump(mode="json")
    if args.output:
        out = Path(args.output)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        print(json.dumps([d.model_dump(mode="json") for d in response.diagnostics]))
    else:
        print(json.dumps(payload, indent=2))


def _cmd_tracks(args: argparse.Namespace) -> None:
    print(json.dumps(resolve_track_list(args.spec, args.total, args.gap)))


def _cmd_areas(args: argparse.Namespace) -> None:
    grid = parse_area_spec(args.spec)
    area_map = build_area_map(grid) or {}
    print(
        json.dumps(
            {
                "areas": grid,
                "area_map": {
                    name: [box.row_start, box.row_end, box.col_start, box.col_end]
                    for name, box in area_map.items()
                },
            }
        )
    )


def _cmd_schemas(args: argparse.Namespace) -> None:
    for path in export_schemas(Path(args.output_dir)):
        print(path)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Layer tree grid-to-stack converter")
    parser.add_argument("--api-url", default=os.getenv("LAYOUT_API_URL", DEFAULT_API_URL))
    parser.add_argument("--verbose", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    convert = sub.add_parser("convert")
    convert.add_argument("--input", required=True)
    convert.add_argument("--output")
    convert.add_argument("--remote", action="store_true")
    convert.add_argument("--row-tolerance", type=float, default=6.0)
    convert.add_argument("--max-tracks", type=int, default=500)
    convert.add_argument("--no-flex", action="store_true")
    convert.set_defaults(func=_cmd_convert)

    tracks = sub.add_parser("tracks")
    tracks.add_argument("--spec", required=True)
    tracks.add_argument("--total", type=float, required=True)
    tracks.add_argument("--gap", type=float, default=0.0)
    tracks.set_defaults(func=_cmd_tracks)

    areas = sub.add_parser("areas")
    areas.add_argument("--spec", required=True)
    areas.set_defaults(func=_cmd_areas)

    schemas = sub.add_parser("schemas")
    schemas.add_argument("--output-dir", default="schemas")
    schemas.set_defaults(func=_cmd_schemas)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    # stdout carries the JSON result
    configure_logging(verbose=args.verbose, stream=sys.stderr)
    args.func(args)


if __name__ == "__main__":
    main()
