from __future__ import annotations

import json
from pathlib import Path

from .models import (
    ConvertRequest,
    ConvertResponse,
    GridContainer,
    GridResolution,
    LayerNode,
)


def export_schemas(output_dir: Path) -> list[Path]:
    output_dir.mkdir(parents=True, exist_ok=True)
    schemas = {
        "layer_node.schema.json": LayerNode.model_json_schema(),
        "grid_container.schema.json": GridContainer.model_json_schema(),
        "grid_resolution.schema.json": GridResolution.model_json_schema(),
        "convert_request.schema.json": ConvertRequest.model_json_schema(),
        "convert_response.schema.json": ConvertResponse.model_json_schema(),
    }
    written: list[Path] = []
    for name, schema in schemas.items():
        path = output_dir / name
        path.write_text(json.dumps(schema, indent=2), encoding="utf-8")
        written.append(path)
    return written


if __name__ == "__main__":
    export_schemas(Path(__file__).resolve().parent / "schemas")
