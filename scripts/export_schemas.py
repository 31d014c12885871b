"""Export JSON schemas for TripParameters and ItineraryResponse."""

import json
from pathlib import Path

from pydantic import BaseModel

from backend.app.models import ItineraryResponse, TripParameters

SCHEMA_MODELS: tuple[type[BaseModel], ...] = (TripParameters, ItineraryResponse)


def main() -> None:
    """Export schemas to docs/schemas/."""
    schemas_dir = Path("docs/schemas")
    schemas_dir.mkdir(parents=True, exist_ok=True)

    for model in SCHEMA_MODELS:
        # camelCase keys, the format clients send and the generator returns
        schema = model.model_json_schema(by_alias=True)
        path = schemas_dir / f"{model.__name__}.schema.json"
        with open(path, "w", encoding="utf-8") as f:
            json.dump(schema, f, indent=2, ensure_ascii=False)
        print(f"Exported {model.__name__} schema to {path}")


if __name__ == "__main__":
    main()
