"""Small file helpers shared by the test modules."""

import json
from pathlib import Path


def write_json(path: Path, data) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2))
    return path


def read_json(path: Path):
    return json.loads(path.read_text())
