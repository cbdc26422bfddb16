# src/road_gen/io/config.py
import os
from pathlib import Path

from road_gen.config.models import ScenarioModel


def load_scenario(path: str | os.PathLike) -> ScenarioModel:
    """Read and validate a JSON scenario file. Raises pydantic.ValidationError on bad content."""
    p = Path(os.path.expandvars(os.path.expanduser(str(path))))
    return ScenarioModel.model_validate_json(p.read_text(encoding="utf-8"))
