# src/road_spelling/io/config.py
import json

from road_spelling.config.models import RunConfigModel


def load_config(path: str) -> RunConfigModel:
    with open(path, encoding="utf-8") as f:
        return RunConfigModel.model_validate(json.load(f))
