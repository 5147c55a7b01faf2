# main.py
import sys

from road_spelling.app.build import build
from road_spelling.io.config import load_config


def run(config_path: str) -> int:
    app = build(load_config(config_path))
    try:
        summary = app.runner.run()
    finally:
        app.recorder.close()
    return 1 if summary.errors else 0


if __name__ == "__main__":
    if len(sys.argv) != 2:
        sys.exit("usage: python main.py CONFIG.json")
    sys.exit(run(sys.argv[1]))
