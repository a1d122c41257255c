from pathlib import Path

__version__ = "0.1.0"

BASE_DIR = Path(__file__).resolve().parent.parent
