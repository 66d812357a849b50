import sys
from pathlib import Path

# make `import account_tokens` work from a plain checkout, without installing
SRC_DIR = Path(__file__).resolve().parent / "src"
if SRC_DIR.is_dir() and str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))
