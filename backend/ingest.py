import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent / "src"))

from simplerag.cli import index_main

if __name__ == "__main__":
    sys.exit(index_main())
