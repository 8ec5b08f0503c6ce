import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent / "src"))

from simplerag.cli import query_main

if __name__ == "__main__":
    sys.exit(query_main())
