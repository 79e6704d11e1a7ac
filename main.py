"""Command line launcher: runs the grid combiner from grid_combine.main.

Kept at the repository root so ``python main.py IMAGES...`` works from a
checkout without installing the package.
"""

import sys

try:
    from grid_combine.main import main
except Exception as exc:
    # Provide a clear error if imports fail due to PYTHONPATH issues
    raise RuntimeError("Failed to import grid_combine. Ensure project root is on PYTHONPATH.") from exc


if __name__ == "__main__":
    sys.exit(main())
