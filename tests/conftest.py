import sys
from pathlib import Path

# The engine packages live at the repository root (agents, forecasting, optimization, ...).
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))
