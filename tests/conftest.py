import sys
from pathlib import Path

# Get the project root directory (one level above tests/)
ROOT_DIR = Path(__file__).resolve().parents[1]

# Put the root on sys.path so "src", "fastapi_app", "analyze_invoice"
# and "functions" import the same way the Functions host sees them
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))
