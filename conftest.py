# Test discovery helper for pytest when run from repository root.
# Ensure the project root is on sys.path so that 'linq_query' is importable
# and relative imports inside linq_query.tests resolve with a known package.
import os
import sys

ROOT = os.path.dirname(os.path.abspath(__file__))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)
