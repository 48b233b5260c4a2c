"""Root conftest.py: project root on sys.path and a headless matplotlib backend for all tests."""
import os
import sys
from pathlib import Path

os.environ.setdefault('MPLBACKEND', 'Agg')
sys.path.insert(0, str(Path(__file__).parent))
