"""Pytest config: PYTHONPATH and env for tests."""
import os
import sys
from pathlib import Path

root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(root))
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("SMTP_HOST", "")
os.environ.setdefault("MAIL_SENDER", "")
