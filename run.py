#!/usr/bin/env python3
"""
Run the site edge or the cache dashboard.

Usage:
    python run.py             # Site edge (uvicorn on :8000)
    python run.py dashboard   # Streamlit cache dashboard
"""

import subprocess
import sys
from pathlib import Path

if len(sys.argv) > 1 and sys.argv[1] == "dashboard":
    app = Path(__file__).parent / "web" / "streamlit" / "app.py"
    subprocess.run([sys.executable, "-m", "streamlit", "run", str(app)])
else:
    subprocess.run([sys.executable, "-m", "uvicorn", "web.server:app", "--port", "8000"])
