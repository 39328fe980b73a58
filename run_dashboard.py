#!/usr/bin/env python3
"""Direct launcher for the Weekly Expenses dashboard.

This script launches Streamlit on ``weekly_expenses/dashboard.py`` from
the project root so the package imports resolve.
"""

import os
import subprocess
import sys
from pathlib import Path

project_root = Path(__file__).parent.resolve()

if __name__ == "__main__":
    os.chdir(project_root)
    subprocess.run([
        sys.executable, "-m", "streamlit", "run",
        str(project_root / "weekly_expenses" / "dashboard.py"),
        *sys.argv[1:],
    ])
