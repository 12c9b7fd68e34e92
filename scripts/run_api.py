#!/usr/bin/env python3
"""
Start the FastAPI server

Usage:
  python scripts/run_api.py [--host 0.0.0.0] [--port 8000] [--no-reload]
"""
import argparse
import sys
from pathlib import Path

# project root on PYTHONPATH
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import uvicorn
from dotenv import load_dotenv

from infrastructure.logging.log_setup import setup_console_logging

if __name__ == "__main__":
    load_dotenv()
    parser = argparse.ArgumentParser(description="Serve the StepWright API")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--no-reload", action="store_true", help="Disable auto-reload")
    args = parser.parse_args()

    setup_console_logging()
    uvicorn.run(
        "api.main:app",
        host=args.host,
        port=args.port,
        reload=not args.no_reload,  # auto-reload during development
    )
