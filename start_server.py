#!/usr/bin/env python3
"""
Start the upload server
Usage: python start_server.py

Uploads are stored in uploads/ next to this script. To serve from another
working directory instead: uvicorn filedrop.main:create_app --factory
"""

import logging
import sys
from pathlib import Path

import uvicorn

from filedrop import config
from filedrop.main import create_app

UPLOAD_DIR = Path(__file__).resolve().parent / config.UPLOAD_DIR

def main():
    logging.basicConfig(level=logging.INFO)

    app = create_app(upload_dir=UPLOAD_DIR)

    print("Starting upload server...")
    print(f"Server will be available at: http://localhost:{config.PORT}")
    print(f"Uploads are stored in: {UPLOAD_DIR}")
    print("Press Ctrl+C to stop the server")

    try:
        uvicorn.run(app, host=config.HOST, port=config.PORT, log_level="info")
    except KeyboardInterrupt:
        print("\nServer stopped.")
    return 0

if __name__ == "__main__":
    sys.exit(main())
