#!/usr/bin/env python3
"""
Startup script for the RemindMe Backend
This script starts the FastAPI server with proper configuration
"""

import uvicorn

from remindme.config.settings import Settings


def main():
    # Server configuration
    host = Settings.SERVER['host']
    port = Settings.SERVER['port']
    reload = Settings.SERVER['reload']

    print("Starting RemindMe Backend Server...")
    print(f"Host: {host}")
    print(f"Port: {port}")
    print(f"Reload: {reload}")
    print("=" * 50)

    # Start the server
    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=reload,
        log_level=Settings.LOGGING['level'].lower()
    )


if __name__ == "__main__":
    main()
