#!/usr/bin/env python3
"""
Minibank Entry Point

Starts the FastAPI server for the personal-banking ledger.
"""

import sys

from minibank.api import run_server
from minibank.config import get_config


if __name__ == "__main__":
    config = get_config()

    print("Starting Minibank ledger...")
    if config.gateway_url:
        print(f"Account service: {config.gateway_url}")
    else:
        print("Account service: offline, using built-in accounts")
    print(f"API available at: http://localhost:{config.api_port}")
    print(f"Documentation at: http://localhost:{config.api_port}/docs")
    print()

    try:
        run_server(host=config.api_host, port=config.api_port, debug=False)
    except KeyboardInterrupt:
        print("\nShutting down Minibank...")
    except Exception as e:
        print(f"Error starting server: {e}")
        sys.exit(1)
