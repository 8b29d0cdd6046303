#!/usr/bin/env python3
"""
Startup script for the Office Nexus API.
This script checks the environment and starts the FastAPI server.
"""

import os
import sys

from dotenv import load_dotenv


def check_environment():
    """Check if the environment is properly configured."""
    load_dotenv()

    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        print("DATABASE_URL is not set!")
        print("\nPlease configure the database:")
        print("1. Copy env.example to .env")
        print("2. Edit .env and set DATABASE_URL")
        print("3. Run `alembic upgrade head`, then this script again")
        return False

    print("Environment is properly configured")
    return True


def main():
    """Main function to start the API server."""
    print("Starting Office Nexus API Server")
    print("=" * 40)

    if not check_environment():
        sys.exit(1)

    try:
        import uvicorn

        from app import app

        host = os.getenv("HOST", "0.0.0.0")
        port = int(os.getenv("PORT", "8000"))
        print(f"Starting server at http://{host}:{port}")
        print(f"API documentation: http://localhost:{port}/docs")
        print("Press Ctrl+C to stop the server")
        print("=" * 40)

        uvicorn.run(app, host=host, port=port)

    except ImportError as e:
        print(f"Failed to import dependencies: {e}")
        print("\nPlease install dependencies:")
        print("pip install -e .")
        sys.exit(1)
    except Exception as e:
        print(f"Failed to start server: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
