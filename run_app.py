#!/usr/bin/env python3
"""
Regalia Catalogue Runner
========================

Run the catalogue API in development or production mode.

Usage:
    python run_app.py                    # Development mode with auto-reload
    python run_app.py --mode prod        # Production mode, several workers
    python run_app.py --port 8001        # Custom port
    python run_app.py --host 127.0.0.1   # Custom host
    python run_app.py --init-db          # Create tables before starting
    python run_app.py --resync-loge-types  # Backfill denormalized loge types
"""

import argparse
import asyncio
import os
import sys

def check_environment():
    """Report on the local environment"""
    print("\nChecking environment...")

    if os.path.exists(".env"):
        print(".env file found")
    else:
        print(".env file not found, using defaults")

    return True

def init_database():
    """Create the catalogue tables"""
    from regalia.core.database import init_db, close_db

    async def run():
        await init_db()
        await close_db()

    asyncio.run(run())
    print("Database tables ready")

def resync_loge_types():
    """Backfill the denormalized loge types of every product"""
    from regalia.core.database import close_db, session_scope
    from regalia.services.product_sync import resync_all_products

    async def run():
        async with session_scope() as db:
            count = await resync_all_products(db)
        await close_db()
        return count

    print(f"Loge types resynced for {asyncio.run(run())} products")

def run_app(host="0.0.0.0", port=8000, reload=True, workers=1):
    """Run the FastAPI application"""
    print(f"\nStarting Regalia catalogue on {host}:{port}")
    print(f"API Docs: http://{host}:{port}/api/docs")
    print("\n" + "=" * 50)

    import uvicorn
    uvicorn.run(
        "regalia.main:app",
        host=host,
        port=port,
        reload=reload,
        workers=None if reload else workers,
        log_level="info"
    )

def main():
    parser = argparse.ArgumentParser(
        description="Regalia Catalogue Runner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--mode",
        choices=["dev", "prod"],
        default="dev",
        help="Server mode (default: dev)"
    )
    parser.add_argument(
        "--host",
        default=None,
        help="Host to bind to (default: HOST setting)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to bind to (default: PORT setting)"
    )
    parser.add_argument(
        "--no-reload",
        action="store_true",
        help="Disable auto-reload"
    )
    parser.add_argument(
        "--init-db",
        action="store_true",
        help="Create database tables before running"
    )
    parser.add_argument(
        "--resync-loge-types",
        action="store_true",
        help="Recompute denormalized loge types and exit"
    )

    args = parser.parse_args()

    from regalia.core.config import settings

    if not check_environment():
        return 1

    if args.init_db:
        init_database()

    if args.resync_loge_types:
        resync_loge_types()
        return 0

    reload = not args.no_reload and args.mode != "prod"
    workers = settings.WORKERS if args.mode == "prod" else 1

    run_app(
        args.host or settings.HOST,
        args.port or settings.PORT,
        reload,
        workers,
    )
    return 0

if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nServer stopped")
        sys.exit(0)
