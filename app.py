#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
CodeLingo - AI Code Converter

Entry point for the NiceGUI-based code conversion application.
"""

# IMPORTANT: Set proxy bypass BEFORE any imports that might cache proxy settings
# The AI server usually runs on localhost and corporate proxies intercept it
import os
os.environ.setdefault('NO_PROXY', 'localhost,127.0.0.1')
os.environ.setdefault('no_proxy', 'localhost,127.0.0.1')

import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))


def setup_logging():
    """Configure logging to console and file for debugging.

    Log file location: ~/.codelingo/logs/startup.log
    - Truncated on startup

    Returns:
        tuple: (console_handler, file_handler) to keep references alive
    """
    logs_dir = Path.home() / ".codelingo" / "logs"
    log_file_path = logs_dir / "startup.log"

    # Create console handler first (always works)
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter(
        '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S'
    ))

    # Try to create log directory
    file_handler = None
    try:
        logs_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        # Fall back to console-only logging if log directory cannot be created
        print(f"[WARNING] Failed to create log directory {logs_dir}: {e}", file=sys.stderr)
        logs_dir = None

    if logs_dir is not None:
        try:
            file_handler = logging.FileHandler(
                log_file_path,
                mode='w',
                encoding='utf-8'
            )
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(
                '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            ))
        except OSError as e:
            print(f"[WARNING] Failed to create log file {log_file_path}: {e}", file=sys.stderr)
            file_handler = None

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    # Remove existing handlers that might interfere
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.addHandler(console_handler)
    if file_handler:
        root_logger.addHandler(file_handler)

    # Suppress verbose logging from third-party libraries
    # uvicorn/starlette: Internal web server logs
    # asyncio: Event loop debug logs
    for name in ['uvicorn', 'uvicorn.error', 'uvicorn.access',
                 'starlette', 'httpcore', 'httpx',
                 'asyncio', 'concurrent']:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.info("=" * 60)
    logger.info("CodeLingo starting...")
    logger.info("=" * 60)
    logger.info("Executable: %s", sys.executable)
    logger.info("CWD: %s", Path.cwd())
    logger.debug("sys.argv: %s", sys.argv)

    if file_handler:
        logger.info("Log file: %s", log_file_path)
    else:
        logger.warning("File logging disabled - console only")

    return (console_handler, file_handler)  # Return both handlers to keep references


# Global reference to keep log handlers alive (prevents garbage collection)
_global_log_handlers = None


def main():
    """Main entry point

    Note: Import is inside main() so NiceGUI is only loaded once logging
    is configured.
    """
    import asyncio

    global _global_log_handlers
    _global_log_handlers = setup_logging()

    logger = logging.getLogger(__name__)

    try:
        from codelingo.ui.app import run_app
    except Exception as e:
        logger.exception("Failed to import UI module: %s", e)
        return

    host = os.environ.get("CODELINGO_HOST", "127.0.0.1")
    port = int(os.environ.get("CODELINGO_PORT", "8766"))

    try:
        run_app(
            host=host,
            port=port,
            native=False,  # Browser mode (use external browser)
        )
    except KeyboardInterrupt:
        # Normal shutdown via Ctrl+C
        logger.debug("Application shutdown via KeyboardInterrupt")
    except asyncio.CancelledError:
        # Async task cancellation during shutdown is expected
        logger.debug("Application shutdown via CancelledError")
    except SystemExit:
        # Normal exit
        pass
    except Exception as e:
        logger.exception("Application crashed: %s", e)
        raise


if __name__ == '__main__':
    main()
