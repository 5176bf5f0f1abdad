"""
Snippetbox — Command-Line Entrypoint
======================================

What:  Parses flags, builds Settings, and serves the app with uvicorn over TLS.
Who:   `snippetbox` console script and `python -m snippetbox`.

Flags (single-dash spellings kept for compatibility with existing scripts):
    -addr         HTTP network address            (default from ADDR, ":4000")
    -static-dir   Path to static assets           (default from STATIC_DIR)
    -dsn          Database data source name       (default from DATABASE_URL)
    --tls-cert / --tls-key / --no-tls / --log-level

Startup failures (bad address, missing TLS files, broken templates, missing
static directory) are logged and exit with status 1. An unreachable database aborts uvicorn's
lifespan startup, which also exits non-zero.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import uvicorn

from snippetbox.config import Settings
from snippetbox.main import create_app, setup_logging

logger = logging.getLogger("snippetbox")

# Ciphers offered over TLS 1.2; TLS 1.3 suites are fixed by OpenSSL
TLS_CIPHERS = "ECDHE+AESGCM:ECDHE+CHACHA20"


def parse_addr(addr: str) -> Tuple[str, int]:
    """
    Split a "host:port" address.

    ":4000" → ("0.0.0.0", 4000); "[::1]:4000" → ("::1", 4000)

    Raises:
        ValueError: missing or non-numeric port, port out of range, or an
            unbracketed IPv6 host
    """
    host, sep, port_text = addr.rpartition(":")
    if not sep:
        raise ValueError(f"Invalid address '{addr}': expected host:port")
    try:
        port = int(port_text)
    except ValueError:
        raise ValueError(f"Invalid port in address '{addr}'")
    if not 0 < port < 65536:
        raise ValueError(f"Port out of range in address '{addr}'")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    elif ":" in host:
        # IPv6 hosts must be bracketed, otherwise the port is ambiguous
        raise ValueError(f"Invalid address '{addr}': bracket IPv6 hosts, e.g. [::1]:4000")
    host = host or "0.0.0.0"
    return host, port


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="snippetbox",
        description="Serve the Snippetbox web application",
    )
    parser.add_argument("-addr", "--addr", help="HTTP network address (e.g. :4000)")
    parser.add_argument("-static-dir", "--static-dir", dest="static_dir", help="Path to static assets")
    parser.add_argument("-dsn", "--dsn", help="Database data source name (SQLAlchemy URL)")
    parser.add_argument("--tls-cert", dest="tls_cert_file", help="TLS certificate file")
    parser.add_argument("--tls-key", dest="tls_key_file", help="TLS private key file")
    parser.add_argument(
        "--no-tls",
        dest="tls_enabled",
        action="store_false",
        default=None,
        help="Serve plain HTTP (development only)",
    )
    parser.add_argument("--log-level", dest="log_level", help="DEBUG, INFO, WARNING, ERROR")
    return parser


def build_settings(args: argparse.Namespace) -> Settings:
    """Environment settings with every flag that was given layered on top."""
    overrides = {
        "addr": args.addr,
        "static_dir": args.static_dir,
        "database_url": args.dsn,
        "tls_cert_file": args.tls_cert_file,
        "tls_key_file": args.tls_key_file,
        "tls_enabled": args.tls_enabled,
        "log_level": args.log_level,
    }
    return Settings(**{k: v for k, v in overrides.items() if v is not None})


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    settings = build_settings(args)
    setup_logging(settings.log_level)

    try:
        host, port = parse_addr(settings.addr)
        if settings.tls_enabled:
            for path in (settings.tls_cert_file, settings.tls_key_file):
                if not Path(path).is_file():
                    raise FileNotFoundError(f"TLS file '{path}' does not exist")
        app = create_app(settings)
    except Exception as e:
        logger.error("Startup failed: %s", e)
        sys.exit(1)

    ssl_options = {}
    scheme = "http"
    if settings.tls_enabled:
        scheme = "https"
        ssl_options = {
            "ssl_certfile": settings.tls_cert_file,
            "ssl_keyfile": settings.tls_key_file,
            "ssl_ciphers": TLS_CIPHERS,
        }

    logger.info("Starting server on %s (%s)", settings.addr, scheme)
    uvicorn.run(
        app,
        host=host,
        port=port,
        timeout_keep_alive=settings.idle_timeout,
        # Root logger is already configured by setup_logging
        log_config=None,
        **ssl_options,
    )


if __name__ == "__main__":
    main()
