#!/usr/bin/env python
"""Retrieve one page and print the response envelope as JSON.

Run from the project root::

    python scripts/retrieve_page.py https://example.com --format info

Usage::

    python scripts/retrieve_page.py URL [--format FORMAT] [--method METHOD]

Options:
    --format  none (default), info, raw, vilos, viloslog or lastlog.
    --method  HTTP method for the plain HTTP strategies (default GET).

Raw envelopes carry bytes; they are printed base64-encoded.  String results
(``vilos``, ``viloslog``, ``lastlog``) are printed as-is.

Exit codes:
    0 - An envelope was produced (including error envelopes).
"""

from __future__ import annotations

import argparse
import asyncio
import base64
import json
import os
import sys
from typing import Any

# Ensure the src layout is on sys.path when run as a standalone script.
_SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
_SRC_DIR = os.path.join(os.path.dirname(_SCRIPT_DIR), "src")
if _SRC_DIR not in sys.path:
    sys.path.insert(0, _SRC_DIR)


def _json_default(value: Any) -> Any:
    if isinstance(value, bytes):
        return base64.b64encode(value).decode("ascii")
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


async def _run(url: str, fmt: str | None, method: str | None) -> None:
    """Retrieve ``url`` and print the result to stdout."""
    from page_retrieval.config import get_settings  # noqa: PLC0415
    from page_retrieval.core.logging_config import configure_logging  # noqa: PLC0415
    from page_retrieval.retrieval import (  # noqa: PLC0415
        RetrievalRequest,
        open_page_retriever,
    )

    settings = get_settings()
    configure_logging(settings.log_level)

    request = RetrievalRequest.from_params(url, fmt, method)
    async with open_page_retriever(settings) as retriever:
        result = await retriever.retrieve(request)

    if isinstance(result, str):
        print(result)
    else:
        print(json.dumps(result, indent=2, default=_json_default))


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Retrieve a page through the page retrieval dispatcher.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("url", nargs="?", default="", help="Target URL.")
    parser.add_argument(
        "--format",
        default=None,
        help="Output format: none, info, raw, vilos, viloslog, lastlog.",
    )
    parser.add_argument(
        "--method",
        default="GET",
        help="HTTP method used by the plain HTTP strategies.",
    )
    return parser.parse_args()


def main() -> None:
    """Entry point for the page retrieval script."""
    args = _parse_args()
    asyncio.run(_run(url=args.url, fmt=args.format, method=args.method))


if __name__ == "__main__":
    main()
