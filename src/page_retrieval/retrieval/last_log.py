"""Single-slot file storage for the most recently rendered document.

Each write replaces the previous document.  File I/O runs in a worker thread
so the event loop is not blocked by large documents.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class LastLogStore:
    """Persist and read back one rendered document.

    Args:
        path: File that holds the document.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    async def write(self, document: str) -> None:
        """Overwrite the slot with ``document``.

        Characters UTF-8 cannot encode (lone surrogates) are written as ``?``.
        """
        await asyncio.to_thread(
            self.path.write_text, document, encoding="utf-8", errors="replace"
        )
        logger.debug("retrieval: persisted rendered document to %s", self.path)

    async def read(self) -> str | None:
        """Return the persisted document, or ``None`` if nothing was written yet."""
        try:
            return await asyncio.to_thread(self.path.read_text, encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            logger.warning("retrieval: cannot read last log %s: %s", self.path, exc)
            return None
