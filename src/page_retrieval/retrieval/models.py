"""Request and outcome types shared by the retrieval strategies."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from page_retrieval.core.exceptions import (
    HttpStatusError,
    TransportConnectionError,
)

# ---------------------------------------------------------------------------
# Request
# ---------------------------------------------------------------------------


class RetrievalFormat(str, Enum):
    """Output format requested by the caller.

    Attributes:
        NONE: Full page contents wrapped in the contents envelope.
        INFO: Status metadata only (HEAD probe).
        RAW: Undecoded response bytes.
        VILOS: Embedded media configuration scraped from the rendered page.
        VILOSLOG: As ``VILOS`` but always re-renders and persists the document.
        LASTLOG: The most recently persisted rendered document.
    """

    NONE = "none"
    INFO = "info"
    RAW = "raw"
    VILOS = "vilos"
    VILOSLOG = "viloslog"
    LASTLOG = "lastlog"

    @classmethod
    def parse(cls, value: str | RetrievalFormat | None) -> RetrievalFormat:
        """Map a loose format string to a member; unknown values mean ``NONE``."""
        if isinstance(value, cls):
            return value
        if not value:
            return cls.NONE
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.NONE


class RetrievalStrategy(str, Enum):
    """Route a request is dispatched to."""

    PROBE = "probe"
    RAW = "raw"
    RENDERED_PAYLOAD = "rendered_payload"
    LAST_LOG = "last_log"
    CONTENTS = "contents"


@dataclass(frozen=True)
class RetrievalRequest:
    """One retrieval call.

    Attributes:
        url: Target URL.  Ignored by the ``lastlog`` format.
        format: Requested output format.
        method: HTTP method, upper-cased.  ``HEAD`` forces a probe.
    """

    url: str
    format: RetrievalFormat = RetrievalFormat.NONE
    method: str = "GET"

    def __post_init__(self) -> None:
        # frozen: normalise through object.__setattr__
        object.__setattr__(self, "format", RetrievalFormat.parse(self.format))
        object.__setattr__(self, "method", (self.method or "GET").upper())

    @classmethod
    def from_params(
        cls,
        url: str | None,
        format: str | None = None,  # noqa: A002
        method: str | None = None,
    ) -> RetrievalRequest:
        """Build a request from loose string inputs such as query parameters."""
        return cls(
            url=url or "",
            format=RetrievalFormat.parse(format),
            method=method or "GET",
        )


# ---------------------------------------------------------------------------
# Transport outcome
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CapturedResponse:
    """An HTTP response fully read into memory.

    Attributes:
        url: Final URL after redirects.
        status_code: HTTP status code.
        headers: Response headers with lower-cased names.
        content: Body bytes (decoded transfer encoding unless fetched raw).
            Empty for ``HEAD`` requests.
        encoding: Charset used by :attr:`text`.
    """

    url: str
    status_code: int
    headers: dict[str, str] = field(default_factory=dict)
    content: bytes = b""
    encoding: str = "utf-8"

    @property
    def content_type(self) -> str | None:
        return self.headers.get("content-type")

    @property
    def content_length(self) -> int:
        """Byte length of the body actually received."""
        return len(self.content)

    @property
    def text(self) -> str:
        try:
            return self.content.decode(self.encoding, errors="replace")
        except LookupError:
            return self.content.decode("utf-8", errors="replace")


TransportFailure = Union[TransportConnectionError, HttpStatusError]


@dataclass(frozen=True)
class TransportOutcome:
    """Result of one HTTP request: exactly one of ``response`` / ``error`` is set.

    ``error`` is a :class:`TransportConnectionError` when no response was
    obtained, or an :class:`HttpStatusError` carrying the failure response.
    """

    response: CapturedResponse | None = None
    error: TransportFailure | None = None

    def __post_init__(self) -> None:
        if (self.response is None) == (self.error is None):
            raise ValueError("TransportOutcome needs exactly one of response or error")

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, response: CapturedResponse) -> TransportOutcome:
        return cls(response=response)

    @classmethod
    def failure(cls, error: TransportFailure) -> TransportOutcome:
        return cls(error=error)


Envelope = Union[dict[str, Any], str]
"""What :meth:`PageRetriever.retrieve` returns: an envelope dict, or a bare
string for the ``vilos``/``viloslog``/``lastlog`` formats."""
