"""Constants and tuning parameters for the retrieval strategies."""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Headless browser
# ---------------------------------------------------------------------------

#: Playwright resource types whose requests are aborted during a render.
#: Everything else (document, script, xhr, fetch, ...) is allowed through.
BLOCKED_RESOURCE_TYPES: frozenset[str] = frozenset(
    {
        "media",
        "font",
        "image",
        "stylesheet",
    }
)

#: Viewport used for every render.
VIEWPORT: dict[str, int] = {"width": 800, "height": 600}

#: Spoofed user-agent string presented by rendered sessions.
STEALTH_USER_AGENT: str = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_12_6) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/65.0.3312.0 Safari/537.36"
)

#: Chromium launch flags applied to every render.
STEALTH_LAUNCH_ARGS: tuple[str, ...] = (
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-infobars",
    "--window-position=0,0",
    "--ignore-certificate-errors",
    "--ignore-certificate-errors-spki-list",
    f"--user-agent={STEALTH_USER_AGENT}",
)

#: Navigation is considered complete once this load state is reached.
NAVIGATION_WAIT_UNTIL: str = "load"

#: Script evaluated in the page to serialize the root element.
SERIALIZE_DOCUMENT_JS: str = "() => document.querySelector('*').outerHTML"

# ---------------------------------------------------------------------------
# Embedded payload extraction
# ---------------------------------------------------------------------------

#: Token preceding the embedded media configuration object literal.
MEDIA_CONFIG_MARKER: str = "config.media ="

#: Characters skipped from the start of the marker to the payload
#: (the marker itself plus the separating space).
MEDIA_CONFIG_OFFSET: int = len(MEDIA_CONFIG_MARKER) + 1

#: The payload ends just before the first blank line after it starts.
MEDIA_CONFIG_TERMINATOR: str = "\n\n"

#: Returned when no payload could be extracted or rendered.
EMPTY_PAYLOAD: str = '"{}"'

# ---------------------------------------------------------------------------
# Last rendered document
# ---------------------------------------------------------------------------

#: Returned by the ``lastlog`` format when nothing has been persisted yet.
EMPTY_LAST_LOG: str = "empty last log"

# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------

#: Reported as ``content_length`` by the info envelope when the
#: ``content-length`` header is missing, zero or unparseable.
UNKNOWN_CONTENT_LENGTH: int = -1
