"""Web-store detail endpoint: URL templates and payload parsing."""

from __future__ import annotations

import json
from typing import Any

from crxwatch.core.errors import MetadataParseError, UnexpectedPayloadError

WEBSTORE_DETAIL_URL = "https://chrome.google.com/webstore/ajax/detail?id={package_id}&hl=en&pv=20210820"
ARTIFACT_URL = (
    "https://clients2.google.com/service/update2/crx?response=redirect"
    "&acceptformat=crx2,crx3&prodversion=110.0"
    "&x=id%3D{package_id}%26installsource%3Dondemand%26uc"
)

# Anti-JSON-hijacking prefix, e.g. ")]}'\n"
FRAMING_PREFIX_LEN = 5


def webstore_url(package_id: str) -> str:
    """Return the detail endpoint URL for ``package_id``."""
    return WEBSTORE_DETAIL_URL.format(package_id=package_id)


def artifact_url(package_id: str) -> str:
    """Return the artifact download URL synthesised for ``package_id``."""
    return ARTIFACT_URL.format(package_id=package_id)


def parse_webstore_payload(body: bytes, package_id: str | None = None) -> str:
    """Extract the published version from a detail endpoint response.

    The body is five bytes of framing followed by a JSON array; the version
    string sits at ``[1][1][6]``.

    Raises:
        MetadataParseError: If the body is too short or not JSON
        UnexpectedPayloadError: If no string is found at the version path
    """
    if len(body) < FRAMING_PREFIX_LEN:
        raise MetadataParseError(
            f"web store response too short ({len(body)} bytes)", package_id=package_id
        )

    try:
        payload: Any = json.loads(body[FRAMING_PREFIX_LEN:])
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MetadataParseError(
            f"web store response is not valid JSON: {e}", package_id=package_id
        ) from e

    try:
        version = payload[1][1][6]
    except (IndexError, KeyError, TypeError) as e:
        raise UnexpectedPayloadError(
            "web store response has no version at [1][1][6]", package_id=package_id
        ) from e

    if not isinstance(version, str) or not version:
        raise UnexpectedPayloadError(
            f"web store version at [1][1][6] is not a string: {version!r}",
            package_id=package_id,
        )
    return version
