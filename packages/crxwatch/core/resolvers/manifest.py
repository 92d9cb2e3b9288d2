"""Parsing of XML update manifests (Omaha / gupdate format).

Example document::

    <gupdate xmlns="http://www.google.com/update2/response" protocol="2.0">
      <app appid="haldlgldplgnggkjaafhelgiaglafanh">
        <updatecheck codebase="https://ext.goguardian.com/stable.crx" version="1.2.3"/>
      </app>
    </gupdate>
"""

from __future__ import annotations

import logging
from xml.etree.ElementTree import ParseError, XMLPullParser

from crxwatch.core.errors import (
    MetadataParseError,
    MissingCodebaseError,
    MissingVersionError,
)
from crxwatch.core.resolvers.models import ResolvedVersion

logger = logging.getLogger(__name__)


def _local_name(tag: str) -> str:
    """Strip a ``{namespace}`` prefix from an element tag."""
    return tag.rsplit("}", 1)[-1]


def parse_update_manifest(document: bytes | str, package_id: str) -> ResolvedVersion:
    """Extract the version and codebase published for ``package_id``.

    Only the first ``app`` element whose ``appid`` matches is honoured. Inside
    it every ``updatecheck`` element contributes its ``version`` and
    ``codebase`` attributes, later ones overwriting earlier ones.

    Raises:
        MetadataParseError: If the document is not well-formed XML
        MissingVersionError: If no version was found for the package
        MissingCodebaseError: If a version but no codebase was found
    """
    parser = XMLPullParser(events=("start", "end"))

    inside_app = False
    app_seen = False
    version: str | None = None
    codebase: str | None = None

    try:
        parser.feed(document)
        parser.close()
        events = list(parser.read_events())
    except ParseError as e:
        raise MetadataParseError(
            f"malformed update manifest: {e}", package_id=package_id
        ) from e

    for event, element in events:
        name = _local_name(element.tag)

        if event == "start":
            if name == "app" and not app_seen and element.get("appid") == package_id:
                inside_app = True
                app_seen = True
            elif name == "updatecheck" and inside_app:
                version = element.get("version", version)
                codebase = element.get("codebase", codebase)
        elif name == "app" and inside_app:
            inside_app = False

    if not version:
        raise MissingVersionError(
            f"no version found for {package_id} in update manifest", package_id=package_id
        )
    if not codebase:
        raise MissingCodebaseError(
            f"no codebase found for {package_id} in update manifest", package_id=package_id
        )

    logger.debug(f"manifest lists {package_id} at version {version}")
    return ResolvedVersion(version=version, artifact_url=codebase)
