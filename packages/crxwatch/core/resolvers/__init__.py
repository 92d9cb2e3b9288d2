"""Update metadata resolution (XML manifests and the web store)."""

from crxwatch.core.resolvers.manifest import parse_update_manifest
from crxwatch.core.resolvers.models import ResolvedVersion
from crxwatch.core.resolvers.resolver import MetadataResolver
from crxwatch.core.resolvers.webstore import (
    artifact_url,
    parse_webstore_payload,
    webstore_url,
)

__all__ = [
    "MetadataResolver",
    "ResolvedVersion",
    "parse_update_manifest",
    "parse_webstore_payload",
    "webstore_url",
    "artifact_url",
]
