"""Resolves the currently published version of a package."""

from __future__ import annotations

import logging

from crxwatch.core.api.http import ApiError, AsyncApiClient
from crxwatch.core.config.models import PackageDescriptor
from crxwatch.core.errors import MetadataFetchError
from crxwatch.core.resolvers.manifest import parse_update_manifest
from crxwatch.core.resolvers.models import ResolvedVersion
from crxwatch.core.resolvers.webstore import (
    artifact_url,
    parse_webstore_payload,
    webstore_url,
)

logger = logging.getLogger(__name__)


class MetadataResolver:
    """Queries update metadata for packages.

    Packages with a ``manifest_url`` are resolved from their XML update
    manifest; all others through the web-store detail endpoint.

    Args:
        client: HTTP client shared by every pipeline of the run
    """

    def __init__(self, client: AsyncApiClient) -> None:
        self.client = client

    async def resolve(self, descriptor: PackageDescriptor) -> ResolvedVersion:
        """Return the published version and artifact URL of ``descriptor``.

        Raises:
            ResolveError: Subclass describing why resolution failed
        """
        if descriptor.manifest_url is not None:
            return await self._resolve_manifest(descriptor, descriptor.manifest_url)
        return await self._resolve_webstore(descriptor)

    async def _resolve_manifest(
        self, descriptor: PackageDescriptor, manifest_url: str
    ) -> ResolvedVersion:
        logger.debug(f"{descriptor}: fetching update manifest {manifest_url}")
        try:
            resp = await self.client.get(manifest_url)
        except ApiError as e:
            raise MetadataFetchError(
                f"couldn't fetch update manifest: {e}", package_id=descriptor.package_id
            ) from e

        return parse_update_manifest(resp.content, descriptor.package_id)

    async def _resolve_webstore(self, descriptor: PackageDescriptor) -> ResolvedVersion:
        url = webstore_url(descriptor.package_id)
        logger.debug(f"{descriptor}: querying web store")
        try:
            resp = await self.client.post(url, headers={"Content-Length": "0"}, content=b"")
        except ApiError as e:
            raise MetadataFetchError(
                f"couldn't query web store: {e}", package_id=descriptor.package_id
            ) from e

        version = parse_webstore_payload(resp.content, descriptor.package_id)
        return ResolvedVersion(version=version, artifact_url=artifact_url(descriptor.package_id))
