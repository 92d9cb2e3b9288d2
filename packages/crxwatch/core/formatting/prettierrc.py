"""Provisioning of the formatter config file for a run."""

from __future__ import annotations

import json
import logging

from crxwatch.core.io import AbsolutePath, FileSystem

logger = logging.getLogger(__name__)

DEFAULT_PRETTIERRC: dict[str, object] = {
    "printWidth": 100,
    "tabWidth": 2,
    "useTabs": False,
    "semi": True,
    "singleQuote": False,
    "trailingComma": "es5",
    "endOfLine": "lf",
    "htmlWhitespaceSensitivity": "ignore",
}


async def provision_formatter_config(fs: FileSystem, path: AbsolutePath) -> bool:
    """Write the builtin formatter config to ``path`` unless one exists.

    Returns:
        True if the file was created by this call (and should be removed
        with :func:`remove_formatter_config` after the run)
    """
    if await fs.exists(path):
        logger.info(f"{path} already exists. the builtin formatter config will not be used")
        return False

    await fs.write_text(path, json.dumps(DEFAULT_PRETTIERRC, indent=2) + "\n")
    logger.debug(f"wrote builtin formatter config to {path}")
    return True


async def remove_formatter_config(fs: FileSystem, path: AbsolutePath) -> None:
    """Remove a provisioned formatter config, logging failures."""
    try:
        await fs.remove(path)
    except OSError as e:
        logger.warning(f"couldn't remove temporary formatter config {path}: {e}")
