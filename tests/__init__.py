"""Test suite for crxwatch.

Test Structure:
- unit/: Unit tests per component (resolvers, ledger, artifacts, formatting,
  diffing, pipeline, watch, notify, config, io, process, api, cli)
- conftest.py: Shared fixtures (fake store, fake process runner, fake
  filesystem, package factories)

External tools (diff, unzip) are exercised for real only where installed;
everything else runs against httpx.MockTransport and the fake capabilities.
"""
