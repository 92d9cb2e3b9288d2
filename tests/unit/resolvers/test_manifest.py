"""Tests for XML update manifest parsing."""

from __future__ import annotations

import pytest

from crxwatch.core.errors import (
    MetadataParseError,
    MissingCodebaseError,
    MissingVersionError,
)
from crxwatch.core.resolvers import parse_update_manifest

APP_ID = "haldlgldplgnggkjaafhelgiaglafanh"


def _doc(body: str) -> bytes:
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<gupdate xmlns="http://www.google.com/update2/response" protocol="2.0">'
        f"{body}</gupdate>"
    ).encode()


class TestMatchingApp:
    """Tests for app selection."""

    def test_single_app(self):
        """Test version and codebase of the matching app are returned."""
        doc = _doc(
            f'<app appid="{APP_ID}"><updatecheck codebase="https://x/a.crx" version="1.2.3"/></app>'
        )
        resolved = parse_update_manifest(doc, APP_ID)
        assert resolved.version == "1.2.3"
        assert resolved.artifact_url == "https://x/a.crx"

    def test_other_apps_ignored(self):
        """Test updatechecks of non-matching apps are ignored."""
        doc = _doc(
            '<app appid="other"><updatecheck codebase="https://x/o.crx" version="9.9"/></app>'
            f'<app appid="{APP_ID}"><updatecheck codebase="https://x/a.crx" version="1.0"/></app>'
        )
        assert parse_update_manifest(doc, APP_ID).version == "1.0"

    def test_duplicate_app_first_wins(self):
        """Test only the first app with the requested id is honoured."""
        doc = _doc(
            f'<app appid="{APP_ID}"><updatecheck codebase="https://x/1.crx" version="1.0"/></app>'
            f'<app appid="{APP_ID}"><updatecheck codebase="https://x/2.crx" version="2.0"/></app>'
        )
        resolved = parse_update_manifest(doc, APP_ID)
        assert resolved.version == "1.0"
        assert resolved.artifact_url == "https://x/1.crx"

    def test_last_updatecheck_wins(self):
        """Test a later updatecheck overwrites an earlier one."""
        doc = _doc(
            f'<app appid="{APP_ID}">'
            '<updatecheck codebase="https://x/1.crx" version="1.0"/>'
            '<updatecheck codebase="https://x/2.crx" version="2.0"/>'
            "</app>"
        )
        resolved = parse_update_manifest(doc, APP_ID)
        assert resolved.version == "2.0"
        assert resolved.artifact_url == "https://x/2.crx"

    def test_attributes_overwrite_independently(self):
        """Test an updatecheck lacking codebase keeps the earlier codebase."""
        doc = _doc(
            f'<app appid="{APP_ID}">'
            '<updatecheck codebase="https://x/1.crx" version="1.0"/>'
            '<updatecheck version="2.0"/>'
            "</app>"
        )
        resolved = parse_update_manifest(doc, APP_ID)
        assert resolved.version == "2.0"
        assert resolved.artifact_url == "https://x/1.crx"

    def test_no_namespace(self):
        """Test documents without a namespace are parsed too."""
        doc = (
            f'<gupdate><app appid="{APP_ID}">'
            '<updatecheck codebase="https://x/a.crx" version="3.0"/></app></gupdate>'
        ).encode()
        assert parse_update_manifest(doc, APP_ID).version == "3.0"


class TestErrors:
    """Tests for missing data and malformed documents."""

    def test_missing_app_is_missing_version(self):
        """Test a manifest without the app raises MissingVersionError."""
        doc = _doc('<app appid="other"><updatecheck codebase="c" version="1"/></app>')
        with pytest.raises(MissingVersionError):
            parse_update_manifest(doc, APP_ID)

    def test_missing_codebase(self):
        """Test a version without codebase raises MissingCodebaseError."""
        doc = _doc(f'<app appid="{APP_ID}"><updatecheck version="1.0"/></app>')
        with pytest.raises(MissingCodebaseError):
            parse_update_manifest(doc, APP_ID)

    def test_malformed_xml(self):
        """Test malformed XML raises MetadataParseError."""
        with pytest.raises(MetadataParseError) as exc_info:
            parse_update_manifest(b"<gupdate><app", APP_ID)
        assert exc_info.value.package_id == APP_ID
