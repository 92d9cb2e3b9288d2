"""Builtin catalog of watched extensions."""

from __future__ import annotations

from crxwatch.core.config.models import PackageDescriptor

_BUILTIN: tuple[tuple[str, str, str, str | None], ...] = (
    (
        "classroom",
        "Securly Classroom",
        "jfbecfmiegcjddenjhlbhlikcbfmnafd",
        "https://deviceconsole.securly.com/dist/chrome/n.xml",
    ),
    (
        "chromebooks",
        "Securly for Chromebooks [Old, Webstore]",
        "iheobagjkfklnlikgihanlhcddjoihkg",
        None,
    ),
    (
        "chromebooks-new",
        "Securly for Chromebooks [New]",
        "joflmkccibkooplaeoinecjbmdebglab",
        "https://extensions.securly.com/extensions.xml",
    ),
    (
        "goguardian-stable",
        "GoGuardian [Stable]",
        "haldlgldplgnggkjaafhelgiaglafanh",
        "https://ext.goguardian.com/stable.xml",
    ),
    (
        "goguardian-alpha",
        "GoGuardian [Alpha]",
        "haldlgldplgnggkjaafhelgiaglafanh",
        "https://ext.goguardian.com/alpha.xml",
    ),
    ("blocksi", "Blocksi", "ghlpmldmjjhmdgmneoaibbegkjjbonbk", None),
    ("iboss", "iBoss", "kmffehbidlalibfeklaefnckpidbodff", None),
    ("fortiguard", "Fortiguard", "igbgpehnbmhgdgjbhkkpedommgmfbeao", None),
    ("cisco", "Cisco", "jcdhmojfecjfmbdpchihbeilohgnbdci", None),
    ("netref", "NetRef", "khfdeghnhlpdfeenmdofgcbilkngngcp", None),
    ("contentkeeper", "ContentKeeper", "jdogphakondfdmcanpapfahkdomaicfa", None),
    ("hapara", "Hapara", "kbohafcopfpigkjdimdcdgenlhkmhbnc", None),
    ("smoothwall", "Smoothwall", "jbldkhfglmgeihlcaeliadhipokhocnm", None),
    ("linewize", "Linewize/Connect for Chrome", "ddfbkhpmcdbciejenfcolaaiebnjcbfc", None),
    ("lanschool", "LANSchool", "baleiojnjpgeojohhhfbichcodgljmnj", None),
)


def builtin_packages() -> list[PackageDescriptor]:
    """Return the builtin extensions, all with diffing enabled."""
    return [
        PackageDescriptor(
            name=name,
            display_name=display_name,
            package_id=package_id,
            manifest_url=manifest_url,
        )
        for name, display_name, package_id, manifest_url in _BUILTIN
    ]
