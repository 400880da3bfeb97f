from datetime import datetime, timezone

import pytest

from docserve.details import CrateDetails
from docserve.releases import releases_from_rows
from docserve.versionreq import Version
from docserve.webutil import render_markdown

RUSTC = "rustc 1.10.0-nightly (57ef01513 2016-05-23)"


def release_rows(specs):
    """specs: list of (version, failed, yanked, binary)."""
    rows = []
    for index, (version, failed, yanked, binary) in enumerate(specs, start=1):
        rows.append(
            {
                "id": index,
                "version": version,
                "build_status": not failed,
                "yanked": yanked,
                "is_library": not binary,
                "rustdoc_status": not failed and not binary,
            }
        )
    return rows


def details_row(release, **overrides):
    row = {
        "crate_id": 1,
        "release_id": release["id"],
        "name": "foo",
        "version": release["version"],
        "description": "Fake package",
        "dependencies": [],
        "readme": None,
        "description_long": None,
        "release_time": datetime(2020, 1, 1, tzinfo=timezone.utc),
        "build_status": release["build_status"],
        "rustdoc_status": release["rustdoc_status"],
        "archive_storage": False,
        "repository_url": None,
        "homepage_url": None,
        "keywords": [],
        "have_examples": False,
        "target_name": "foo",
        "repo_host": None,
        "repo_stars": None,
        "repo_forks": None,
        "repo_issues": None,
        "repo_name": None,
        "is_library": release["is_library"],
        "yanked": release["yanked"],
        "doc_targets": [],
        "license": None,
        "documentation_url": None,
        "default_target": "x86_64-unknown-linux-gnu",
        "doc_rustc_version": RUSTC,
        "total_items": None,
        "documented_items": None,
        "total_items_needing_examples": None,
        "items_with_examples": None,
    }
    row.update(overrides)
    return row


def details_for(specs, version, **kwargs):
    rows = release_rows(specs)
    releases = releases_from_rows(1, rows)
    release = next(r for r in rows if r["version"] == version)
    return CrateDetails.from_row(details_row(release), releases, **kwargs)


def spec(version, failed=False, yanked=False, binary=False):
    return (version, failed, yanked, binary)


@pytest.mark.parametrize(
    "version, expected",
    [
        ("0.0.1", None),
        ("0.0.2", None),
        ("0.0.3", "0.0.2"),
        ("0.0.4", None),
        ("0.0.5", "0.0.2"),
    ],
)
def test_last_successful_build_when_last_releases_failed_or_yanked(version, expected):
    specs = [
        spec("0.0.1"),
        spec("0.0.2"),
        spec("0.0.3", failed=True),
        spec("0.0.4", yanked=True),
        spec("0.0.5", failed=True, yanked=True),
    ]
    assert details_for(specs, version).last_successful_build == expected


@pytest.mark.parametrize("version", ["0.0.1", "0.0.2", "0.0.3"])
def test_last_successful_build_when_all_releases_failed_or_yanked(version):
    specs = [
        spec("0.0.1", failed=True),
        spec("0.0.2", failed=True),
        spec("0.0.3", yanked=True),
    ]
    assert details_for(specs, version).last_successful_build is None


@pytest.mark.parametrize(
    "version, expected",
    [("0.0.1", None), ("0.0.2", "0.0.4"), ("0.0.3", None), ("0.0.4", None)],
)
def test_last_successful_build_with_intermittent_releases_failed_or_yanked(
    version, expected
):
    specs = [
        spec("0.0.1"),
        spec("0.0.2", failed=True),
        spec("0.0.3", yanked=True),
        spec("0.0.4"),
    ]
    assert details_for(specs, version).last_successful_build == expected


def test_releases_should_be_sorted():
    specs = [
        spec("0.1.0"),
        spec("0.1.1"),
        spec("0.3.0", failed=True),
        spec("1.0.0"),
        spec("0.12.0"),
        spec("0.2.0", yanked=True),
        spec("0.2.0-alpha"),
        spec("0.0.1", failed=True, binary=True),
    ]
    details = details_for(specs, "0.2.0")
    summary = [
        (str(r.version), r.build_status, r.yanked, r.is_library, r.rustdoc_status)
        for r in details.releases
    ]
    assert summary == [
        ("1.0.0", True, False, True, True),
        ("0.12.0", True, False, True, True),
        ("0.3.0", False, False, True, False),
        ("0.2.0", True, True, True, True),
        ("0.2.0-alpha", True, False, True, True),
        ("0.1.1", True, False, True, True),
        ("0.1.0", True, False, True, True),
        ("0.0.1", False, False, False, False),
    ]


@pytest.mark.parametrize("version", ["0.0.1", "0.0.2", "0.0.3"])
def test_latest_version(version):
    specs = [spec("0.0.1"), spec("0.0.3"), spec("0.0.2")]
    assert details_for(specs, version).latest_release().version == Version.parse("0.0.3")


@pytest.mark.parametrize("version", ["0.0.1", "0.0.2", "0.0.3-pre.1"])
def test_latest_version_ignores_prerelease(version):
    specs = [spec("0.0.1"), spec("0.0.3-pre.1"), spec("0.0.2")]
    assert details_for(specs, version).latest_release().version == Version.parse("0.0.2")


@pytest.mark.parametrize("version", ["0.0.1", "0.0.2", "0.0.3"])
def test_latest_version_ignores_yanked(version):
    specs = [spec("0.0.1"), spec("0.0.3", yanked=True), spec("0.0.2")]
    assert details_for(specs, version).latest_release().version == Version.parse("0.0.2")


@pytest.mark.parametrize("version", ["0.0.1", "0.0.2", "0.0.3"])
def test_latest_version_only_yanked(version):
    specs = [
        spec("0.0.1", yanked=True),
        spec("0.0.3", yanked=True),
        spec("0.0.2", yanked=True),
    ]
    assert details_for(specs, version).latest_release().version == Version.parse("0.0.3")


def test_owners_are_kept():
    owners = [("foobar", "https://example.org/foobar")]
    details = details_for([spec("0.0.1")], "0.0.1", owners=owners)
    assert details.owners == [("foobar", "https://example.org/foobar")]


def test_metadata_built_from_row():
    details = details_for([spec("0.1.0")], "0.1.0", version_or_latest="latest")
    assert details.metadata.version_or_latest == "latest"
    assert details.metadata.version == "0.1.0"
    assert details.metadata.rustdoc_css_file == "rustdoc.css"
    assert details.metadata.default_target == "x86_64-unknown-linux-gnu"


def test_repository_metadata_absent_without_host():
    assert details_for([spec("0.1.0")], "0.1.0").repository_metadata is None


def test_repository_metadata_default_icon():
    rows = release_rows([spec("0.1.0")])
    row = details_row(
        rows[0], repo_host="github.com", repo_stars=5, repo_forks=2, repo_issues=1
    )
    details = CrateDetails.from_row(row, releases_from_rows(1, rows))
    assert details.repository_metadata.icon == "code-branch"
    assert details.repository_metadata.stars == 5


def test_repository_metadata_icon_from_function():
    rows = release_rows([spec("0.1.0")])
    row = details_row(
        rows[0], repo_host="gitlab.com", repo_stars=0, repo_forks=0, repo_issues=0
    )
    details = CrateDetails.from_row(
        row, releases_from_rows(1, rows), icon=lambda host: f"icon-{host}"
    )
    assert details.repository_metadata.icon == "icon-gitlab.com"


def test_coverage_numbers_become_floats():
    rows = release_rows([spec("0.1.0")])
    row = details_row(rows[0], total_items=10, documented_items=6)
    details = CrateDetails.from_row(row, releases_from_rows(1, rows))
    assert details.total_items == 10.0
    assert details.documented_items == 6.0
    assert details.items_with_examples is None


def test_to_dict_renders_markdown_and_versions():
    rows = release_rows([spec("0.1.0"), spec("0.2.0")])
    row = details_row(rows[0], readme="# Hello", description_long=None)
    data = CrateDetails.from_row(row, releases_from_rows(1, rows)).to_dict()
    assert data["readme"] == render_markdown("# Hello")
    assert data["rustdoc"] is None
    assert [r["version"] for r in data["releases"]] == ["0.2.0", "0.1.0"]
    assert data["metadata"]["name"] == "foo"
    assert data["release_time"].endswith("Z")


def test_latest_release_without_releases_raises():
    rows = release_rows([spec("0.1.0")])
    details = CrateDetails.from_row(details_row(rows[0]), [])
    with pytest.raises(ValueError):
        details.latest_release()