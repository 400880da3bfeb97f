"""Everything shown on the page describing one release of a crate."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any

from docserve.metadata import MetaData
from docserve.releases import Release, last_successful_build, latest_release, sort_releases
from docserve.rustc_version import get_correct_docsrs_style_file
from docserve.webutil import render_markdown

DEFAULT_ICON = "code-branch"


@dataclass
class RepositoryMetadata:
    """Statistics of the source repository of a crate."""

    stars: int
    forks: int
    issues: int
    name: str | None
    icon: str


def _as_float(value: int | None) -> float | None:
    return None if value is None else float(value)


def _timestamp(value: Any) -> Any:
    if isinstance(value, datetime):
        text = value.isoformat()
        return text[:-6] + "Z" if text.endswith("+00:00") else text
    return value


def _release_dict(release: Release) -> dict[str, Any]:
    data = asdict(release)
    data["version"] = str(release.version)
    return data


@dataclass
class CrateDetails:
    """Details of one release of a crate, with all its sibling releases."""

    name: str
    version: str
    description: str | None
    owners: list[tuple[str, str]]
    dependencies: Any
    readme: str | None
    rustdoc: str | None
    release_time: Any
    build_status: bool
    last_successful_build: str | None
    rustdoc_status: bool
    archive_storage: bool
    repository_url: str | None
    homepage_url: str | None
    keywords: Any
    have_examples: bool
    target_name: str
    releases: list[Release]
    repository_metadata: RepositoryMetadata | None
    metadata: MetaData
    is_library: bool
    license: str | None
    documentation_url: str | None
    total_items: float | None
    documented_items: float | None
    total_items_needing_examples: float | None
    items_with_examples: float | None
    crate_id: int
    release_id: int
    _extra: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_row(
        cls,
        row: Mapping[str, Any],
        releases: Iterable[Release],
        owners: Iterable[Sequence[str]] = (),
        version_or_latest: str | None = None,
        icon: str | Callable[[str], str] | None = None,
    ) -> CrateDetails:
        """Build the details from a release row joined with its crate, coverage and repository.

        ``icon`` is the repository icon name, or a function giving it for a host;
        without one the generic icon is used.
        """
        releases = sort_releases(releases)
        version = row["version"]
        if version_or_latest is None:
            version_or_latest = version

        repository_metadata = None
        host = row.get("repo_host")
        if host is not None:
            if icon is None:
                icon_name = DEFAULT_ICON
            elif callable(icon):
                icon_name = icon(host)
            else:
                icon_name = icon
            repository_metadata = RepositoryMetadata(
                stars=row["repo_stars"],
                forks=row["repo_forks"],
                issues=row["repo_issues"],
                name=row.get("repo_name"),
                icon=icon_name,
            )

        metadata = MetaData(
            name=row["name"],
            version=version,
            version_or_latest=version_or_latest,
            description=row.get("description"),
            target_name=row.get("target_name"),
            rustdoc_status=bool(row["rustdoc_status"]),
            default_target=row["default_target"],
            doc_targets=MetaData.parse_doc_targets(row.get("doc_targets")),
            yanked=bool(row["yanked"]),
            rustdoc_css_file=get_correct_docsrs_style_file(row["doc_rustc_version"]),
        )

        build_status = bool(row["build_status"])
        return cls(
            name=row["name"],
            version=version,
            description=row.get("description"),
            owners=[(login, avatar) for login, avatar in owners],
            dependencies=row.get("dependencies"),
            readme=row.get("readme"),
            rustdoc=row.get("description_long"),
            release_time=row["release_time"],
            build_status=build_status,
            last_successful_build=last_successful_build(releases, build_status),
            rustdoc_status=bool(row["rustdoc_status"]),
            archive_storage=bool(row["archive_storage"]),
            repository_url=row.get("repository_url"),
            homepage_url=row.get("homepage_url"),
            keywords=row.get("keywords"),
            have_examples=bool(row["have_examples"]),
            target_name=row["target_name"],
            releases=releases,
            repository_metadata=repository_metadata,
            metadata=metadata,
            is_library=bool(row["is_library"]),
            license=row.get("license"),
            documentation_url=row.get("documentation_url"),
            total_items=_as_float(row.get("total_items")),
            documented_items=_as_float(row.get("documented_items")),
            total_items_needing_examples=_as_float(row.get("total_items_needing_examples")),
            items_with_examples=_as_float(row.get("items_with_examples")),
            crate_id=row["crate_id"],
            release_id=row["release_id"],
        )

    def latest_release(self) -> Release:
        """Newest non-yanked, non-prerelease release, or the newest of all."""
        return latest_release(self.releases)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready dictionary; readme and rustdoc text are rendered to HTML."""
        return {
            "name": self.name,
            "version": self.version,
            "description": self.description,
            "owners": [[login, avatar] for login, avatar in self.owners],
            "dependencies": self.dependencies,
            "readme": None if self.readme is None else render_markdown(self.readme),
            "rustdoc": None if self.rustdoc is None else render_markdown(self.rustdoc),
            "release_time": _timestamp(self.release_time),
            "build_status": self.build_status,
            "last_successful_build": self.last_successful_build,
            "rustdoc_status": self.rustdoc_status,
            "archive_storage": self.archive_storage,
            "repository_url": self.repository_url,
            "homepage_url": self.homepage_url,
            "keywords": self.keywords,
            "have_examples": self.have_examples,
            "target_name": self.target_name,
            "releases": [_release_dict(release) for release in self.releases],
            "repository_metadata": (
                None
                if self.repository_metadata is None
                else asdict(self.repository_metadata)
            ),
            "metadata": self.metadata.to_dict(),
            "is_library": self.is_library,
            "license": self.license,
            "documentation_url": self.documentation_url,
            "total_items": self.total_items,
            "documented_items": self.documented_items,
            "total_items_needing_examples": self.total_items_needing_examples,
            "items_with_examples": self.items_with_examples,
            "crate_id": self.crate_id,
            "release_id": self.release_id,
        }