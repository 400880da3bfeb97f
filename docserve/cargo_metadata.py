"""Reading the root package out of ``cargo metadata`` output."""

from __future__ import annotations

import json
import os
import subprocess
from dataclasses import dataclass, field
from typing import Any


class CargoMetadataError(Exception):
    """Raised when ``cargo metadata`` fails or returns unusable output."""


@dataclass
class Target:
    name: str
    crate_types: list[str]
    src_path: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Target:
        return cls(
            name=data["name"],
            crate_types=list(data["crate_types"]),
            src_path=data.get("src_path"),
        )


@dataclass
class Dependency:
    name: str
    req: str
    kind: str | None
    rename: str | None
    optional: bool

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Dependency:
        return cls(
            name=data["name"],
            req=data["req"],
            kind=data.get("kind"),
            rename=data.get("rename"),
            optional=bool(data["optional"]),
        )


def _normalize_package_name(name: str) -> str:
    return name.replace("-", "_")


@dataclass
class Package:
    id: str = ""
    name: str = ""
    version: str = ""
    license: str | None = None
    repository: str | None = None
    homepage: str | None = None
    description: str | None = None
    documentation: str | None = None
    dependencies: list[Dependency] = field(default_factory=list)
    targets: list[Target] = field(default_factory=list)
    readme: str | None = None
    keywords: list[str] = field(default_factory=list)
    features: dict[str, list[str]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Package:
        return cls(
            id=data["id"],
            name=data["name"],
            version=data["version"],
            license=data.get("license"),
            repository=data.get("repository"),
            homepage=data.get("homepage"),
            description=data.get("description"),
            documentation=data.get("documentation"),
            dependencies=[Dependency.from_dict(dep) for dep in data["dependencies"]],
            targets=[Target.from_dict(target) for target in data["targets"]],
            readme=data.get("readme"),
            keywords=list(data["keywords"]),
            features={name: list(deps) for name, deps in data["features"].items()},
        )

    def library_target(self) -> Target | None:
        """Return the first target that builds anything other than a binary."""
        return next(
            (
                target
                for target in self.targets
                if any(kind != "bin" for kind in target.crate_types)
            ),
            None,
        )

    def is_library(self) -> bool:
        return self.library_target() is not None

    def package_name(self) -> str:
        """Name of the library target, or of the first target if there is none."""
        library = self.library_name()
        if library is not None:
            return library
        return _normalize_package_name(self.targets[0].name)

    def library_name(self) -> str | None:
        target = self.library_target()
        return None if target is None else _normalize_package_name(target.name)


@dataclass
class CargoMetadata:
    root: Package

    @classmethod
    def from_json(cls, text: str) -> CargoMetadata:
        """Build from one document of ``cargo metadata --format-version 1`` output."""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise CargoMetadataError(f"invalid JSON from `cargo metadata`: {exc}") from exc
        try:
            packages = [Package.from_dict(pkg) for pkg in data["packages"]]
            resolve = data["resolve"]
            root_id = resolve["root"]
            for node in resolve["nodes"]:
                node["id"]
                for dep in node["deps"]:
                    dep["pkg"]
        except (KeyError, TypeError, AttributeError) as exc:
            raise CargoMetadataError(
                f"malformed `cargo metadata` output: {exc!r}"
            ) from exc
        if not isinstance(root_id, str):
            raise CargoMetadataError("`cargo metadata` output has no root package")
        root = next((pkg for pkg in packages if pkg.id == root_id), None)
        if root is None:
            raise CargoMetadataError(f"root package {root_id!r} is not among the packages")
        return cls(root=root)

    @classmethod
    def load(cls, source_dir: str | os.PathLike, cargo: str = "cargo") -> CargoMetadata:
        """Run ``cargo metadata`` in ``source_dir`` and read its output."""
        try:
            result = subprocess.run(
                [cargo, "metadata", "--format-version", "1"],
                cwd=source_dir,
                capture_output=True,
                text=True,
                check=True,
            )
        except subprocess.CalledProcessError as exc:
            raise CargoMetadataError(
                f"`cargo metadata` exited with status {exc.returncode}"
            ) from exc
        except OSError as exc:
            raise CargoMetadataError(f"could not run `cargo metadata`: {exc}") from exc

        lines = result.stdout.splitlines()
        if len(lines) != 1:
            raise CargoMetadataError("invalid output returned by `cargo metadata`")
        return cls.from_json(lines[0])