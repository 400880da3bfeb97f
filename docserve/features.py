"""Ordering of a crate's feature flags for display."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass, field

DEFAULT_NAME = "default"


@dataclass
class Feature:
    """A feature flag and the features it enables."""

    name: str
    subfeatures: list[str] = field(default_factory=list)
    optional_dependency: bool = False

    def is_private(self) -> bool:
        """Features whose names start with an underscore are hidden."""
        return self.name.startswith("_")


def get_feature_map(raw: Iterable[Feature]) -> dict[str, Feature]:
    """Map public features by name."""
    return {feature.name: feature for feature in raw if not feature.is_private()}


def get_tree_structure_from_default(feature_map: dict[str, Feature]) -> list[Feature]:
    """Remove and return the default feature and everything it enables, breadth first."""
    features = []
    queue = deque([DEFAULT_NAME])
    while queue:
        feature = feature_map.pop(queue.popleft(), None)
        if feature is not None:
            queue.extend(feature.subfeatures)
            features.append(feature)
    return features


def order_features_and_count_default_len(
    raw: Iterable[Feature],
) -> tuple[list[Feature], int]:
    """Order default features first, then the rest by descending number of subfeatures.

    Returns the ordered features and how many of them belong to the default tree.
    """
    feature_map = get_feature_map(raw)
    features = get_tree_structure_from_default(feature_map)
    default_len = len(features)
    remaining = sorted(feature_map.values(), key=lambda f: len(f.subfeatures))
    features.extend(reversed(remaining))
    return features, default_len