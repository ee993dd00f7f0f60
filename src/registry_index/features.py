"""Feature table merger.

Unifies the legacy ``features`` map and the extended ``features2`` map into
one ordered ``FeatureTable`` and checks that every activator pointing at a
dependency names one the record declares.
"""

from __future__ import annotations

from typing import AbstractSet, Any, Dict, List, Mapping, Optional

from .errors import DanglingFeatureDependency, InvalidFeatureValue
from .models import (
    DependencyActivator,
    DependencyFeature,
    FeatureRef,
    FeatureTable,
    FeatureValue,
)
from .schema_gate import SchemaGate
from .validation import check_shape

DEP_PREFIX = "dep:"
WEAK_SEPARATOR = "?/"
SEPARATOR = "/"


def classify_feature_value(value: str) -> FeatureValue:
    """Classify a feature value string by shape.

    Raises:
        InvalidFeatureValue: For empty names on either side of an activator.
    """
    if value.startswith(DEP_PREFIX):
        dependency = value[len(DEP_PREFIX):]
        if not dependency or SEPARATOR in dependency:
            raise InvalidFeatureValue("Invalid 'dep:' activator", value=value)
        return DependencyActivator(dependency)
    if SEPARATOR in value:
        dependency, feature = value.split(SEPARATOR, 1)
        weak = dependency.endswith("?")
        if weak:
            dependency = dependency[:-1]
        if not dependency or not feature or SEPARATOR in feature:
            raise InvalidFeatureValue("Invalid dependency feature activator", value=value)
        return DependencyFeature(dependency, feature, weak=weak)
    if not value:
        raise InvalidFeatureValue("Empty feature value", value=value)
    return FeatureRef(value)


def _check_values(feature: str, values: List[str], dependency_names: AbstractSet[str]) -> None:
    for i, value in enumerate(values):
        path = f"features.{feature}[{i}]"
        try:
            parsed = classify_feature_value(value)
        except InvalidFeatureValue as e:
            e.field = path
            raise
        if isinstance(parsed, FeatureRef):
            continue
        if parsed.dependency not in dependency_names:
            raise DanglingFeatureDependency(
                f"Feature '{feature}' references unknown dependency '{parsed.dependency}'",
                field=path,
                value=value,
                feature=feature,
                dependency=parsed.dependency,
            )


def merge_features(
    features: Optional[Mapping[str, Any]],
    features2: Optional[Mapping[str, Any]],
    gate: SchemaGate,
    dependency_names: AbstractSet[str],
) -> FeatureTable:
    """Merge ``features`` and ``features2`` into one validated table.

    ``features2`` is only consulted when the gate allows namespaced
    features; below that it is ignored without inspection. Shared keys get
    ``features[k] + features2[k]``; duplicates are kept.

    Raises:
        TypeMismatch: ``features2`` has the wrong shape.
        InvalidFeatureValue: A value is structurally invalid.
        DanglingFeatureDependency: A value names an undeclared dependency.
    """
    merged: Dict[str, List[str]] = {key: list(values) for key, values in (features or {}).items()}

    if features2 is not None and gate.allow_namespaced_features:
        check_shape("feature_map", features2, prefix="features2")
        for key, values in features2.items():
            merged.setdefault(key, []).extend(values)

    for key, values in merged.items():
        _check_values(key, values, dependency_names)

    return FeatureTable(merged)
