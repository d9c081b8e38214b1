"""Metadata catalog loading and validation."""

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path

from .types import Attribute, AttributeGroup, Catalog, ClassDescriptor, DataFormat

logger = logging.getLogger(__name__)


class ValidationError(RuntimeError):
    """Raised when metadata validation fails."""


class CatalogError(ValidationError):
    """Raised when a catalog is malformed."""


def _validate_attribute(owner: str, attribute: Attribute) -> None:
    where = f"{owner}.{attribute.name}"
    has_values = bool(attribute.enum_values)

    if attribute.data_format == DataFormat.ENUM and not has_values:
        raise CatalogError(f"{where} has Enum format but no enum values")
    if has_values and attribute.data_format != DataFormat.ENUM:
        raise CatalogError(f"{where} has enum values but format {attribute.data_format}")
    if attribute.read_only and attribute.write_only:
        raise CatalogError(f"{where} cannot be both read-only and write-only")


def validate(catalog: Catalog) -> None:
    """Validate a loaded catalog."""
    groups = {group.name: group for group in catalog.groups}
    if len(groups) != len(catalog.groups):
        raise CatalogError("Duplicate attribute group name")

    seen: set[str] = set()
    for descriptor in catalog.classes:
        if descriptor.name in seen:
            raise CatalogError(f"Element {descriptor.name} declared more than once")
        seen.add(descriptor.name)

    for group in catalog.groups:
        for attribute in group.attributes:
            _validate_attribute(group.name, attribute)
        for base in group.bases:
            if base not in groups:
                raise CatalogError(f"Group {group.name} inherits unknown group {base}")

    for descriptor in catalog.classes:
        for attribute in descriptor.attributes:
            _validate_attribute(descriptor.name, attribute)
        for base in descriptor.bases:
            if base not in groups:
                raise CatalogError(f"Element {descriptor.name} inherits unknown group {base}")

    # Walking every group and class rejects inheritance cycles
    for group in catalog.groups:
        list(_walk_bases(groups, group.bases, (group.name,)))
    for descriptor in catalog.classes:
        resolve_parent_attributes(catalog, descriptor)


def _walk_bases(
    groups: dict[str, AttributeGroup], bases: list[str], path: tuple[str, ...]
) -> Iterator[Attribute]:
    for base in bases:
        if base in path:
            cycle = " -> ".join([*path, base])
            raise CatalogError(f"Inheritance cycle: {cycle}")
        group = groups.get(base)
        if group is None:
            raise CatalogError(f"Unknown attribute group {base}")
        yield from group.attributes
        yield from _walk_bases(groups, group.bases, (*path, base))


def resolve_parent_attributes(catalog: Catalog, descriptor: ClassDescriptor) -> list[Attribute]:
    """Return the inherited attributes of an element, nearest group first.

    Bases are walked depth-first in declaration order. The result may contain
    repeated names; merge_attributes() decides which one wins.
    """
    groups = {group.name: group for group in catalog.groups}
    return list(_walk_bases(groups, descriptor.bases, ()))


def merge_attributes(own: Iterable[Attribute], parents: Iterable[Attribute]) -> list[Attribute]:
    """Union own and parent attributes, keeping the first occurrence of each name."""
    merged: dict[str, Attribute] = {}
    for attribute in (*own, *parents):
        if attribute.name not in merged:
            merged[attribute.name] = attribute
        else:
            logger.debug("Skipping duplicate attribute %s", attribute.name)
    return list(merged.values())


def load(text: str) -> Catalog:
    """Parse and validate a JSON metadata catalog."""
    try:
        catalog = Catalog.from_json(text)
        validate(catalog)
    except (KeyError, ValueError, TypeError, AttributeError) as e:
        raise CatalogError(f"Malformed catalog: {e}") from e
    logger.debug(
        "Loaded catalog with %d groups and %d elements",
        len(catalog.groups),
        len(catalog.classes),
    )
    return catalog


def load_file(path: str | Path) -> Catalog:
    """Load a JSON metadata catalog from disk."""
    try:
        with open(path, encoding="utf-8") as f:
            text = f.read()
    except UnicodeDecodeError as e:
        raise CatalogError(f"Malformed catalog: {e}") from e
    return load(text)
