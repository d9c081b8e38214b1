"""Naming helpers for generated symbols."""

import re

_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_WORD_BOUNDARY = re.compile(r"([a-z\d])([A-Z])")
_SEPARATORS = re.compile(r"(?:^|_| +)(.)")


def to_snake_case(name: str) -> str:
    """Convert PascalCase to snake_case (ImageRGBA -> image_rgba)."""
    name = _ACRONYM_BOUNDARY.sub(r"\1_\2", name)
    name = _WORD_BOUNDARY.sub(r"\1_\2", name)
    return re.sub(r"[-\s]", "_", name).lower()


def to_pascal_case(name: str) -> str:
    """Convert snake_case or spaced words to PascalCase."""
    return _SEPARATORS.sub(lambda m: m.group(1).upper(), name)


def to_camel_case(name: str) -> str:
    """Convert a name to lowerCamelCase (ClearValue -> clearValue)."""
    pascal = to_pascal_case(name)
    return pascal[:1].lower() + pascal[1:]
