"""Attribute classification for accessor generation.

Every attribute is classified by its (format, type) pair into exactly one
Rule. Target emitters keep one table entry per Rule, so deciding *whether*
an accessor exists lives here and deciding *how* it is written lives in the
emitter.
"""

from dataclasses import dataclass
from enum import StrEnum, auto

from .catalog import merge_attributes
from .types import Attribute, ClassDescriptor, DataFormat, DataType
from .util import to_camel_case


class DispatchError(RuntimeError):
    """Raised when metadata presents a combination no rule covers."""


class Rule(StrEnum):
    """Code-emission rule for one attribute."""

    INT = auto()
    STRING = auto()
    BOOLEAN = auto()
    FLOAT = auto()
    DOUBLE = auto()
    POINTER = auto()
    HANDLE = auto()
    VOID = auto()
    SIZE = auto()
    MARGIN = auto()
    LIN_COL_POS = auto()
    XY_POS = auto()
    RANGE = auto()
    DIALOG_SIZE = auto()
    DATE = auto()
    RGB = auto()
    ENUM_INT = auto()
    ENUM_STRING = auto()
    UNSUPPORTED = auto()  # Known combination with no encoding, emits nothing


class HandleKind(StrEnum):
    """Shape of a handle-typed attribute."""

    KNOWN = auto()  # Target element type known, typed reference
    VALIDATED = auto()  # Any element, checked against a native type
    OPEN = auto()  # Any element, unchecked


RULES: dict[tuple[DataFormat, DataType], Rule] = {
    (DataFormat.BINARY, DataType.INT): Rule.INT,
    (DataFormat.BINARY, DataType.STRING): Rule.STRING,
    (DataFormat.BINARY, DataType.BOOLEAN): Rule.BOOLEAN,
    (DataFormat.BINARY, DataType.FLOAT): Rule.FLOAT,
    (DataFormat.BINARY, DataType.DOUBLE): Rule.DOUBLE,
    (DataFormat.BINARY, DataType.VOID_PTR): Rule.POINTER,
    (DataFormat.BINARY, DataType.HANDLE): Rule.HANDLE,
    (DataFormat.BINARY, DataType.VOID): Rule.VOID,
    (DataFormat.SIZE, DataType.STRING): Rule.SIZE,
    (DataFormat.MARGIN, DataType.STRING): Rule.MARGIN,
    (DataFormat.LIN_COL_POS, DataType.STRING): Rule.LIN_COL_POS,
    (DataFormat.XY_POS_COMMA, DataType.STRING): Rule.XY_POS,
    (DataFormat.XY_POS_COLON, DataType.STRING): Rule.XY_POS,
    (DataFormat.RANGE, DataType.STRING): Rule.RANGE,
    (DataFormat.DIALOG_SIZE, DataType.STRING): Rule.DIALOG_SIZE,
    (DataFormat.DATE, DataType.STRING): Rule.DATE,
    (DataFormat.RGB, DataType.STRING): Rule.RGB,
    (DataFormat.FLOAT_RANGE, DataType.STRING): Rule.UNSUPPORTED,
    (DataFormat.ALIGNMENT, DataType.STRING): Rule.UNSUPPORTED,
    (DataFormat.RECT, DataType.STRING): Rule.UNSUPPORTED,
    (DataFormat.SELECTION, DataType.STRING): Rule.UNSUPPORTED,
    (DataFormat.MDI_ACTIVATE, DataType.STRING): Rule.UNSUPPORTED,
    (DataFormat.ENUM, DataType.INT): Rule.ENUM_INT,
    (DataFormat.ENUM, DataType.STRING): Rule.ENUM_STRING,
}

# Types with no encoding in any format
UNSUPPORTED_TYPES = frozenset([DataType.UNKNOWN, DataType.HANDLE])

# Separator used when encoding two-component positions
SEPARATORS: dict[DataFormat, str] = {
    DataFormat.LIN_COL_POS: ",",
    DataFormat.XY_POS_COMMA: ",",
    DataFormat.XY_POS_COLON: ":",
    DataFormat.RANGE: ",",
}

# Rules with a representative value for round-trip tests
TESTABLE_RULES = frozenset(
    [
        Rule.INT,
        Rule.STRING,
        Rule.BOOLEAN,
        Rule.FLOAT,
        Rule.DOUBLE,
        Rule.SIZE,
        Rule.MARGIN,
        Rule.LIN_COL_POS,
        Rule.XY_POS,
        Rule.RANGE,
        Rule.RGB,
        Rule.ENUM_INT,
        Rule.ENUM_STRING,
    ]
)

# Most operations on these segfault without native setup
UNTESTED_CLASSES = frozenset(["image", "imagergb", "imagergba", "param", "parambox"])


def classify(attribute: Attribute) -> Rule:
    """Return the emission rule for an attribute.

    Raises:
        DispatchError: when the (format, type) pair has no rule.
    """
    rule = RULES.get((attribute.data_format, attribute.data_type))
    if rule is not None:
        return rule
    if attribute.data_type in UNSUPPORTED_TYPES:
        return Rule.UNSUPPORTED
    raise DispatchError(
        f"No rule for attribute {attribute.name}: "
        f"format {attribute.data_format}, type {attribute.data_type}"
    )


def handle_kind(attribute: Attribute) -> HandleKind:
    """Tag a handle-typed attribute by what is known about its target."""
    handle = attribute.handle
    if handle is not None and handle.element_name is not None:
        return HandleKind.KNOWN
    if handle is not None and handle.native_type is not None:
        return HandleKind.VALIDATED
    return HandleKind.OPEN


def separator(attribute: Attribute) -> str:
    """Return the component separator for a position-like format."""
    try:
        return SEPARATORS[attribute.data_format]
    except KeyError:
        raise DispatchError(
            f"Format {attribute.data_format} of {attribute.name} has no separator"
        ) from None


def setter_name(attribute: Attribute) -> str:
    """Return the external setter name.

    Write-only attributes that can change after creation are actions, so they
    get a bare verb (clearValue) instead of setClearValue.
    """
    if attribute.write_only and not attribute.creation_only:
        return to_camel_case(attribute.name)
    return f"set{attribute.name}"


def has_setter(attribute: Attribute, *, initializer: bool) -> bool:
    """Check whether a setter is generated for the given context."""
    if attribute.creation_only and not initializer:
        return False
    if attribute.read_only:
        return False
    return classify(attribute) != Rule.UNSUPPORTED


def has_getter(attribute: Attribute) -> bool:
    """Check whether a getter is generated."""
    if attribute.creation_only or attribute.write_only:
        return False
    return classify(attribute) not in (Rule.UNSUPPORTED, Rule.VOID)


def has_test(attribute: Attribute) -> bool:
    """Check whether a round-trip test is generated for an attribute."""
    if attribute.creation_only or attribute.read_only or attribute.write_only:
        return False
    if attribute.deprecated:
        return False
    return classify(attribute) in TESTABLE_RULES


def is_testable(descriptor: ClassDescriptor) -> bool:
    """Check whether an element can be exercised without native setup."""
    return descriptor.class_name not in UNTESTED_CLASSES


@dataclass(frozen=True)
class ElementSummary:
    """Accessor coverage for one element."""

    name: str
    attributes: int
    setters: int
    getters: int
    callbacks: int
    tests: int
    unsupported: list[str]


def summarize(descriptor: ClassDescriptor, parent_attributes: list[Attribute]) -> ElementSummary:
    """Count what would be generated for an element.

    Raises:
        DispatchError: when any attribute has no rule.
    """
    attributes = [
        a for a in merge_attributes(descriptor.attributes, parent_attributes) if not a.deprecated
    ]
    tests = 0
    if is_testable(descriptor):
        own = merge_attributes(descriptor.attributes, [])
        tests = sum(1 for a in own if has_test(a))

    return ElementSummary(
        name=descriptor.name,
        attributes=len(attributes),
        setters=sum(1 for a in attributes if has_setter(a, initializer=False)),
        getters=sum(1 for a in attributes if has_getter(a)),
        callbacks=len(descriptor.callbacks),
        tests=tests,
        unsupported=[a.name for a in attributes if classify(a) == Rule.UNSUPPORTED],
    )
