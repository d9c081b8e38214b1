"""Type definitions for IUP element metadata and code generation."""

from dataclasses import dataclass, field
from enum import StrEnum

from dataclasses_json import DataClassJsonMixin


class DataType(StrEnum):
    """Primitive shape of an attribute value or callback argument."""

    VOID = "Void"
    INT = "Int"
    REF_INT = "RefInt"
    BOOLEAN = "Boolean"
    FLOAT = "Float"
    DOUBLE = "Double"
    CHAR = "Char"
    STRING = "String"
    HANDLE = "Handle"
    VOID_PTR = "VoidPtr"
    CANVAS = "Canvas"
    UNKNOWN = "Unknown"


class DataFormat(StrEnum):
    """How a structured value is encoded into the attribute string."""

    BINARY = "Binary"
    SIZE = "Size"
    MARGIN = "Margin"
    LIN_COL_POS = "LinColPosCommaSeparated"
    XY_POS_COMMA = "XYPosCommaSeparated"
    XY_POS_COLON = "XYPosColonSeparated"
    RANGE = "RangeCommaSeparated"
    DIALOG_SIZE = "DialogSize"
    DATE = "Date"
    RGB = "Rgb"
    FLOAT_RANGE = "FloatRangeCommaSeparated"
    ALIGNMENT = "Alignment"
    RECT = "Rect"
    SELECTION = "Selection"
    MDI_ACTIVATE = "MdiActivate"
    ENUM = "Enum"


class NumberedAttribute(StrEnum):
    """Number of integer ids addressing the attribute."""

    NO = "No"
    ONE_ID = "OneID"
    TWO_IDS = "TwoIDs"


class NativeType(StrEnum):
    """Native kind of an IUP element."""

    VOID = "Void"
    CONTROL = "Control"
    CANVAS = "Canvas"
    DIALOG = "Dialog"
    IMAGE = "Image"
    MENU = "Menu"
    OTHER = "Other"


@dataclass(frozen=True)
class EnumValue(DataClassJsonMixin):
    """Represents a single value of an enumerated attribute."""

    name: str
    str_value: str
    int_value: int | None = None


@dataclass(frozen=True)
class HandleInfo(DataClassJsonMixin):
    """Target of a handle-typed attribute.

    - element_name set: the handle always points to that element type
    - element_name None: any element, checked against native_type when given
    """

    element_name: str | None = None
    native_type: NativeType | None = None


@dataclass(frozen=True)
class Attribute(DataClassJsonMixin):
    """Represents one bindable attribute of an element.

    name is used for generated symbols, attribute_name is the key understood
    by IUP.
    """

    name: str
    attribute_name: str
    data_type: DataType
    data_format: DataFormat = DataFormat.BINARY
    numbered: NumberedAttribute = NumberedAttribute.NO
    read_only: bool = False
    write_only: bool = False
    creation_only: bool = False
    deprecated: bool = False
    enum_values: list[EnumValue] | None = None
    handle: HandleInfo | None = None
    documentation: str | None = None


@dataclass(frozen=True)
class Callback(DataClassJsonMixin):
    """Represents a callback an element can raise."""

    name: str
    attribute_name: str
    arguments: list[DataType] = field(default_factory=list)
    return_type: DataType = DataType.VOID
    documentation: str | None = None


@dataclass(frozen=True)
class AttributeGroup(DataClassJsonMixin):
    """A named set of attributes shared by several elements."""

    name: str
    attributes: list[Attribute] = field(default_factory=list)
    bases: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ClassDescriptor(DataClassJsonMixin):
    """Represents a complete element definition.

    children_count of 0 means the element cannot contain children; any other
    value (including -1 for unlimited) allows it.
    """

    name: str
    class_name: str
    native_type: NativeType
    attributes: list[Attribute] = field(default_factory=list)
    callbacks: list[Callback] = field(default_factory=list)
    children_count: int = 0
    bases: list[str] = field(default_factory=list)
    documentation: str | None = None


@dataclass(frozen=True)
class Catalog(DataClassJsonMixin):
    """Represents a loaded metadata catalog."""

    groups: list[AttributeGroup] = field(default_factory=list)
    classes: list[ClassDescriptor] = field(default_factory=list)
