"""Zig code generator for IUP elements."""

import logging
from collections.abc import Callable
from dataclasses import asdict, dataclass

from jinja2 import Environment, PackageLoader

from .catalog import merge_attributes
from .dispatch import (
    DispatchError,
    HandleKind,
    Rule,
    classify,
    handle_kind,
    has_getter,
    has_setter,
    separator,
    setter_name,
)
from .docs import zig_doc
from .smoke import tests_block
from .traits import body_traits, initializer_traits
from .types import (
    Attribute,
    Callback,
    ClassDescriptor,
    DataType,
    EnumValue,
    NumberedAttribute,
)

logger = logging.getLogger(__name__)

env = Environment(
    loader=PackageLoader("iupgen.generator", "templates"),
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
    line_comment_prefix="%%",
    line_statement_prefix="%",
)

template = env.get_template("element.zig.j2")

ZIG_TYPE_MAP = {
    DataType.VOID: "void",
    DataType.INT: "i32",
    DataType.REF_INT: "*i32",
    DataType.BOOLEAN: "bool",
    DataType.FLOAT: "f32",
    DataType.DOUBLE: "f64",
    DataType.CHAR: "u8",
    DataType.STRING: "[:0]const u8",
    DataType.HANDLE: "iup.Element",
    DataType.VOID_PTR: "*iup.Unknow",
    DataType.CANVAS: "*iup.Canvas",
}

# (extra parameters, key arguments) per numbered kind
ID_PARAMS = {
    NumberedAttribute.NO: ("", ", .{}"),
    NumberedAttribute.ONE_ID: (", index: i32", ", .{ index }"),
    NumberedAttribute.TWO_IDS: (", index_lin: i32, index_col: i32", ", .{ index_lin, index_col }"),
}


def _map_type(data_type: DataType, owner: str) -> str:
    try:
        return ZIG_TYPE_MAP[data_type]
    except KeyError:
        raise DispatchError(f"No Zig type for {data_type} in callback {owner}") from None


def _unique_values(attribute: Attribute) -> list[EnumValue]:
    """Enum values in declaration order, first occurrence of each name."""
    values: dict[str, EnumValue] = {}
    for value in attribute.enum_values or []:
        values.setdefault(value.name, value)
    return list(values.values())


def _block(header: str, body: list[str]) -> str:
    lines = [f"{header} {{"]
    lines.extend(f"    {line}" if line else "" for line in body)
    lines.append("}")
    return "\n".join(lines)


@dataclass(frozen=True)
class _Setter:
    """Naming context for one setter declaration."""

    attribute: Attribute
    initializer: bool

    @property
    def name(self) -> str:
        return setter_name(self.attribute)

    @property
    def target(self) -> str:
        return "self.ref" if self.initializer else "self"

    @property
    def key(self) -> str:
        return f'"{self.attribute.attribute_name}"{ID_PARAMS[self.attribute.numbered][1]}'

    def fn(
        self,
        params: str,
        body: list[str],
        *,
        name: str | None = None,
        generic: bool = False,
        fallible: bool = False,
    ) -> str:
        receiver = "*Initializer" if self.initializer else "*Self"
        result = "Initializer" if self.initializer else "void"
        if fallible:
            result = f"!{result}"
        type_param = ", comptime T: type" if generic else ""
        ids = ID_PARAMS[self.attribute.numbered][0]
        header = f"pub fn {name or self.name}(self: {receiver}{type_param}{ids}{params}) {result}"

        if self.initializer:
            body = ["if (self.last_error) |_| return self.*;", *body, "return self.*;"]
        return _block(header, body)

    def set_str(self, value: str) -> str:
        return f"interop.setStrAttribute({self.target}, {self.key}, {value});"


def _scalar_setter(zig_type: str, function: str) -> Callable[[_Setter], str]:
    def emit(ctx: _Setter) -> str:
        return ctx.fn(f", arg: {zig_type}", [f"interop.{function}({ctx.target}, {ctx.key}, arg);"])

    return emit


def _encoded_setter(params: str, *encode: str) -> Callable[[_Setter], str]:
    """Setter that renders its arguments into a stack buffer named value."""

    def emit(ctx: _Setter) -> str:
        sep = separator(ctx.attribute) if "{sep}" in "".join(encode) else ""
        lines = ["var buffer: [128]u8 = undefined;"]
        lines.extend(line.format(sep=sep) for line in encode)
        lines.append(ctx.set_str("value"))
        return ctx.fn(params, lines)

    return emit


def _set_pointer(ctx: _Setter) -> str:
    return ctx.fn(
        ", arg: ?*T",
        [f"interop.setPtrAttribute(T, {ctx.target}, {ctx.key}, arg);"],
        generic=True,
    )


def _set_handle(ctx: _Setter) -> str:
    handle = ctx.attribute.handle
    assign = f"interop.setHandleAttribute({ctx.target}, {ctx.key}, arg);"
    kind = handle_kind(ctx.attribute)

    if kind == HandleKind.KNOWN:
        setter = ctx.fn(f", arg: *iup.{handle.element_name}", [assign])
    elif kind == HandleKind.VALIDATED and ctx.initializer:
        setter = ctx.fn(
            ", arg: anytype",
            [
                f"if (interop.validateHandle(.{handle.native_type}, arg)) {{",
                f"    {assign}",
                "} else |err| {",
                "    self.last_error = err;",
                "}",
            ],
        )
    elif kind == HandleKind.VALIDATED:
        setter = ctx.fn(
            ", arg: anytype",
            [f"try interop.validateHandle(.{handle.native_type}, arg);", assign],
            fallible=True,
        )
    else:
        setter = ctx.fn(", arg: anytype", [assign])

    by_name = ctx.fn(", arg: [:0]const u8", [ctx.set_str("arg")], name=f"{ctx.name}HandleName")
    return f"{setter}\n\n{by_name}"


def _set_void(ctx: _Setter) -> str:
    return ctx.fn("", [ctx.set_str("null")])


def _set_date(ctx: _Setter) -> str:
    return ctx.fn(
        ", year: u16, month: u8, day: u8",
        [
            "var buffer: [128]u8 = undefined;",
            "var value = Date{ .year = year, .month = month, .day = day };",
            ctx.set_str("value.toString(&buffer)"),
        ],
    )


def _set_rgb(ctx: _Setter) -> str:
    return ctx.fn(", rgb: iup.Rgb", [f"interop.setRgb({ctx.target}, {ctx.key}, rgb);"])


def _set_enum_int(ctx: _Setter) -> str:
    return ctx.fn(
        f", arg: ?{ctx.attribute.name}",
        [
            "if (arg) |value| {",
            f"    interop.setIntAttribute({ctx.target}, {ctx.key}, @enumToInt(value));",
            "} else {",
            f"    interop.clearAttribute({ctx.target}, {ctx.key});",
            "}",
        ],
    )


def _set_enum_string(ctx: _Setter) -> str:
    branches = [
        f'    .{value.name} => interop.setStrAttribute({ctx.target}, {ctx.key}, "{value.str_value}"),'
        for value in _unique_values(ctx.attribute)
    ]
    return ctx.fn(
        f", arg: ?{ctx.attribute.name}",
        [
            "if (arg) |value| switch (value) {",
            *branches,
            "} else {",
            f"    interop.clearAttribute({ctx.target}, {ctx.key});",
            "}",
        ],
    )


def _nothing(_ctx: object) -> str:
    return ""


SETTERS: dict[Rule, Callable[[_Setter], str]] = {
    Rule.INT: _scalar_setter("i32", "setIntAttribute"),
    Rule.STRING: _scalar_setter("[:0]const u8", "setStrAttribute"),
    Rule.BOOLEAN: _scalar_setter("bool", "setBoolAttribute"),
    Rule.FLOAT: _scalar_setter("f32", "setFloatAttribute"),
    Rule.DOUBLE: _scalar_setter("f64", "setDoubleAttribute"),
    Rule.POINTER: _set_pointer,
    Rule.HANDLE: _set_handle,
    Rule.VOID: _set_void,
    Rule.SIZE: _encoded_setter(
        ", width: ?i32, height: ?i32",
        "var value = Size.intIntToString(&buffer, width, height);",
    ),
    Rule.MARGIN: _encoded_setter(
        ", horiz: i32, vert: i32",
        "var value = Margin.intIntToString(&buffer, horiz, vert);",
    ),
    Rule.LIN_COL_POS: _encoded_setter(
        ", lin: i32, col: i32",
        "var value = iup.LinColPos.intIntToString(&buffer, lin, col, '{sep}');",
    ),
    Rule.XY_POS: _encoded_setter(
        ", x: i32, y: i32",
        "var value = iup.XYPos.intIntToString(&buffer, x, y, '{sep}');",
    ),
    Rule.RANGE: _encoded_setter(
        ", begin: i32, end: i32",
        "var value = iup.Range.intIntToString(&buffer, begin, end, '{sep}');",
    ),
    Rule.DIALOG_SIZE: _encoded_setter(
        ", width: ?iup.ScreenSize, height: ?iup.ScreenSize",
        "var value = iup.DialogSize.screenSizeToString(&buffer, width, height);",
    ),
    Rule.DATE: _set_date,
    Rule.RGB: _set_rgb,
    Rule.ENUM_INT: _set_enum_int,
    Rule.ENUM_STRING: _set_enum_string,
    Rule.UNSUPPORTED: _nothing,
}


def _getter(attribute: Attribute, result: str, body: list[str], *, generic: bool = False) -> str:
    type_param = ", comptime T: type" if generic else ""
    ids = ID_PARAMS[attribute.numbered][0]
    return _block(f"pub fn get{attribute.name}(self: *Self{type_param}{ids}) {result}", body)


def _key(attribute: Attribute) -> str:
    return f'"{attribute.attribute_name}"{ID_PARAMS[attribute.numbered][1]}'


def _scalar_getter(zig_type: str, function: str) -> Callable[[Attribute], str]:
    def emit(attribute: Attribute) -> str:
        return _getter(attribute, zig_type, [f"return interop.{function}(self, {_key(attribute)});"])

    return emit


def _parsed_getter(result: str, parse: str) -> Callable[[Attribute], str]:
    """Getter that reads the attribute string and parses it back."""

    def emit(attribute: Attribute) -> str:
        sep = separator(attribute) if "{sep}" in parse else ""
        return _getter(
            attribute,
            result,
            [
                f"var str = interop.getStrAttribute(self, {_key(attribute)});",
                f"return {parse.format(sep=sep)};",
            ],
        )

    return emit


def _get_pointer(attribute: Attribute) -> str:
    return _getter(
        attribute,
        "?*T",
        [f"return interop.getPtrAttribute(T, self, {_key(attribute)});"],
        generic=True,
    )


def _get_handle(attribute: Attribute) -> str:
    if handle_kind(attribute) == HandleKind.KNOWN:
        element = f"iup.{attribute.handle.element_name}"
        result = f"?*{element}"
        wrap = f"return @ptrCast(*{element}, handle);"
    else:
        result = "?iup.Element"
        wrap = "return iup.Element.fromHandle(handle);"

    return _getter(
        attribute,
        result,
        [
            f"if (interop.getHandleAttribute(self, {_key(attribute)})) |handle| {{",
            f"    {wrap}",
            "} else {",
            "    return null;",
            "}",
        ],
    )


def _get_rgb(attribute: Attribute) -> str:
    return _getter(attribute, "?iup.Rgb", [f"return interop.getRgb(self, {_key(attribute)});"])


def _get_enum_int(attribute: Attribute) -> str:
    return _getter(
        attribute,
        attribute.name,
        [
            f"var ret = interop.getIntAttribute(self, {_key(attribute)});",
            f"return @intToEnum({attribute.name}, ret);",
        ],
    )


def _get_enum_string(attribute: Attribute) -> str:
    matches = [
        f'if (std.ascii.eqlIgnoreCase("{value.str_value}", ret)) return .{value.name};'
        for value in _unique_values(attribute)
    ]
    return _getter(
        attribute,
        f"?{attribute.name}",
        [
            f"var ret = interop.getStrAttribute(self, {_key(attribute)});",
            *matches,
            "return null;",
        ],
    )


GETTERS: dict[Rule, Callable[[Attribute], str]] = {
    Rule.INT: _scalar_getter("i32", "getIntAttribute"),
    Rule.STRING: _scalar_getter("[:0]const u8", "getStrAttribute"),
    Rule.BOOLEAN: _scalar_getter("bool", "getBoolAttribute"),
    Rule.FLOAT: _scalar_getter("f32", "getFloatAttribute"),
    Rule.DOUBLE: _scalar_getter("f64", "getDoubleAttribute"),
    Rule.POINTER: _get_pointer,
    Rule.HANDLE: _get_handle,
    Rule.VOID: _nothing,
    Rule.SIZE: _parsed_getter("Size", "Size.parse(str)"),
    Rule.MARGIN: _parsed_getter("Margin", "Margin.parse(str)"),
    Rule.LIN_COL_POS: _parsed_getter("iup.LinColPos", "iup.LinColPos.parse(str, '{sep}')"),
    Rule.XY_POS: _parsed_getter("iup.XYPos", "iup.XYPos.parse(str, '{sep}')"),
    Rule.RANGE: _parsed_getter("iup.Range", "iup.Range.parse(str, '{sep}')"),
    Rule.DIALOG_SIZE: _parsed_getter("iup.DialogSize", "iup.DialogSize.parse(str)"),
    Rule.DATE: _parsed_getter("?iup.Date", "iup.Date.parse(str)"),
    Rule.RGB: _get_rgb,
    Rule.ENUM_INT: _get_enum_int,
    Rule.ENUM_STRING: _get_enum_string,
    Rule.UNSUPPORTED: _nothing,
}


def _documented(documentation: str | None, decl: str) -> str:
    if not decl:
        return ""
    return zig_doc(documentation) + decl


def setter(attribute: Attribute, *, initializer: bool) -> str:
    """Return the setter declaration(s) of an attribute, or an empty string."""
    if not has_setter(attribute, initializer=initializer):
        return ""
    decl = SETTERS[classify(attribute)](_Setter(attribute, initializer))
    return _documented(attribute.documentation, decl)


def getter(attribute: Attribute) -> str:
    """Return the getter declaration of an attribute, or an empty string."""
    if not has_getter(attribute):
        return ""
    decl = GETTERS[classify(attribute)](attribute)
    return _documented(attribute.documentation, decl)


def callback_setter(callback: Callback, *, initializer: bool) -> str:
    """Return the setter that registers a callback handler."""
    receiver = "*Initializer" if initializer else "*Self"
    result = "Initializer" if initializer else "void"
    target = "self.ref" if initializer else "self"
    fn_type = f"On{callback.name}Fn"

    body = [
        f'const Handler = CallbackHandler(Self, {fn_type}, "{callback.attribute_name}");',
        f"Handler.setCallback({target}, callback);",
    ]
    if initializer:
        body = ["if (self.last_error) |_| return self.*;", *body, "return self.*;"]

    decl = _block(
        f"pub fn set{callback.name}Callback(self: {receiver}, callback: ?{fn_type}) {result}",
        body,
    )
    return _documented(callback.documentation, decl)


def enums_decl(attributes: list[Attribute]) -> str:
    """Declare one enum type per enumerated attribute."""
    decls: list[str] = []
    for attribute in attributes:
        if not attribute.enum_values:
            continue

        is_int = attribute.data_type == DataType.INT
        members = []
        for value in _unique_values(attribute):
            literal = f" = {value.int_value}" if is_int and value.int_value is not None else ""
            members.append(f"{value.name}{literal},")

        decl = _block(f"pub const {attribute.name} = enum{'(i32)' if is_int else ''}", members)
        decls.append(zig_doc(attribute.documentation) + decl + ";")
    return "\n\n".join(decls)


def callbacks_decl(callbacks: list[Callback]) -> str:
    """Declare one function type per callback."""
    decls: list[str] = []
    for callback in callbacks:
        args = "".join(
            f", arg{i}: {_map_type(arg, callback.name)}" for i, arg in enumerate(callback.arguments)
        )
        ret = _map_type(callback.return_type, callback.name)
        decls.append(
            zig_doc(callback.documentation)
            + f"pub const On{callback.name}Fn = fn (self: *Self{args}) anyerror!{ret};"
        )
    return "\n\n".join(decls)


def _join(decls: list[str]) -> str:
    return "\n\n".join(decl for decl in decls if decl)


def initializer_block(attributes: list[Attribute], callbacks: list[Callback]) -> str:
    """Chained setters available on the Initializer."""
    decls = [setter(a, initializer=True) for a in attributes if not a.deprecated]
    decls.extend(callback_setter(c, initializer=True) for c in callbacks)
    return _join(decls)


def body_block(attributes: list[Attribute], callbacks: list[Callback]) -> str:
    """Getters and setters available on a live element."""
    decls: list[str] = []
    for attribute in attributes:
        if attribute.deprecated:
            continue
        decls.append(getter(attribute))
        decls.append(setter(attribute, initializer=False))
    decls.extend(callback_setter(c, initializer=False) for c in callbacks)
    return _join(decls)


@dataclass(frozen=True)
class ElementFragments:
    """Named fragments substituted into the element template."""

    element_documentation: str
    enums_decl: str
    callbacks_decl: str
    initializer_block: str
    body_block: str
    body_traits: str
    initializer_traits: str
    tests_block: str


def fragments(descriptor: ClassDescriptor, parent_attributes: list[Attribute]) -> ElementFragments:
    """Build every fragment of an element, in assembly order.

    Raises:
        DispatchError: when an attribute or callback has no rule.
    """
    attributes = merge_attributes(descriptor.attributes, parent_attributes)
    logger.debug("Generating %s with %d attributes", descriptor.name, len(attributes))

    return ElementFragments(
        element_documentation=zig_doc(descriptor.documentation),
        enums_decl=enums_decl(attributes),
        callbacks_decl=callbacks_decl(descriptor.callbacks),
        initializer_block=initializer_block(attributes, descriptor.callbacks),
        body_block=body_block(attributes, descriptor.callbacks),
        body_traits=body_traits(descriptor),
        initializer_traits=initializer_traits(descriptor),
        tests_block=tests_block(descriptor),
    )


def render(descriptor: ClassDescriptor, parent_attributes: list[Attribute]) -> str:
    """Render one element to Zig source code.

    Args:
        descriptor: The element to generate.
        parent_attributes: Inherited attributes, nearest ancestor first.
                           Own attributes win over parent ones with the same name.
    """
    return template.render(
        name=descriptor.name,
        class_name=descriptor.class_name,
        native_type=descriptor.native_type.value,
        **asdict(fragments(descriptor, parent_attributes)),
    )
