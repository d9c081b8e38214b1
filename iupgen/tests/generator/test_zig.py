"""Tests for Zig code generation."""

import pytest

from iupgen.generator import resolve_parent_attributes
from iupgen.generator.dispatch import DispatchError
from iupgen.generator.types import (
    Attribute,
    Callback,
    ClassDescriptor,
    DataFormat,
    DataType,
    EnumValue,
    HandleInfo,
    NativeType,
    NumberedAttribute,
)
from iupgen.generator.zig import (
    body_block,
    callback_setter,
    callbacks_decl,
    enums_decl,
    getter,
    initializer_block,
    render,
    setter,
)


def _attr(name, data_type=DataType.STRING, data_format=DataFormat.BINARY, **kwargs):
    return Attribute(
        name=name,
        attribute_name=kwargs.pop("attribute_name", name.upper()),
        data_type=data_type,
        data_format=data_format,
        **kwargs,
    )


def _lines(*lines):
    return "\n".join(lines)


def describe_setter():
    def writes_scalar_on_live_element(expect):
        expect(setter(_attr("Spacing", DataType.INT), initializer=False)) == _lines(
            "pub fn setSpacing(self: *Self, arg: i32) void {",
            '    interop.setIntAttribute(self, "SPACING", .{}, arg);',
            "}",
        )

    def chains_on_initializer(expect):
        expect(setter(_attr("Spacing", DataType.INT), initializer=True)) == _lines(
            "pub fn setSpacing(self: *Initializer, arg: i32) Initializer {",
            "    if (self.last_error) |_| return self.*;",
            '    interop.setIntAttribute(self.ref, "SPACING", .{}, arg);',
            "    return self.*;",
            "}",
        )

    def prefixes_documentation(expect):
        attribute = _attr("Title", documentation="Label text.")
        expect(setter(attribute, initializer=False)) == _lines(
            "///",
            "/// Label text.",
            "pub fn setTitle(self: *Self, arg: [:0]const u8) void {",
            '    interop.setStrAttribute(self, "TITLE", .{}, arg);',
            "}",
        )

    def adds_ids_for_numbered_attributes(expect):
        one = _attr("Item", numbered=NumberedAttribute.ONE_ID, attribute_name="")
        expect(setter(one, initializer=False)) == _lines(
            "pub fn setItem(self: *Self, index: i32, arg: [:0]const u8) void {",
            '    interop.setStrAttribute(self, "", .{ index }, arg);',
            "}",
        )

        two = _attr("Cell", numbered=NumberedAttribute.TWO_IDS, attribute_name="")
        expect(setter(two, initializer=False)) == _lines(
            "pub fn setCell(self: *Self, index_lin: i32, index_col: i32, arg: [:0]const u8) void {",
            '    interop.setStrAttribute(self, "", .{ index_lin, index_col }, arg);',
            "}",
        )

    def encodes_size_into_buffer(expect):
        expect(setter(_attr("Padding", data_format=DataFormat.SIZE), initializer=False)) == _lines(
            "pub fn setPadding(self: *Self, width: ?i32, height: ?i32) void {",
            "    var buffer: [128]u8 = undefined;",
            "    var value = Size.intIntToString(&buffer, width, height);",
            '    interop.setStrAttribute(self, "PADDING", .{}, value);',
            "}",
        )

    def uses_format_separator(expect):
        colon = _attr("HotSpot", data_format=DataFormat.XY_POS_COLON)
        expect(
            "iup.XYPos.intIntToString(&buffer, x, y, ':');" in setter(colon, initializer=False)
        ) == True

        caret = _attr("Caret", data_format=DataFormat.LIN_COL_POS)
        expect(
            "iup.LinColPos.intIntToString(&buffer, lin, col, ',');"
            in setter(caret, initializer=False)
        ) == True

    def encodes_margins(expect):
        expect(setter(_attr("Margin", data_format=DataFormat.MARGIN), initializer=False)) == _lines(
            "pub fn setMargin(self: *Self, horiz: i32, vert: i32) void {",
            "    var buffer: [128]u8 = undefined;",
            "    var value = Margin.intIntToString(&buffer, horiz, vert);",
            '    interop.setStrAttribute(self, "MARGIN", .{}, value);',
            "}",
        )

    def encodes_ranges(expect):
        attribute = _attr("Selection", data_format=DataFormat.RANGE)
        expect(setter(attribute, initializer=False)) == _lines(
            "pub fn setSelection(self: *Self, begin: i32, end: i32) void {",
            "    var buffer: [128]u8 = undefined;",
            "    var value = iup.Range.intIntToString(&buffer, begin, end, ',');",
            '    interop.setStrAttribute(self, "SELECTION", .{}, value);',
            "}",
        )

    def encodes_dialog_sizes(expect):
        attribute = _attr("Size", data_format=DataFormat.DIALOG_SIZE)
        expect(setter(attribute, initializer=False)) == _lines(
            "pub fn setSize(self: *Self, width: ?iup.ScreenSize, height: ?iup.ScreenSize) void {",
            "    var buffer: [128]u8 = undefined;",
            "    var value = iup.DialogSize.screenSizeToString(&buffer, width, height);",
            '    interop.setStrAttribute(self, "SIZE", .{}, value);',
            "}",
        )

    def encodes_dates(expect):
        text = setter(_attr("Value", data_format=DataFormat.DATE), initializer=False)
        expect(text.splitlines()[0]) == "pub fn setValue(self: *Self, year: u16, month: u8, day: u8) void {"
        expect("var value = Date{ .year = year, .month = month, .day = day };" in text) == True
        expect('interop.setStrAttribute(self, "VALUE", .{}, value.toString(&buffer));' in text) == True

    def writes_rgb(expect):
        expect(setter(_attr("BgColor", data_format=DataFormat.RGB), initializer=False)) == _lines(
            "pub fn setBgColor(self: *Self, rgb: iup.Rgb) void {",
            '    interop.setRgb(self, "BGCOLOR", .{}, rgb);',
            "}",
        )

    def is_generic_over_pointers(expect):
        expect(setter(_attr("UserData", DataType.VOID_PTR), initializer=False)) == _lines(
            "pub fn setUserData(self: *Self, comptime T: type, arg: ?*T) void {",
            '    interop.setPtrAttribute(T, self, "USERDATA", .{}, arg);',
            "}",
        )

    def names_actions_with_bare_verb(expect):
        attribute = _attr("ClearUndo", DataType.VOID, write_only=True)
        expect(setter(attribute, initializer=False)) == _lines(
            "pub fn clearUndo(self: *Self) void {",
            '    interop.setStrAttribute(self, "CLEARUNDO", .{}, null);',
            "}",
        )

    def keeps_creation_only_on_initializer(expect):
        attribute = _attr("Border", DataType.BOOLEAN, creation_only=True)
        expect(setter(attribute, initializer=False)) == ""
        expect(
            setter(attribute, initializer=True).startswith(
                "pub fn setBorder(self: *Initializer, arg: bool) Initializer {"
            )
        ) == True

    def skips_read_only(expect):
        attribute = _attr("ScreenPosition", data_format=DataFormat.XY_POS_COMMA, read_only=True)
        expect(setter(attribute, initializer=True)) == ""
        expect(setter(attribute, initializer=False)) == ""

    def skips_unsupported(expect):
        expect(setter(_attr("Alignment", data_format=DataFormat.ALIGNMENT), initializer=True)) == ""

    def fails_on_uncovered_pair(expect):
        with pytest.raises(DispatchError):
            setter(_attr("Spacing", DataType.INT, DataFormat.SIZE), initializer=True)


def describe_handle_setter():
    def types_known_elements(expect):
        attribute = _attr("Image", DataType.HANDLE, handle=HandleInfo(element_name="Image"))
        expect(setter(attribute, initializer=False)) == _lines(
            "pub fn setImage(self: *Self, arg: *iup.Image) void {",
            '    interop.setHandleAttribute(self, "IMAGE", .{}, arg);',
            "}",
            "",
            "pub fn setImageHandleName(self: *Self, arg: [:0]const u8) void {",
            '    interop.setStrAttribute(self, "IMAGE", .{}, arg);',
            "}",
        )

    def records_validation_error_on_initializer(expect):
        attribute = _attr(
            "DefaultEnter", DataType.HANDLE, handle=HandleInfo(native_type=NativeType.CONTROL)
        )
        expect(setter(attribute, initializer=True)) == _lines(
            "pub fn setDefaultEnter(self: *Initializer, arg: anytype) Initializer {",
            "    if (self.last_error) |_| return self.*;",
            "    if (interop.validateHandle(.Control, arg)) {",
            '        interop.setHandleAttribute(self.ref, "DEFAULTENTER", .{}, arg);',
            "    } else |err| {",
            "        self.last_error = err;",
            "    }",
            "    return self.*;",
            "}",
            "",
            "pub fn setDefaultEnterHandleName(self: *Initializer, arg: [:0]const u8) Initializer {",
            "    if (self.last_error) |_| return self.*;",
            '    interop.setStrAttribute(self.ref, "DEFAULTENTER", .{}, arg);',
            "    return self.*;",
            "}",
        )

    def propagates_validation_error_on_live_element(expect):
        attribute = _attr(
            "DefaultEnter", DataType.HANDLE, handle=HandleInfo(native_type=NativeType.CONTROL)
        )
        text = setter(attribute, initializer=False)
        expect(text.splitlines()[:3]) == [
            "pub fn setDefaultEnter(self: *Self, arg: anytype) !void {",
            "    try interop.validateHandle(.Control, arg);",
            '    interop.setHandleAttribute(self, "DEFAULTENTER", .{}, arg);',
        ]

    def accepts_any_element_without_info(expect):
        text = setter(_attr("Cursor", DataType.HANDLE), initializer=True)
        expect(text.splitlines()[0]) == (
            "pub fn setCursor(self: *Initializer, arg: anytype) Initializer {"
        )
        expect("validateHandle" in text) == False
        expect("pub fn setCursorHandleName(" in text) == True


def describe_enum_setter():
    def switches_string_values(expect):
        attribute = _attr(
            "ImagePosition",
            data_format=DataFormat.ENUM,
            enum_values=[EnumValue("Left", "LEFT"), EnumValue("Right", "RIGHT")],
        )
        expect(setter(attribute, initializer=False)) == _lines(
            "pub fn setImagePosition(self: *Self, arg: ?ImagePosition) void {",
            "    if (arg) |value| switch (value) {",
            '        .Left => interop.setStrAttribute(self, "IMAGEPOSITION", .{}, "LEFT"),',
            '        .Right => interop.setStrAttribute(self, "IMAGEPOSITION", .{}, "RIGHT"),',
            "    } else {",
            '        interop.clearAttribute(self, "IMAGEPOSITION", .{});',
            "    }",
            "}",
        )

    def converts_int_values(expect):
        attribute = _attr(
            "Placement",
            DataType.INT,
            DataFormat.ENUM,
            enum_values=[EnumValue("Normal", "NORMAL", 0)],
        )
        text = setter(attribute, initializer=False)
        expect('interop.setIntAttribute(self, "PLACEMENT", .{}, @enumToInt(value));' in text) == True
        expect('interop.clearAttribute(self, "PLACEMENT", .{});' in text) == True

    def drops_duplicate_members(expect):
        attribute = _attr(
            "Expand",
            data_format=DataFormat.ENUM,
            enum_values=[EnumValue("Yes", "YES"), EnumValue("Yes", "YES"), EnumValue("No", "NO")],
        )
        expect(setter(attribute, initializer=False).count(".Yes =>")) == 1
        expect(getter(attribute).count("return .Yes;")) == 1


def describe_getter():
    def reads_scalars(expect):
        expect(getter(_attr("Spacing", DataType.INT))) == _lines(
            "pub fn getSpacing(self: *Self) i32 {",
            '    return interop.getIntAttribute(self, "SPACING", .{});',
            "}",
        )

    def takes_ids_for_numbered_attributes(expect):
        attribute = _attr("Item", numbered=NumberedAttribute.ONE_ID, attribute_name="")
        expect(getter(attribute)) == _lines(
            "pub fn getItem(self: *Self, index: i32) [:0]const u8 {",
            '    return interop.getStrAttribute(self, "", .{ index });',
            "}",
        )

    def parses_encoded_strings(expect):
        expect(getter(_attr("Padding", data_format=DataFormat.SIZE))) == _lines(
            "pub fn getPadding(self: *Self) Size {",
            '    var str = interop.getStrAttribute(self, "PADDING", .{});',
            "    return Size.parse(str);",
            "}",
        )

    def parses_margins(expect):
        expect(getter(_attr("Margin", data_format=DataFormat.MARGIN))) == _lines(
            "pub fn getMargin(self: *Self) Margin {",
            '    var str = interop.getStrAttribute(self, "MARGIN", .{});',
            "    return Margin.parse(str);",
            "}",
        )

    def parses_ranges(expect):
        expect(getter(_attr("Selection", data_format=DataFormat.RANGE))) == _lines(
            "pub fn getSelection(self: *Self) iup.Range {",
            '    var str = interop.getStrAttribute(self, "SELECTION", .{});',
            "    return iup.Range.parse(str, ',');",
            "}",
        )

    def parses_line_and_column(expect):
        expect(getter(_attr("Caret", data_format=DataFormat.LIN_COL_POS))) == _lines(
            "pub fn getCaret(self: *Self) iup.LinColPos {",
            '    var str = interop.getStrAttribute(self, "CARET", .{});',
            "    return iup.LinColPos.parse(str, ',');",
            "}",
        )

    def parses_dialog_sizes(expect):
        expect(getter(_attr("Size", data_format=DataFormat.DIALOG_SIZE))) == _lines(
            "pub fn getSize(self: *Self) iup.DialogSize {",
            '    var str = interop.getStrAttribute(self, "SIZE", .{});',
            "    return iup.DialogSize.parse(str);",
            "}",
        )

    def parses_dates_as_optional(expect):
        expect(getter(_attr("Value", data_format=DataFormat.DATE))) == _lines(
            "pub fn getValue(self: *Self) ?iup.Date {",
            '    var str = interop.getStrAttribute(self, "VALUE", .{});',
            "    return iup.Date.parse(str);",
            "}",
        )

    def parses_with_separator(expect):
        text = getter(_attr("HotSpot", data_format=DataFormat.XY_POS_COLON))
        expect(text.splitlines()[0]) == "pub fn getHotSpot(self: *Self) iup.XYPos {"
        expect("return iup.XYPos.parse(str, ':');" in text) == True

    def casts_known_handles(expect):
        attribute = _attr("Image", DataType.HANDLE, handle=HandleInfo(element_name="Image"))
        expect(getter(attribute)) == _lines(
            "pub fn getImage(self: *Self) ?*iup.Image {",
            '    if (interop.getHandleAttribute(self, "IMAGE", .{})) |handle| {',
            "        return @ptrCast(*iup.Image, handle);",
            "    } else {",
            "        return null;",
            "    }",
            "}",
        )

    def wraps_other_handles_as_elements(expect):
        text = getter(_attr("Cursor", DataType.HANDLE))
        expect(text.splitlines()[0]) == "pub fn getCursor(self: *Self) ?iup.Element {"
        expect("return iup.Element.fromHandle(handle);" in text) == True

    def matches_string_enums_ignoring_case(expect):
        attribute = _attr(
            "ImagePosition",
            data_format=DataFormat.ENUM,
            enum_values=[EnumValue("Left", "LEFT"), EnumValue("Right", "RIGHT")],
        )
        expect(getter(attribute)) == _lines(
            "pub fn getImagePosition(self: *Self) ?ImagePosition {",
            '    var ret = interop.getStrAttribute(self, "IMAGEPOSITION", .{});',
            '    if (std.ascii.eqlIgnoreCase("LEFT", ret)) return .Left;',
            '    if (std.ascii.eqlIgnoreCase("RIGHT", ret)) return .Right;',
            "    return null;",
            "}",
        )

    def converts_int_enums(expect):
        attribute = _attr(
            "Placement",
            DataType.INT,
            DataFormat.ENUM,
            enum_values=[EnumValue("Normal", "NORMAL", 0)],
        )
        expect(getter(attribute)) == _lines(
            "pub fn getPlacement(self: *Self) Placement {",
            '    var ret = interop.getIntAttribute(self, "PLACEMENT", .{});',
            "    return @intToEnum(Placement, ret);",
            "}",
        )

    def reads_rgb_as_optional(expect):
        text = getter(_attr("BgColor", data_format=DataFormat.RGB))
        expect(text.splitlines()[0]) == "pub fn getBgColor(self: *Self) ?iup.Rgb {"

    def is_generic_over_pointers(expect):
        text = getter(_attr("UserData", DataType.VOID_PTR))
        expect(text.splitlines()[0]) == "pub fn getUserData(self: *Self, comptime T: type) ?*T {"

    def skips_write_only_and_void(expect):
        expect(getter(_attr("Append", write_only=True))) == ""
        expect(getter(_attr("Redraw", DataType.VOID))) == ""

    def skips_creation_only(expect):
        expect(getter(_attr("Border", DataType.BOOLEAN, creation_only=True))) == ""


def describe_enums_decl():
    def declares_int_enums_with_values(expect):
        attribute = _attr(
            "Placement",
            DataType.INT,
            DataFormat.ENUM,
            enum_values=[EnumValue("Normal", "NORMAL", 0), EnumValue("Maximized", "MAXIMIZED", 1)],
        )
        expect(enums_decl([attribute])) == _lines(
            "pub const Placement = enum(i32) {",
            "    Normal = 0,",
            "    Maximized = 1,",
            "};",
        )

    def declares_string_enums_without_values(expect):
        attribute = _attr(
            "Expand",
            data_format=DataFormat.ENUM,
            enum_values=[EnumValue("Yes", "YES", 1), EnumValue("No", "NO")],
        )
        expect(enums_decl([attribute])) == _lines(
            "pub const Expand = enum {",
            "    Yes,",
            "    No,",
            "};",
        )

    def separates_declarations(expect):
        first = _attr("A", data_format=DataFormat.ENUM, enum_values=[EnumValue("X", "X")])
        second = _attr("B", data_format=DataFormat.ENUM, enum_values=[EnumValue("Y", "Y")])
        plain = _attr("C")
        expect(enums_decl([first, plain, second]).count("\n\n")) == 1

    def is_empty_without_enums(expect):
        expect(enums_decl([_attr("Title")])) == ""


def describe_callbacks():
    def declares_function_types(expect):
        callback = Callback(
            name="Button",
            attribute_name="BUTTON_CB",
            arguments=[DataType.INT, DataType.INT, DataType.STRING],
        )
        expect(callbacks_decl([callback])) == (
            "pub const OnButtonFn = "
            "fn (self: *Self, arg0: i32, arg1: i32, arg2: [:0]const u8) anyerror!void;"
        )

    def documents_function_types(expect):
        callback = Callback(
            name="Close",
            attribute_name="CLOSE_CB",
            return_type=DataType.INT,
            documentation="Called before closing.",
        )
        expect(callbacks_decl([callback])) == _lines(
            "///",
            "/// Called before closing.",
            "pub const OnCloseFn = fn (self: *Self) anyerror!i32;",
        )

    def registers_handlers_on_live_element(expect):
        callback = Callback(name="Close", attribute_name="CLOSE_CB")
        expect(callback_setter(callback, initializer=False)) == _lines(
            "pub fn setCloseCallback(self: *Self, callback: ?OnCloseFn) void {",
            '    const Handler = CallbackHandler(Self, OnCloseFn, "CLOSE_CB");',
            "    Handler.setCallback(self, callback);",
            "}",
        )

    def registers_handlers_on_initializer(expect):
        callback = Callback(name="Close", attribute_name="CLOSE_CB")
        expect(callback_setter(callback, initializer=True)) == _lines(
            "pub fn setCloseCallback(self: *Initializer, callback: ?OnCloseFn) Initializer {",
            "    if (self.last_error) |_| return self.*;",
            '    const Handler = CallbackHandler(Self, OnCloseFn, "CLOSE_CB");',
            "    Handler.setCallback(self.ref, callback);",
            "    return self.*;",
            "}",
        )

    def fails_on_unmapped_type(expect):
        callback = Callback(name="Draw", attribute_name="ACTION", arguments=[DataType.UNKNOWN])
        with pytest.raises(DispatchError) as exc:
            callbacks_decl([callback])
        expect(str(exc.value)) == "No Zig type for Unknown in callback Draw"


def describe_blocks():
    def skip_deprecated_attributes(expect):
        attributes = [_attr("Size", data_format=DataFormat.SIZE, deprecated=True), _attr("Title")]
        expect("Size" in initializer_block(attributes, [])) == False
        expect("Size" in body_block(attributes, [])) == False

    def put_getter_before_setter(expect):
        text = body_block([_attr("Title")], [])
        expect(text.index("getTitle") < text.index("setTitle")) == True

    def append_callbacks_after_attributes(expect):
        callback = Callback(name="Action", attribute_name="ACTION")
        text = initializer_block([_attr("Title")], [callback])
        expect(text.index("setTitle") < text.index("setActionCallback")) == True
        expect("\n\n\n" in text) == False

    def are_empty_without_members(expect):
        expect(initializer_block([], [])) == ""
        expect(body_block([_attr("Rect", data_format=DataFormat.RECT)], [])) == ""


def describe_render():
    def renders_element_header(expect, catalog, element):
        button = element("Button")
        text = render(button, resolve_parent_attributes(catalog, button))
        expect(
            "///\n/// Creates an interface element that is a button.\npub const Button = opaque {"
            in text
        ) == True
        expect('    pub const CLASS_NAME = "button";' in text) == True
        expect("    pub const NATIVE_TYPE = iup.NativeType.Control;" in text) == True
        expect(text.endswith("}\n")) == True

    def indents_initializer_and_body(expect, catalog, element):
        button = element("Button")
        text = render(button, resolve_parent_attributes(catalog, button))
        expect("\n        pub fn setSpacing(self: *Initializer, arg: i32) Initializer {\n" in text) == True
        expect("\n    pub fn getSpacing(self: *Self) i32 {\n" in text) == True
        expect("\n    pub fn setSpacing(self: *Self, arg: i32) void {\n" in text) == True

    def declares_callbacks_and_enums(expect, catalog, element):
        button = element("Button")
        text = render(button, resolve_parent_attributes(catalog, button))
        expect("    pub const OnActionFn = fn (self: *Self) anyerror!void;" in text) == True
        expect("    pub const ImagePosition = enum {" in text) == True
        expect("    pub const Expand = enum {" in text) == True

    def prefers_own_attributes(expect, catalog, element):
        button = element("Button")
        text = render(button, resolve_parent_attributes(catalog, button))
        expect("Label text." in text) == True
        expect("Inherited title." in text) == False
        expect(text.count("pub fn getTitle(")) == 1

    def omits_deprecated_attributes(expect, catalog, element):
        button = element("Button")
        text = render(button, resolve_parent_attributes(catalog, button))
        expect("UserSize" in text) == False
        expect("pub fn getRasterSize(" in text) == True

    def appends_smoke_tests(expect, catalog, element):
        button = element("Button")
        text = render(button, resolve_parent_attributes(catalog, button))
        expect('test "Button Spacing" {' in text) == True
        expect('test "Button ScreenPosition"' in text) == False

    def adds_container_operations(expect, catalog, element):
        dialog = element("Dialog")
        text = render(dialog, resolve_parent_attributes(catalog, dialog))
        expect("        pub fn setChildren(self: *Initializer, tuple: anytype) Initializer {" in text) == True
        expect("    pub fn appendChild(self: *Self, child: anytype) !void {" in text) == True
        expect("    pub fn showXY(" in text) == True
        expect("pub fn setBorder(self: *Self" in text) == False
        expect("pub fn setBorder(self: *Initializer" in text) == True

    def assembles_fragments_in_order(expect, catalog, element):
        button = element("Button")
        text = render(button, resolve_parent_attributes(catalog, button))
        positions = [
            text.index("/// Creates an interface element that is a button."),
            text.index("    pub const ImagePosition = enum {"),
            text.index("    pub const OnActionFn = "),
            text.index("        pub fn setSpacing(self: *Initializer"),
            text.index("    pub fn getSpacing(self: *Self)"),
            text.index("    pub fn init() Initializer {"),
            text.index('test "Button Spacing"'),
        ]
        expect(positions) == sorted(positions)

    def emits_repeated_own_attributes_once(expect):
        descriptor = ClassDescriptor(
            name="Label",
            class_name="label",
            native_type=NativeType.CONTROL,
            attributes=[_attr("Title"), _attr("Title", DataType.INT)],
        )
        text = render(descriptor, [])
        expect(text.count('test "Label Title"')) == 1
        expect(text.count("pub fn getTitle(")) == 1
        expect(".setTitle(42)" in text) == False

    def fails_on_uncovered_attribute(expect):
        descriptor = ClassDescriptor(
            name="Canvas",
            class_name="canvas",
            native_type=NativeType.CANVAS,
            attributes=[_attr("DrawSize", DataType.CANVAS)],
        )
        with pytest.raises(DispatchError):
            render(descriptor, [])
