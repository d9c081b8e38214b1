"""Lifecycle and relationship operations shared by element kinds."""

from .types import ClassDescriptor, NativeType

INIT_IMAGE = """\
///
/// Creates an image to be shown on a label, button, toggle, or as a cursor.
/// width: Image width in pixels.
/// height: Image height in pixels.
/// pixels: Vector containing the value of each pixel.
/// IupImage uses 1 value per pixel, IupImageRGB uses 3 values and IupImageRGBA uses 4 values per pixel.
/// Each value is always 8 bit.
/// Origin is at the top-left corner and data is oriented top to bottom, and left to right.
/// The pixels array is duplicated internally so you can discard it after the call.
pub fn init(width: i32, height: i32, imgdata: ?[]const u8) Initializer {
    var handle = interop.create_image(Self, width, height, imgdata);

    if (handle) |valid| {
        return .{
            .ref = @ptrCast(*Self, valid),
        };
    } else {
        return .{ .ref = undefined, .last_error = Error.NotInitialized };
    }
}"""

INIT = """\
///
/// Creates an interface element given its class name and parameters.
/// After creation the element still needs to be attached to a container and mapped to the native system so it can be visible.
pub fn init() Initializer {
    var handle = interop.create(Self);

    if (handle) |valid| {
        return .{
            .ref = @ptrCast(*Self, valid),
        };
    } else {
        return .{ .ref = undefined, .last_error = Error.NotInitialized };
    }
}"""

VISIBILITY = """\
///
/// Displays a dialog in the current position, or changes a control VISIBLE attribute.
/// For dialogs it is equivalent to call IupShowXY using IUP_CURRENT.
/// For other controls, to call IupShow is the same as setting VISIBLE=YES.
pub fn show(self: *Self) !void {
    try interop.show(self);
}

///
/// Hides an interface element, the same as setting VISIBLE=NO.
/// A hidden dialog keeps its elements, so it can be shown again. Call deinit to destroy it.
pub fn hide(self: *Self) void {
    interop.hide(self);
}"""

LIFECYCLE = """\
///
/// Destroys an interface element and all its children.
/// Only dialogs, timers, popup menus and images should be normally destroyed, but detached elements can also be destroyed.
pub fn deinit(self: *Self) void {
    interop.destroy(self);
}

///
/// Creates (maps) the native interface objects corresponding to the given IUP interface elements.
/// It is also called recursively to create the native element of all the children in the element's tree.
/// The element must be already attached to a mapped container, except the dialog. A child can only be mapped if its parent is already mapped.
/// Mapping a dialog that is already mapped only updates its layout; mapping any other element that is already mapped does nothing.
/// Elements added to a mapped dialog must be mapped too, followed by refresh to update the dialog layout.
pub fn map(self: *Self) !void {
    try interop.map(self);
}"""

CHILDREN = """\
///
/// Adds a tuple of children
pub fn appendChildren(self: *Self, tuple: anytype) !void {
    try Impl(Self).appendChildren(self, tuple);
}

///
/// Appends a child on this container
/// child must be an Element or a pointer to any element type
pub fn appendChild(self: *Self, child: anytype) !void {
    try Impl(Self).appendChild(self, child);
}

///
/// Returns a iterator for children elements.
pub fn children(self: *Self) ChildrenIterator {
    return ChildrenIterator.init(self);
}"""

POPUP = """\
///
/// Shows a dialog or menu and restricts user interaction only to the specified element.
pub fn popup(self: *Self, x: iup.DialogPosX, y: iup.DialogPosY) !void {
    try interop.popup(self, x, y);
}"""

SHOW_XY = """\
///
/// Displays a dialog in a given position on the screen.
pub fn showXY(self: *Self, x: iup.DialogPosX, y: iup.DialogPosY) !void {
    try interop.showXY(self, x, y);
}"""

MESSAGE_DIALOG = """\
///
/// Shows a modal message with a single OK button.
pub fn alert(parent: *iup.Dialog, title: ?[:0]const u8, message: [:0]const u8) !void {
    try Impl(Self).messageDialogAlert(parent, title, message);
}

///
/// Shows a modal question with OK and CANCEL buttons, returns true on OK.
pub fn confirm(parent: *iup.Dialog, title: ?[:0]const u8, message: [:0]const u8) !bool {
    return try Impl(Self).messageDialogAlertConfirm(parent, title, message);
}"""

GET_DIALOG = """\
///
/// Returns the handle of the dialog that contains the element.
pub fn getDialog(self: *Self) ?*iup.Dialog {
    return interop.getDialog(self);
}"""

TEXT_POSITION = """\
///
/// Converts a (lin, col) character positioning into an absolute position. lin and col starts at 1, pos starts at 0. For single line controls pos is always "col - 1".
pub fn convertLinColToPos(self: *Self, lin: i32, col: i32) ?i32 {
    return Impl(Self).convertLinColToPos(self, lin, col);
}

///
/// Converts an absolute position into a (lin, col) character positioning.
pub fn convertPosToLinCol(self: *Self, pos: i32) ?iup.LinColPos {
    return Impl(Self).convertPosToLinCol(self, pos);
}"""

DIALOG_HIERARCHY = """\
///
/// Returns the child element that has the NAME attribute equals to the given value on the same dialog hierarchy.
/// Works also for children of a menu that is associated with a dialog.
pub fn getDialogChild(self: *Self, byName: [:0]const u8) ?Element {
    return interop.getDialogChild(self, byName);
}

///
/// Updates the size and layout of all controls in the same dialog.
/// To be used after changing size attributes, or attributes that affect the size of the control.
pub fn refresh(self: *Self) void {
    Impl(Self).refresh(self);
}"""

SET_CHILDREN = """\
pub fn setChildren(self: *Initializer, tuple: anytype) Initializer {
    if (self.last_error) |_| return self.*;

    Self.appendChildren(self.ref, tuple) catch |err| {
        self.last_error = err;
    };

    return self.*;
}"""

POPUP_CLASSES = frozenset(["menu"])
TEXT_CLASSES = frozenset(["text", "multiline"])


def body_traits(descriptor: ClassDescriptor) -> str:
    """Return the operations available on every live element of this kind."""
    kind = descriptor.native_type
    traits = [INIT_IMAGE if kind == NativeType.IMAGE else INIT]

    if kind in (NativeType.CONTROL, NativeType.DIALOG):
        traits.append(VISIBILITY)

    traits.append(LIFECYCLE)

    if descriptor.children_count != 0:
        traits.append(CHILDREN)

    if kind == NativeType.DIALOG or descriptor.class_name in POPUP_CLASSES:
        traits.append(POPUP)

    if kind == NativeType.DIALOG:
        traits.append(SHOW_XY)
        if descriptor.class_name == "messagedlg":
            traits.append(MESSAGE_DIALOG)
    else:
        traits.append(GET_DIALOG)

    if descriptor.class_name in TEXT_CLASSES:
        traits.append(TEXT_POSITION)

    traits.append(DIALOG_HIERARCHY)
    return "\n\n".join(traits)


def initializer_traits(descriptor: ClassDescriptor) -> str:
    """Return the structural operations chained on the Initializer."""
    if descriptor.children_count != 0:
        return SET_CHILDREN
    return ""
