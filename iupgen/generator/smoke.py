"""Round-trip smoke tests for generated element accessors."""

from collections.abc import Callable
from dataclasses import dataclass

from .catalog import merge_attributes
from .dispatch import Rule, classify, has_test, is_testable
from .types import Attribute, ClassDescriptor, NumberedAttribute


@dataclass(frozen=True)
class Sample:
    """A representative value and the check that reads it back.

    args is passed to the setter after any ids; check is a Zig boolean
    expression over the getter result, bound to `ret`.
    """

    args: str
    check: str


def _first_member(attribute: Attribute) -> str:
    return attribute.enum_values[0].name


def _fixed(args: str, check: str) -> Callable[[Attribute], Sample]:
    return lambda _attribute: Sample(args, check)


SAMPLES: dict[Rule, Callable[[Attribute], Sample] | None] = {
    Rule.INT: _fixed("42", "ret == 42"),
    Rule.STRING: _fixed('"Hello"', 'std.mem.eql(u8, ret, "Hello")'),
    Rule.BOOLEAN: _fixed("true", "ret == true"),
    Rule.FLOAT: _fixed("3.14", "ret == @as(f32, 3.14)"),
    Rule.DOUBLE: _fixed("3.14", "ret == @as(f64, 3.14)"),
    Rule.POINTER: None,
    Rule.HANDLE: None,
    Rule.VOID: None,
    Rule.SIZE: _fixed(
        "9, 10",
        "ret.width != null and ret.width.? == 9 and ret.height != null and ret.height.? == 10",
    ),
    Rule.MARGIN: _fixed("9, 10", "ret.horiz == 9 and ret.vert == 10"),
    Rule.LIN_COL_POS: _fixed("9, 10", "ret.lin == 9 and ret.col == 10"),
    Rule.XY_POS: _fixed("9, 10", "ret.x == 9 and ret.y == 10"),
    Rule.RANGE: _fixed("9, 10", "ret.begin == 9 and ret.end == 10"),
    Rule.DIALOG_SIZE: None,
    Rule.DATE: None,
    Rule.RGB: _fixed(
        ".{ .r = 9, .g = 10, .b = 11 }",
        "ret != null and ret.?.r == 9 and ret.?.g == 10 and ret.?.b == 11",
    ),
    Rule.ENUM_INT: lambda a: Sample(f".{_first_member(a)}", f"ret == .{_first_member(a)}"),
    Rule.ENUM_STRING: lambda a: Sample(
        f".{_first_member(a)}", f"ret != null and ret.? == .{_first_member(a)}"
    ),
    Rule.UNSUPPORTED: None,
}

# Ids used to address numbered attributes in tests
TEST_IDS = {
    NumberedAttribute.NO: [],
    NumberedAttribute.ONE_ID: ["0"],
    NumberedAttribute.TWO_IDS: ["0", "0"],
}


def sample(attribute: Attribute) -> Sample | None:
    """Return the representative value for an attribute, if it has one."""
    factory = SAMPLES[classify(attribute)]
    return factory(attribute) if factory else None


def round_trip_test(descriptor: ClassDescriptor, attribute: Attribute) -> str:
    """Return one Zig test exercising an attribute's setter and getter."""
    value = sample(attribute)
    if value is None:
        return ""

    ids = TEST_IDS[attribute.numbered]
    set_args = ", ".join([*ids, value.args])
    get_args = ", ".join(ids)

    return f"""\
test "{descriptor.name} {attribute.name}" {{
    try iup.MainLoop.open();
    defer iup.MainLoop.close();

    var item = try (iup.{descriptor.name}.init().set{attribute.name}({set_args}).unwrap());
    defer item.deinit();

    var ret = item.get{attribute.name}({get_args});

    try std.testing.expect({value.check});
}}"""


def tests_block(descriptor: ClassDescriptor) -> str:
    """Return the smoke tests for an element's own attributes."""
    if not is_testable(descriptor):
        return ""

    attributes = merge_attributes(descriptor.attributes, [])
    tests = [round_trip_test(descriptor, a) for a in attributes if has_test(a)]
    return "\n\n".join(t for t in tests if t)
