"""
Property validation for Ramen metadata.

Each recognized property key has a schema: the element kinds it applies to
and the values it accepts. Unrecognized keys are kept (forward-compatible)
but flagged as warnings.
"""

import re
from dataclasses import dataclass, field
from enum import StrEnum

from . import ir
from .manifest import CompilerConfig

# =============================================================================
# Property Schema
# =============================================================================

NODE = frozenset({ir.ElementKind.NODE})
CONTAINER = frozenset({ir.ElementKind.CONTAINER})
ANY_ELEMENT = NODE | CONTAINER

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
_FUNCTIONAL_COLOR = re.compile(r"^(?:rgb|rgba|hsl|hsla|oklch)\(\s*[^()]+\)$")

# CSS Color Module Level 4 named colors
CSS_COLOR_NAMES = frozenset(
    {
        "aliceblue", "antiquewhite", "aqua", "aquamarine", "azure", "beige", "bisque",
        "black", "blanchedalmond", "blue", "blueviolet", "brown", "burlywood", "cadetblue",
        "chartreuse", "chocolate", "coral", "cornflowerblue", "cornsilk", "crimson", "cyan",
        "darkblue", "darkcyan", "darkgoldenrod", "darkgray", "darkgreen", "darkgrey",
        "darkkhaki", "darkmagenta", "darkolivegreen", "darkorange", "darkorchid", "darkred",
        "darksalmon", "darkseagreen", "darkslateblue", "darkslategray", "darkslategrey",
        "darkturquoise", "darkviolet", "deeppink", "deepskyblue", "dimgray", "dimgrey",
        "dodgerblue", "firebrick", "floralwhite", "forestgreen", "fuchsia", "gainsboro",
        "ghostwhite", "gold", "goldenrod", "gray", "green", "greenyellow", "grey", "honeydew",
        "hotpink", "indianred", "indigo", "ivory", "khaki", "lavender", "lavenderblush",
        "lawngreen", "lemonchiffon", "lightblue", "lightcoral", "lightcyan",
        "lightgoldenrodyellow", "lightgray", "lightgreen", "lightgrey", "lightpink",
        "lightsalmon", "lightseagreen", "lightskyblue", "lightslategray", "lightslategrey",
        "lightsteelblue", "lightyellow", "lime", "limegreen", "linen", "magenta", "maroon",
        "mediumaquamarine", "mediumblue", "mediumorchid", "mediumpurple", "mediumseagreen",
        "mediumslateblue", "mediumspringgreen", "mediumturquoise", "mediumvioletred",
        "midnightblue", "mintcream", "mistyrose", "moccasin", "navajowhite", "navy",
        "oldlace", "olive", "olivedrab", "orange", "orangered", "orchid", "palegoldenrod",
        "palegreen", "paleturquoise", "palevioletred", "papayawhip", "peachpuff", "peru",
        "pink", "plum", "powderblue", "purple", "rebeccapurple", "red", "rosybrown",
        "royalblue", "saddlebrown", "salmon", "sandybrown", "seagreen", "seashell", "sienna",
        "silver", "skyblue", "slateblue", "slategray", "slategrey", "snow", "springgreen",
        "steelblue", "tan", "teal", "thistle", "tomato", "turquoise", "violet", "wheat",
        "white", "whitesmoke", "yellow", "yellowgreen", "transparent",
    }
)


class ValueType(StrEnum):
    """Value categories a property can accept."""

    OPTION = "option"
    COLOR = "color"
    NUMBER = "number"
    TEXT = "text"


@dataclass(frozen=True)
class PropertyRule:
    """Schema entry for one recognized property key."""

    key: str
    applies_to: frozenset[ir.ElementKind]
    value_type: ValueType
    options: tuple[str, ...] = ()

    def describe_expected(self) -> str:
        if self.value_type == ValueType.OPTION:
            return "one of " + ", ".join(f'"{o}"' for o in self.options)
        if self.value_type == ValueType.COLOR:
            return 'a color string such as "#ff8800", "rgb(255, 136, 0)" or "orange"'
        if self.value_type == ValueType.NUMBER:
            return "a number"
        return "a string"


PROPERTY_SCHEMA: dict[str, PropertyRule] = {
    rule.key: rule
    for rule in (
        PropertyRule(
            "layout",
            CONTAINER,
            ValueType.OPTION,
            ("manual", "horizontal", "vertical", "grid", "auto"),
        ),
        PropertyRule("background", CONTAINER, ValueType.COLOR),
        PropertyRule("padding", CONTAINER, ValueType.NUMBER),
        PropertyRule("x", NODE, ValueType.NUMBER),
        PropertyRule("y", NODE, ValueType.NUMBER),
        PropertyRule("color", ANY_ELEMENT, ValueType.COLOR),
        PropertyRule(
            "shape",
            NODE,
            ValueType.OPTION,
            ("rectangle", "circle", "diamond", "cylinder"),
        ),
        PropertyRule("size", NODE, ValueType.OPTION, ("small", "medium", "large")),
        PropertyRule("content", ANY_ELEMENT, ValueType.TEXT),
        PropertyRule("font", ANY_ELEMENT, ValueType.TEXT),
    )
}


def is_color(value: str) -> bool:
    """Check whether a string is an accepted color notation."""
    value = value.strip()
    return bool(
        _HEX_COLOR.match(value)
        or _FUNCTIONAL_COLOR.match(value)
        or value.lower() in CSS_COLOR_NAMES
    )


def value_is_valid(rule: PropertyRule, assignment: ir.PropertyAssignment) -> bool:
    """Check an assignment's value against its rule, ignoring element kind."""
    if rule.value_type == ValueType.NUMBER:
        return assignment.value_kind == ir.ValueKind.NUMBER
    if not assignment.is_string:
        return False
    value = str(assignment.value)
    if rule.value_type == ValueType.OPTION:
        return value in rule.options
    if rule.value_type == ValueType.COLOR:
        return is_color(value)
    return True


# =============================================================================
# Assignment Checks
# =============================================================================


@dataclass(frozen=True)
class PropertyCheck:
    """
    Result of validating one property assignment.

    Attributes:
        accepted: Whether the value may be bound to the element
        diagnostics: Problems found, errors and warnings alike
    """

    accepted: bool
    diagnostics: tuple[ir.Diagnostic, ...] = field(default_factory=tuple)


def check_assignment(
    assignment: ir.PropertyAssignment,
    kind: ir.ElementKind | None,
    config: CompilerConfig,
) -> PropertyCheck:
    """
    Validate one assignment.

    Args:
        assignment: The key/value pair
        kind: Kind of the resolved target, or None if the target did not resolve
        config: Compiler configuration (controls warning output)

    Returns:
        PropertyCheck. Invalid values of recognized keys are rejected; unknown
        keys and keys that do not apply to the target kind are accepted with a
        warning.
    """
    rule = PROPERTY_SCHEMA.get(assignment.key)
    if rule is None:
        if not config.report_unrecognized_properties:
            return PropertyCheck(accepted=True)
        warning = ir.Diagnostic.warning(
            ir.DiagnosticCode.UNRECOGNIZED_PROPERTY_KEY,
            f"Unrecognized property '{assignment.key}' (stored as-is)",
            assignment.span,
        )
        return PropertyCheck(accepted=True, diagnostics=(warning,))

    if not value_is_valid(rule, assignment):
        error = ir.Diagnostic.error(
            ir.DiagnosticCode.INVALID_PROPERTY_VALUE,
            f"Invalid value {assignment.value!r} for '{assignment.key}': "
            f"expected {rule.describe_expected()}",
            assignment.value_span,
        )
        return PropertyCheck(accepted=False, diagnostics=(error,))

    if kind is not None and kind not in rule.applies_to and config.report_inapplicable_properties:
        applies = " or ".join(sorted(k.value for k in rule.applies_to))
        warning = ir.Diagnostic.warning(
            ir.DiagnosticCode.INAPPLICABLE_PROPERTY,
            f"Property '{assignment.key}' applies to {applies} elements, not {kind.value}",
            assignment.span,
        )
        return PropertyCheck(accepted=True, diagnostics=(warning,))

    return PropertyCheck(accepted=True)
