"""Expression type inference.

Maps an expression node of the tree-sitter JavaScript grammar to an
`InferredType`. Dispatch is closed over the node categories registered in
`ExpressionTypeInferrer._handlers`; every other category degrades to
`unknown` rather than raising.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from js2ts.inference.models import (
    InferredType,
    TypeContext,
    TypeKind,
    create_array_type,
    create_object_type,
    create_primitive_type,
    create_union_type,
    create_unknown_type,
    fold_types,
    merge_types,
)
from js2ts.parsing.syntax import (
    ARITHMETIC_OPERATORS,
    COMPARISON_OPERATORS,
    get_operator,
    named_children,
    safe_decode_text,
    unwrap_parentheses,
)

if TYPE_CHECKING:
    from tree_sitter import Node

    from js2ts.inference.shapes import ObjectShapeSynthesizer

logger = logging.getLogger(__name__)

BUILTIN_CALL_RETURN_TYPES: dict[str, Callable[[], InferredType]] = {
    "String": lambda: create_primitive_type("string", 1.0),
    "Number": lambda: create_primitive_type("number", 1.0),
    "parseInt": lambda: create_primitive_type("number", 1.0),
    "parseFloat": lambda: create_primitive_type("number", 1.0),
    "Boolean": lambda: create_primitive_type("boolean", 1.0),
    "Array": lambda: create_array_type("unknown", 0.7),
    "Object": lambda: create_object_type("object", 0.7),
    "Date": lambda: create_primitive_type("Date", 1.0),
    "RegExp": lambda: create_primitive_type("RegExp", 1.0),
    "Promise": lambda: create_primitive_type("Promise<unknown>", 0.8),
}

ARRAY_SAME_ELEMENT_METHODS = frozenset({"map", "filter", "slice", "concat"})
ARRAY_OPTIONAL_ELEMENT_METHODS = frozenset({"find", "pop", "shift"})
ARRAY_NUMBER_METHODS = frozenset({"indexOf", "lastIndexOf", "findIndex", "length"})
ARRAY_BOOLEAN_METHODS = frozenset({"includes", "some", "every"})
ARRAY_VOID_METHODS = frozenset({"forEach", "push", "unshift"})

STRING_STRING_METHODS = frozenset(
    {
        "charAt",
        "concat",
        "slice",
        "substring",
        "substr",
        "toLowerCase",
        "toUpperCase",
        "trim",
        "trimStart",
        "trimEnd",
        "repeat",
        "replace",
        "replaceAll",
        "padStart",
        "padEnd",
    }
)
STRING_NUMBER_METHODS = frozenset({"indexOf", "lastIndexOf", "search", "charCodeAt", "length"})
STRING_BOOLEAN_METHODS = frozenset({"includes", "startsWith", "endsWith"})
STRING_MATCH_METHODS = frozenset({"match", "matchAll"})
MATCH_RESULT_TYPE = "RegExpMatchArray | null"


def optional_element_type(array_type: InferredType, confidence: float) -> InferredType:
    """`T | undefined` for an element read out of `array_type`."""
    element = array_type.element
    members = list(element.member_descriptors()) if element is not None else ["unknown"]
    if "undefined" not in members:
        members.append("undefined")
    return create_union_type(members, confidence)


class ExpressionTypeInferrer:
    """Infers types for expression nodes.

    Object literals are handed to the attached `ObjectShapeSynthesizer`; the
    `TypeInferrer` facade wires the two together.
    """

    def __init__(self, object_shapes: ObjectShapeSynthesizer | None = None):
        self.object_shapes = object_shapes
        self._handlers: dict[str, Callable[[Node, TypeContext], InferredType]] = {
            "private_property_identifier": lambda node, ctx: create_unknown_type(0.3),
            "string": lambda node, ctx: create_primitive_type("string", 1.0),
            "template_string": lambda node, ctx: create_primitive_type("string", 1.0),
            "number": self._infer_number,
            "true": lambda node, ctx: create_primitive_type("boolean", 1.0),
            "false": lambda node, ctx: create_primitive_type("boolean", 1.0),
            "null": lambda node, ctx: create_primitive_type("null", 1.0),
            "regex": lambda node, ctx: create_primitive_type("RegExp", 1.0),
            "undefined": self._infer_identifier,
            "identifier": self._infer_identifier,
            "array": self._infer_array,
            "object": self._infer_object,
            "unary_expression": self._infer_unary,
            "binary_expression": self._infer_binary,
            "ternary_expression": self._infer_conditional,
            "call_expression": self._infer_call,
            "member_expression": self._infer_member,
            "subscript_expression": self._infer_subscript,
        }

    def infer_expression_type(self, node: Node | None, context: TypeContext) -> InferredType:
        node = unwrap_parentheses(node)
        if node is None:
            return create_unknown_type(0.0)

        handler = self._handlers.get(node.type)
        if handler is None:
            logger.debug(f"No expression rule for node type {node.type}")
            return create_unknown_type(0.0)
        return handler(node, context)

    def infer_variable_type(self, declarator: Node, context: TypeContext) -> InferredType:
        value = declarator.child_by_field_name("value")
        if value is None:
            return create_unknown_type(0.0)
        return self.infer_expression_type(value, context)

    def infer_identifier_name(self, name: str, context: TypeContext) -> InferredType:
        known = context.scope.get(name)
        if known is not None:
            return known

        if name == "undefined":
            return create_primitive_type("undefined", 1.0)
        if name in ("NaN", "Infinity"):
            return create_primitive_type("number", 1.0)
        return create_unknown_type(0.0)

    def _infer_identifier(self, node: Node, context: TypeContext) -> InferredType:
        return self.infer_identifier_name(safe_decode_text(node) or "", context)

    def _infer_number(self, node: Node, context: TypeContext) -> InferredType:
        text = safe_decode_text(node) or ""
        if text.endswith("n"):
            return create_primitive_type("bigint", 1.0)
        return create_primitive_type("number", 1.0)

    def _infer_object(self, node: Node, context: TypeContext) -> InferredType:
        if self.object_shapes is None:
            return create_object_type("object", 0.5)
        return self.object_shapes.infer_object_shape(node, context)

    def _infer_array(self, node: Node, context: TypeContext) -> InferredType:
        elements = list(named_children(node))
        if not elements:
            return create_array_type("unknown", 0.5)

        element_types = [
            self.infer_expression_type(element, context)
            for element in elements
            if element.type != "spread_element"
        ]
        if not element_types:
            return create_array_type("unknown", 0.3)

        merged = fold_types(element_types)
        all_same = all(t.value == element_types[0].value for t in element_types)
        confidence = 1.0 if all_same else merged.confidence * 0.9
        return create_array_type(merged, confidence)

    def _infer_unary(self, node: Node, context: TypeContext) -> InferredType:
        operator = get_operator(node)
        if operator in ("!", "delete"):
            return create_primitive_type("boolean", 1.0)
        if operator in ("+", "-", "~"):
            return create_primitive_type("number", 1.0)
        if operator == "typeof":
            return create_primitive_type("string", 1.0)
        if operator == "void":
            return create_primitive_type("undefined", 1.0)
        return create_unknown_type(0.5)

    def _infer_binary(self, node: Node, context: TypeContext) -> InferredType:
        operator = get_operator(node)
        left = node.child_by_field_name("left")
        right = node.child_by_field_name("right")

        if operator in COMPARISON_OPERATORS:
            return create_primitive_type("boolean", 1.0)
        if operator in ARITHMETIC_OPERATORS:
            return create_primitive_type("number", 1.0)

        left_type = self.infer_expression_type(left, context)
        right_type = self.infer_expression_type(right, context)

        if operator == "+":
            if _is_primitive(left_type, "string") or _is_primitive(right_type, "string"):
                return create_primitive_type("string", 0.95)
            if _is_primitive(left_type, "number") and _is_primitive(right_type, "number"):
                return create_primitive_type("number", 1.0)
            return create_union_type(["string", "number"], 0.6)

        if operator in ("&&", "||"):
            return merge_types(left_type, right_type)
        if operator == "??":
            if right_type.confidence > 0.5:
                return right_type
            return merge_types(left_type, right_type)

        return create_unknown_type(0.3)

    def _infer_conditional(self, node: Node, context: TypeContext) -> InferredType:
        consequence = self.infer_expression_type(node.child_by_field_name("consequence"), context)
        alternative = self.infer_expression_type(node.child_by_field_name("alternative"), context)
        return merge_types(consequence, alternative)

    def _infer_call(self, node: Node, context: TypeContext) -> InferredType:
        callee = unwrap_parentheses(node.child_by_field_name("function"))
        if callee is None:
            return create_unknown_type(0.2)

        if callee.type == "identifier":
            name = safe_decode_text(callee) or ""
            factory = BUILTIN_CALL_RETURN_TYPES.get(name)
            return factory() if factory is not None else create_unknown_type(0.1)

        if callee.type == "member_expression":
            return self._infer_method_call(callee, context)

        return create_unknown_type(0.2)

    def _infer_method_call(self, callee: Node, context: TypeContext) -> InferredType:
        prop = callee.child_by_field_name("property")
        if prop is None or prop.type != "property_identifier":
            return create_unknown_type(0.2)

        method_name = safe_decode_text(prop) or ""
        receiver_type = self.infer_expression_type(callee.child_by_field_name("object"), context)

        if receiver_type.kind == TypeKind.ARRAY:
            return self._infer_array_method(method_name, receiver_type)
        if _is_primitive(receiver_type, "string"):
            return self._infer_string_method(method_name)
        return create_unknown_type(0.2)

    def _infer_array_method(self, method_name: str, array_type: InferredType) -> InferredType:
        if method_name in ARRAY_SAME_ELEMENT_METHODS:
            element = array_type.element or create_unknown_type()
            return create_array_type(element, 0.9)
        if method_name in ARRAY_OPTIONAL_ELEMENT_METHODS:
            return optional_element_type(array_type, 0.9)
        if method_name == "reduce":
            return create_unknown_type(0.5)
        if method_name == "join":
            return create_primitive_type("string", 1.0)
        if method_name in ARRAY_NUMBER_METHODS:
            return create_primitive_type("number", 1.0)
        if method_name in ARRAY_BOOLEAN_METHODS:
            return create_primitive_type("boolean", 1.0)
        if method_name in ARRAY_VOID_METHODS:
            return create_primitive_type("void", 0.9)
        return create_unknown_type(0.3)

    def _infer_string_method(self, method_name: str) -> InferredType:
        if method_name in STRING_STRING_METHODS:
            return create_primitive_type("string", 1.0)
        if method_name == "split":
            return create_array_type("string", 1.0)
        if method_name in STRING_NUMBER_METHODS:
            return create_primitive_type("number", 1.0)
        if method_name in STRING_BOOLEAN_METHODS:
            return create_primitive_type("boolean", 1.0)
        if method_name in STRING_MATCH_METHODS:
            return create_union_type(MATCH_RESULT_TYPE.split(" | "), 0.9)
        return create_unknown_type(0.3)

    def _infer_member(self, node: Node, context: TypeContext) -> InferredType:
        # Shape-based property lookup is not attempted.
        return create_unknown_type(0.2)

    def _infer_subscript(self, node: Node, context: TypeContext) -> InferredType:
        index = unwrap_parentheses(node.child_by_field_name("index"))
        if index is not None and index.type == "number":
            receiver_type = self.infer_expression_type(node.child_by_field_name("object"), context)
            if receiver_type.kind == TypeKind.ARRAY:
                return optional_element_type(receiver_type, 0.9)
        return create_unknown_type(0.2)


def _is_primitive(inferred: InferredType, name: str) -> bool:
    return inferred.kind == TypeKind.PRIMITIVE and inferred.value == name

