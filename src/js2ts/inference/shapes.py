"""Object literal shapes and interface synthesis.

An object literal is summarised as an inline structural type. Shapes that are
large (more than three properties) or that nest objects or functions are
flagged for promotion to a named interface; `register_interface` then records
the interface in the context, reusing an existing declaration when one with
the same shape hash is already known.
"""

from __future__ import annotations

import dataclasses
import json
import logging
import re
from typing import TYPE_CHECKING

from js2ts.inference.models import (
    InferredType,
    PropertyDefinition,
    TypeContext,
    TypeKind,
    create_interface_definition,
    create_object_type,
    create_property_definition,
    create_unknown_type,
)
from js2ts.parsing.syntax import (
    named_children,
    numeric_literal_key,
    safe_decode_text,
    string_literal_value,
    unwrap_parentheses,
)

if TYPE_CHECKING:
    from tree_sitter import Node

    from js2ts.inference.expressions import ExpressionTypeInferrer
    from js2ts.inference.functions import FunctionSignatureInferrer

logger = logging.getLogger(__name__)

_RE_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

MAX_INLINE_PROPERTIES = 3
ACCESSOR_KEYWORDS = frozenset({"get", "set"})


class _OpaqueObject(Exception):
    """Raised while walking a literal whose shape cannot be known statically."""


def format_property_name(name: str) -> str:
    if _RE_IDENTIFIER.match(name):
        return name
    return json.dumps(name)


def format_inline_shape(properties: list[PropertyDefinition]) -> str:
    members = []
    for prop in properties:
        readonly = "readonly " if prop.readonly else ""
        optional = "?" if prop.optional else ""
        members.append(f"{readonly}{format_property_name(prop.name)}{optional}: {prop.type}")
    return "{ " + "; ".join(members) + " }"


def generate_interface_name(context: TypeContext) -> str:
    return context.interfaces.next_name()


def accessor_keyword(member: Node) -> str | None:
    """`get` or `set` for an accessor `method_definition`, else None."""
    if member.type != "method_definition":
        return None
    name = member.child_by_field_name("name")
    for child in member.children:
        if name is not None and child.start_byte >= name.start_byte:
            break
        if child.type in ACCESSOR_KEYWORDS:
            return child.type
    return None


class ObjectShapeSynthesizer:
    def __init__(
        self,
        expressions: ExpressionTypeInferrer,
        functions: FunctionSignatureInferrer,
    ):
        self.expressions = expressions
        self.functions = functions

    def infer_object_shape(self, node: Node, context: TypeContext) -> InferredType:
        """Infer the structural type of an object literal.

        A spread or a computed key anywhere in the literal makes the whole
        object opaque (`object` at 0.5).
        """
        members = list(named_children(node))
        if not members:
            return create_object_type("{}", 0.8)

        properties: list[PropertyDefinition] = []
        property_types: list[InferredType] = []
        # A get/set pair describes one property; the getter types it.
        accessors: dict[str, int] = {}
        try:
            for member in members:
                name, inferred = self._infer_member(member, context)
                keyword = accessor_keyword(member)
                if keyword is not None and name in accessors:
                    if keyword == "get":
                        index = accessors[name]
                        properties[index] = create_property_definition(name, inferred.value)
                        property_types[index] = inferred
                    continue
                if keyword is not None:
                    accessors[name] = len(properties)
                properties.append(create_property_definition(name, inferred.value))
                property_types.append(inferred)
        except _OpaqueObject:
            return create_object_type("object", 0.5)

        if property_types:
            confidence = sum(t.confidence for t in property_types) / len(property_types)
        else:
            confidence = 0.5

        inline = format_inline_shape(properties)
        needs_interface = len(properties) > MAX_INLINE_PROPERTIES or any(
            t.kind in (TypeKind.OBJECT, TypeKind.FUNCTION) for t in property_types
        )
        if needs_interface:
            return create_object_type(
                inline,
                confidence,
                needs_interface=True,
                interface_name=generate_interface_name(context),
                properties=properties,
            )
        return create_object_type(inline, confidence, properties=properties)

    def register_interface(self, shape: InferredType, context: TypeContext) -> InferredType:
        """Record a promoted shape in `context.interfaces`.

        Returns the shape renamed to the already registered interface when a
        structurally identical one exists, or to a fresh name when its own name
        was taken by a different shape in the meantime.
        """
        if not shape.needs_interface or not shape.interface_name:
            return shape

        definition = create_interface_definition(shape.interface_name, shape.properties)
        registered = context.interfaces.register(definition)
        if registered.usage_count > 1:
            logger.debug(
                f"Shape of {shape.interface_name} matches {registered.name} "
                f"(used {registered.usage_count} times)"
            )
        else:
            logger.debug(f"Registered interface {registered.name}")

        if registered.name != shape.interface_name:
            return dataclasses.replace(shape, interface_name=registered.name)
        return shape

    def _infer_member(self, member: Node, context: TypeContext) -> tuple[str, InferredType]:
        if member.type == "spread_element":
            raise _OpaqueObject()

        if member.type == "shorthand_property_identifier":
            name = safe_decode_text(member) or ""
            return name, self.expressions.infer_identifier_name(name, context)

        if member.type == "method_definition":
            name = self._property_key(member.child_by_field_name("name"))
            keyword = accessor_keyword(member)
            if keyword == "get":
                return name, self.functions.infer_function_return_type(member, context)
            if keyword == "set":
                params = self.functions.infer_parameter_types(member, context)
                return name, params[0] if params else create_unknown_type(0.3)
            return name, self.functions.infer_method_signature(member, context)

        if member.type == "pair":
            name = self._property_key(member.child_by_field_name("key"))
            value = unwrap_parentheses(member.child_by_field_name("value"))
            if value is not None and value.type == "object":
                return name, self.infer_object_shape(value, context)
            return name, self.expressions.infer_expression_type(value, context)

        raise _OpaqueObject()

    def _property_key(self, key: Node | None) -> str:
        if key is None:
            raise _OpaqueObject()
        if key.type == "property_identifier":
            return safe_decode_text(key) or ""
        if key.type == "string":
            return string_literal_value(key)
        if key.type == "number":
            return numeric_literal_key(key)
        raise _OpaqueObject()
