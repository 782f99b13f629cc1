"""Function signature inference.

Return types come from the `return` statements a function owns. Parameter
types come from default values and destructuring patterns where present and
otherwise from usage evidence gathered by walking the function body.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import TYPE_CHECKING

from js2ts.inference.models import (
    InferredType,
    TypeContext,
    create_array_type,
    create_function_type,
    create_object_type,
    create_primitive_type,
    create_unknown_type,
    fold_types,
)
from js2ts.parsing.syntax import (
    ARITHMETIC_OPERATORS,
    NUMERIC_UNARY_OPERATORS,
    RETURN_CONTAINER_NODE_TYPES,
    USAGE_TRAVERSABLE_NODE_TYPES,
    first_named_child,
    get_operator,
    is_function_node,
    named_children,
    safe_decode_text,
    unwrap_parentheses,
)

if TYPE_CHECKING:
    from tree_sitter import Node

    from js2ts.inference.expressions import ExpressionTypeInferrer

logger = logging.getLogger(__name__)

ARRAY_ONLY_METHODS = frozenset(
    {
        "map",
        "filter",
        "reduce",
        "reduceRight",
        "forEach",
        "find",
        "findIndex",
        "findLast",
        "findLastIndex",
        "some",
        "every",
        "push",
        "pop",
        "shift",
        "unshift",
        "splice",
        "sort",
        "reverse",
        "join",
        "flat",
        "flatMap",
        "fill",
    }
)
STRING_ONLY_METHODS = frozenset(
    {
        "toLowerCase",
        "toUpperCase",
        "toLocaleLowerCase",
        "toLocaleUpperCase",
        "trim",
        "trimStart",
        "trimEnd",
        "charAt",
        "charCodeAt",
        "codePointAt",
        "split",
        "substring",
        "substr",
        "padStart",
        "padEnd",
        "repeat",
        "replace",
        "replaceAll",
        "startsWith",
        "endsWith",
        "match",
        "matchAll",
        "search",
        "normalize",
        "localeCompare",
    }
)


def _is_void(inferred: InferredType) -> bool:
    return inferred.value == "void"


def parameter_nodes(function_node: Node) -> list[Node]:
    params = function_node.child_by_field_name("parameters")
    if params is not None:
        return list(named_children(params))
    # Arrow functions with a single bare parameter: `x => x * 2`.
    single = function_node.child_by_field_name("parameter")
    return [single] if single is not None else []


def parameter_name(param: Node) -> str | None:
    """Binding name of a parameter, or None for destructuring patterns."""
    if param.type == "identifier":
        return safe_decode_text(param)
    if param.type == "assignment_pattern":
        left = param.child_by_field_name("left")
        return parameter_name(left) if left is not None else None
    if param.type == "rest_pattern":
        inner = first_named_child(param)
        return parameter_name(inner) if inner is not None else None
    return None


class FunctionSignatureInferrer:
    def __init__(self, expressions: ExpressionTypeInferrer):
        self.expressions = expressions

    def infer_function_return_type(self, node: Node, context: TypeContext) -> InferredType:
        body = node.child_by_field_name("body")
        if body is None:
            return create_primitive_type("void", 1.0)
        if body.type != "statement_block":
            return self.expressions.infer_expression_type(body, context)

        returns: list[Node] = []
        self._collect_returns(body, returns)
        if not returns:
            return create_primitive_type("void", 1.0)

        contributed = []
        for statement in returns:
            argument = first_named_child(statement)
            if argument is None:
                contributed.append(create_primitive_type("void", 1.0))
            else:
                contributed.append(self.expressions.infer_expression_type(argument, context))

        if all(_is_void(t) for t in contributed):
            return create_primitive_type("void", 1.0)

        merged = fold_types(contributed)
        if all(t.value == contributed[0].value for t in contributed):
            confidence = min(t.confidence for t in contributed)
        else:
            confidence = merged.confidence * 0.85
        return _with_confidence(merged, confidence)

    def _collect_returns(self, node: Node, returns: list[Node]) -> None:
        for child in named_children(node):
            if child.type == "return_statement":
                returns.append(child)
            elif child.type in RETURN_CONTAINER_NODE_TYPES:
                self._collect_returns(child, returns)

    def infer_parameter_types(self, node: Node, context: TypeContext) -> list[InferredType]:
        body = node.child_by_field_name("body")
        return [self._infer_parameter(param, body, context) for param in parameter_nodes(node)]

    def _infer_parameter(
        self,
        param: Node,
        body: Node | None,
        context: TypeContext,
    ) -> InferredType:
        if param.type == "rest_pattern":
            binding = first_named_child(param)
            bound = self.expressions.infer_expression_type(binding, context)
            return create_array_type(bound, bound.confidence * 0.9)

        if param.type == "assignment_pattern":
            return self.expressions.infer_expression_type(
                param.child_by_field_name("right"), context
            )

        if param.type == "array_pattern":
            return create_array_type("unknown", 0.5)

        if param.type == "object_pattern":
            return create_object_type("object", 0.5)

        if param.type == "identifier":
            name = safe_decode_text(param) or ""
            return self.infer_from_usage(name, body)

        logger.debug(f"Unsupported parameter node {param.type}")
        return create_unknown_type(0.3)

    def infer_from_usage(self, name: str, body: Node | None) -> InferredType:
        """Infer a parameter's type from how the function body uses it."""
        evidence: list[InferredType] = []
        if body is not None:
            self._collect_evidence(body, name, evidence)

        if not evidence:
            return create_unknown_type(0.3)
        return fold_types(evidence)

    def _collect_evidence(self, node: Node, name: str, evidence: list[InferredType]) -> None:
        found = self._evidence_at(node, name)
        if found is not None:
            evidence.append(found)

        if node.type not in USAGE_TRAVERSABLE_NODE_TYPES:
            return
        for child in named_children(node):
            if not is_function_node(child):
                self._collect_evidence(child, name, evidence)

    def _evidence_at(self, node: Node, name: str) -> InferredType | None:
        if node.type == "binary_expression":
            if get_operator(node) not in ARITHMETIC_OPERATORS:
                return None
            operands = (node.child_by_field_name("left"), node.child_by_field_name("right"))
            if any(_is_reference(operand, name) for operand in operands):
                return create_primitive_type("number", 0.8)
            return None

        if node.type == "unary_expression":
            if not _is_reference(node.child_by_field_name("argument"), name):
                return None
            operator = get_operator(node)
            if operator in NUMERIC_UNARY_OPERATORS:
                return create_primitive_type("number", 0.8)
            if operator == "!":
                return create_primitive_type("boolean", 0.7)
            return None

        if node.type == "member_expression":
            if not _is_reference(node.child_by_field_name("object"), name):
                return None
            prop = node.child_by_field_name("property")
            if prop is None or prop.type != "property_identifier":
                return None
            member = safe_decode_text(prop)
            if member in ARRAY_ONLY_METHODS:
                return create_array_type("unknown", 0.7)
            if member in STRING_ONLY_METHODS:
                return create_primitive_type("string", 0.7)
            return None

        if node.type == "call_expression":
            if _is_reference(node.child_by_field_name("function"), name):
                return create_primitive_type("Function", 0.8)
            return None

        return None

    def infer_method_signature(self, node: Node, context: TypeContext) -> InferredType:
        """Function type for an object-literal method, `(arg0: T0) => R`."""
        params = self.infer_parameter_types(node, context)
        return_type = self.infer_function_return_type(node, context)
        rendered = ", ".join(f"arg{i}: {p.value}" for i, p in enumerate(params))
        return create_function_type(f"({rendered}) => {return_type.value}", return_type.confidence)

    def infer_function_signature(self, node: Node, context: TypeContext) -> InferredType:
        """Function type using the declared parameter names."""
        params = self.infer_parameter_types(node, context)
        return_type = self.infer_function_return_type(node, context)
        return build_function_signature(node, params, return_type)


def build_function_signature(
    node: Node,
    parameter_types: list[InferredType],
    return_type: InferredType,
) -> InferredType:
    """`(a: T, ...rest: U[]) => R` from already inferred parts of `node`."""
    rendered = []
    for i, (param, inferred) in enumerate(zip(parameter_nodes(node), parameter_types)):
        label = parameter_name(param) or f"arg{i}"
        prefix = "..." if param.type == "rest_pattern" else ""
        rendered.append(f"{prefix}{label}: {inferred.value}")
    return create_function_type(
        f"({', '.join(rendered)}) => {return_type.value}",
        return_type.confidence,
    )


def _is_reference(node: Node | None, name: str) -> bool:
    node = unwrap_parentheses(node)
    return node is not None and node.type == "identifier" and safe_decode_text(node) == name


def _with_confidence(inferred: InferredType, confidence: float) -> InferredType:
    if inferred.confidence == confidence:
        return inferred
    return dataclasses.replace(inferred, confidence=confidence)
