"""Tree-sitter JavaScript node helpers and node-type tables.

The inferrers dispatch on `node.type` strings from the tree-sitter JavaScript
grammar. The sets below name the node categories each inferrer understands;
anything outside them is treated as unknown.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tree_sitter import Node

# Older grammar releases call function expressions "function".
FUNCTION_NODE_TYPES = frozenset(
    {
        "function_declaration",
        "function_expression",
        "function",
        "arrow_function",
        "generator_function",
        "generator_function_declaration",
        "method_definition",
    }
)

COMMENT_NODE_TYPES = frozenset({"comment", "html_comment"})

# Statements whose nested statements may contain a `return` of the same function.
RETURN_CONTAINER_NODE_TYPES = frozenset(
    {
        "statement_block",
        "if_statement",
        "else_clause",
        "for_statement",
        "for_in_statement",
        "while_statement",
        "do_statement",
        "switch_statement",
        "switch_body",
        "switch_case",
        "switch_default",
        "try_statement",
        "catch_clause",
        "finally_clause",
        "labeled_statement",
    }
)

# Nodes walked while collecting usage evidence for a parameter.
USAGE_TRAVERSABLE_NODE_TYPES = frozenset(
    {
        "statement_block",
        "expression_statement",
        "return_statement",
        "if_statement",
        "else_clause",
        "parenthesized_expression",
        "lexical_declaration",
        "variable_declaration",
        "variable_declarator",
        "binary_expression",
        "unary_expression",
        "member_expression",
        "call_expression",
        "arguments",
        "array",
    }
)

COMPARISON_OPERATORS = frozenset(
    {"==", "===", "!=", "!==", "<", "<=", ">", ">=", "in", "instanceof"}
)
ARITHMETIC_OPERATORS = frozenset(
    {"-", "*", "/", "%", "**", "<<", ">>", ">>>", "&", "|", "^"}
)
LOGICAL_OPERATORS = frozenset({"&&", "||", "??"})
NUMERIC_UNARY_OPERATORS = frozenset({"+", "-", "~"})


def safe_decode_text(node: Node | None) -> str | None:
    if node is not None and node.text:
        return node.text.decode("utf-8")
    return None


def get_node_line(node: Node) -> int:
    return node.start_point[0] + 1


def named_children(node: Node) -> Iterator[Node]:
    for child in node.named_children:
        if child.type not in COMMENT_NODE_TYPES:
            yield child


def first_named_child(node: Node) -> Node | None:
    return next(named_children(node), None)


def unwrap_parentheses(node: Node | None) -> Node | None:
    while node is not None and node.type == "parenthesized_expression":
        node = first_named_child(node)
    return node


def get_operator(node: Node) -> str | None:
    operator = node.child_by_field_name("operator")
    return operator.type if operator is not None else None


def is_function_node(node: Node) -> bool:
    return node.type in FUNCTION_NODE_TYPES


def string_literal_value(node: Node) -> str:
    """Content of a `string` node without its quotes."""
    text = safe_decode_text(node) or ""
    if len(text) >= 2 and text[0] in "\"'" and text[-1] == text[0]:
        return text[1:-1]
    return text


def numeric_literal_key(node: Node) -> str:
    """Property name a numeric key stands for, e.g. `0x10` -> `16`."""
    text = (safe_decode_text(node) or "").replace("_", "")
    try:
        return str(int(text, 0))
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return text
    if number.is_integer():
        return str(int(number))
    return repr(number)
