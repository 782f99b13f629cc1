"""Pytest configuration and fixtures."""

from collections.abc import Callable
from pathlib import Path

import pytest
from dotenv import load_dotenv

from js2ts.inference import TypeInferrer, create_type_context
from js2ts.parsing import JavaScriptParser

# Load .env file at test collection time
load_dotenv(Path(__file__).parent.parent / ".env")


@pytest.fixture
def parser() -> JavaScriptParser:
    return JavaScriptParser()


@pytest.fixture
def inferrer() -> TypeInferrer:
    return TypeInferrer()


@pytest.fixture
def context():
    return create_type_context()


@pytest.fixture
def first_declarator(parser: JavaScriptParser) -> Callable:
    """Parse code and return its first `variable_declarator` node."""

    def _first_declarator(code: str):
        tree = parser.parse(code)
        declaration = tree.root_node.named_children[0]
        return next(
            child for child in declaration.named_children if child.type == "variable_declarator"
        )

    return _first_declarator


@pytest.fixture
def expression(first_declarator: Callable) -> Callable:
    """Parse `const x = <code>;` and return the initializer node."""

    def _expression(code: str):
        return first_declarator(f"const x = {code};").child_by_field_name("value")

    return _expression


@pytest.fixture
def function_node(parser: JavaScriptParser, first_declarator: Callable) -> Callable:
    """Return the first function in code: a declaration or a declarator's value."""

    def _function_node(code: str):
        tree = parser.parse(code)
        first = tree.root_node.named_children[0]
        if first.type in ("lexical_declaration", "variable_declaration"):
            return first_declarator(code).child_by_field_name("value")
        return first

    return _function_node
