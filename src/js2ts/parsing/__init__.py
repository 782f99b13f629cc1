"""JavaScript parsing on top of Tree-sitter."""

from js2ts.parsing.parser import JavaScriptParser, SyntaxIssue, ValidationResult

__all__ = [
    "JavaScriptParser",
    "SyntaxIssue",
    "ValidationResult",
]
