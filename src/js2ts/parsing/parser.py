from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel
from tree_sitter_language_pack import get_parser

from js2ts.core.errors import ParsingError

if TYPE_CHECKING:
    from tree_sitter import Node, Parser, Tree

logger = logging.getLogger(__name__)


class SyntaxIssue(BaseModel):
    message: str
    line: int
    column: int


class ValidationResult(BaseModel):
    valid: bool
    error: SyntaxIssue | None = None


class JavaScriptParser:
    LANGUAGE_ID = "javascript"

    def __init__(self) -> None:
        self._parser: Parser | None = None

    def _get_parser(self) -> Parser:
        if self._parser is None:
            self._parser = get_parser(self.LANGUAGE_ID)
        return self._parser

    def parse(self, source: str, file_path: str = "<string>") -> Tree:
        """Parse JavaScript source into a tree-sitter tree.

        Raises:
            ParsingError: If the source contains a syntax error. `line` is
                1-based and `column` 0-based.
        """
        tree = self._get_parser().parse(source.encode("utf-8"))
        issue = self._find_syntax_issue(tree.root_node)
        if issue is not None:
            logger.debug(
                f"Syntax error in {file_path} at {issue.line}:{issue.column}: {issue.message}"
            )
            raise ParsingError(
                issue.message,
                line=issue.line,
                column=issue.column,
                file_path=file_path,
            )
        return tree

    def validate(self, source: str) -> ValidationResult:
        tree = self._get_parser().parse(source.encode("utf-8"))
        issue = self._find_syntax_issue(tree.root_node)
        if issue is None:
            return ValidationResult(valid=True)
        return ValidationResult(valid=False, error=issue)

    def _find_syntax_issue(self, root: Node) -> SyntaxIssue | None:
        if not root.has_error:
            return None

        stack = [root]
        while stack:
            current = stack.pop()
            if current.is_missing:
                return SyntaxIssue(
                    message=f"Missing {current.type}",
                    line=current.start_point[0] + 1,
                    column=current.start_point[1],
                )
            if current.type == "ERROR":
                token = current.text.decode("utf-8", errors="replace") if current.text else ""
                token = token.splitlines()[0] if token else ""
                return SyntaxIssue(
                    message=f"Unexpected token {token!r}" if token else "Unexpected token",
                    line=current.start_point[0] + 1,
                    column=current.start_point[1],
                )
            stack.extend(
                reversed([child for child in current.children if child.has_error or child.is_missing])
            )

        return SyntaxIssue(message="Syntax error", line=1, column=0)
