from __future__ import annotations

import dataclasses
import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from js2ts.config import Settings, get_settings
from js2ts.inference.functions import build_function_signature, parameter_name, parameter_nodes
from js2ts.inference.inferrer import TypeInferrer
from js2ts.inference.models import InferredType, TypeContext, create_type_context
from js2ts.parsing.parser import JavaScriptParser
from js2ts.parsing.syntax import get_node_line, named_children, safe_decode_text

if TYPE_CHECKING:
    from tree_sitter import Node

logger = logging.getLogger(__name__)

DECLARATION_NODE_TYPES = frozenset({"lexical_declaration", "variable_declaration"})
FUNCTION_DECLARATION_NODE_TYPES = frozenset(
    {"function_declaration", "generator_function_declaration"}
)


class TypeInfo(BaseModel):
    kind: str
    value: str
    confidence: float
    interface_name: str | None = None

    @classmethod
    def from_inferred(cls, inferred: InferredType) -> TypeInfo:
        return cls(
            kind=inferred.kind.value,
            value=inferred.value,
            confidence=inferred.confidence,
            interface_name=inferred.interface_name if inferred.needs_interface else None,
        )

    @property
    def annotation(self) -> str:
        return self.interface_name or self.value


class VariableTypeInfo(BaseModel):
    name: str
    type: TypeInfo
    line_number: int


class ParameterTypeInfo(BaseModel):
    name: str | None
    type: TypeInfo


class FunctionTypeInfo(BaseModel):
    name: str
    parameters: list[ParameterTypeInfo] = Field(default_factory=list)
    return_type: TypeInfo
    line_number: int


class PropertyInfo(BaseModel):
    name: str
    type: str
    optional: bool = False
    readonly: bool = False


class InterfaceInfo(BaseModel):
    name: str
    properties: list[PropertyInfo] = Field(default_factory=list)
    usage_count: int = 1
    hash: str


class SourceTypeReport(BaseModel):
    file_path: str
    variables: list[VariableTypeInfo] = Field(default_factory=list)
    functions: list[FunctionTypeInfo] = Field(default_factory=list)
    interfaces: list[InterfaceInfo] = Field(default_factory=list)

    def get_variable(self, name: str) -> VariableTypeInfo | None:
        return next((v for v in self.variables if v.name == name), None)

    def get_function(self, name: str) -> FunctionTypeInfo | None:
        return next((f for f in self.functions if f.name == name), None)


class TypeInferenceEngine:
    """Infers types for the top-level declarations of one JavaScript unit.

    Declarations are visited in source order and each inferred binding is
    added to the unit's scope, so later declarations see earlier ones.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        parser: JavaScriptParser | None = None,
        inferrer: TypeInferrer | None = None,
    ):
        self.settings = settings or get_settings()
        self.parser = parser or JavaScriptParser()
        self.inferrer = inferrer or TypeInferrer()

    def infer_source(self, source: str, file_path: str = "<string>") -> SourceTypeReport:
        tree = self.parser.parse(source, file_path)
        context = create_type_context()
        report = SourceTypeReport(file_path=file_path)

        for statement in named_children(tree.root_node):
            self._visit_statement(statement, context, report)

        report.interfaces = [
            InterfaceInfo(
                name=definition.name,
                properties=[
                    PropertyInfo(
                        name=p.name, type=p.type, optional=p.optional, readonly=p.readonly
                    )
                    for p in definition.properties
                ],
                usage_count=definition.usage_count,
                hash=definition.hash,
            )
            for definition in context.interfaces.values()
        ]
        logger.debug(
            f"Inferred {len(report.variables)} variables, {len(report.functions)} functions "
            f"and {len(report.interfaces)} interfaces in {file_path}"
        )
        return report

    def _visit_statement(
        self,
        statement: Node,
        context: TypeContext,
        report: SourceTypeReport,
    ) -> None:
        if statement.type == "export_statement":
            declaration = statement.child_by_field_name("declaration")
            if declaration is not None:
                self._visit_statement(declaration, context, report)
            return

        if statement.type in DECLARATION_NODE_TYPES:
            for declarator in named_children(statement):
                if declarator.type == "variable_declarator":
                    self._visit_declarator(declarator, context, report)

        elif statement.type in FUNCTION_DECLARATION_NODE_TYPES:
            self._visit_function(statement, context, report)

    def _visit_declarator(
        self,
        declarator: Node,
        context: TypeContext,
        report: SourceTypeReport,
    ) -> None:
        name_node = declarator.child_by_field_name("name")
        if name_node is None or name_node.type != "identifier":
            return
        name = safe_decode_text(name_node) or ""

        inferred = self.inferrer.infer_variable_type(declarator, context)
        if inferred.needs_interface:
            if self.settings.prefer_interfaces:
                inferred = self.inferrer.register_interface(inferred, context)
            else:
                inferred = dataclasses.replace(inferred, needs_interface=False, interface_name=None)

        context.scope[name] = inferred
        report.variables.append(
            VariableTypeInfo(
                name=name,
                type=TypeInfo.from_inferred(inferred),
                line_number=get_node_line(declarator),
            )
        )

    def _visit_function(
        self,
        node: Node,
        context: TypeContext,
        report: SourceTypeReport,
    ) -> None:
        name = safe_decode_text(node.child_by_field_name("name"))
        if not name:
            return

        parameter_types = self.inferrer.infer_parameter_types(node, context)
        return_type = self.inferrer.infer_function_return_type(node, context)
        context.scope[name] = build_function_signature(node, parameter_types, return_type)

        report.functions.append(
            FunctionTypeInfo(
                name=name,
                parameters=[
                    ParameterTypeInfo(name=parameter_name(param), type=TypeInfo.from_inferred(t))
                    for param, t in zip(parameter_nodes(node), parameter_types)
                ],
                return_type=TypeInfo.from_inferred(return_type),
                line_number=get_node_line(node),
            )
        )
