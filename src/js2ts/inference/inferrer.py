from __future__ import annotations

from typing import TYPE_CHECKING

from js2ts.inference.expressions import ExpressionTypeInferrer
from js2ts.inference.functions import FunctionSignatureInferrer
from js2ts.inference.shapes import ObjectShapeSynthesizer

if TYPE_CHECKING:
    from tree_sitter import Node

    from js2ts.inference.models import InferredType, TypeContext


class TypeInferrer:
    """Entry point bundling the expression, shape and signature inferrers."""

    def __init__(self) -> None:
        self.expressions = ExpressionTypeInferrer()
        self.functions = FunctionSignatureInferrer(self.expressions)
        self.object_shapes = ObjectShapeSynthesizer(self.expressions, self.functions)
        self.expressions.object_shapes = self.object_shapes

    def infer_expression_type(self, node: Node, context: TypeContext) -> InferredType:
        return self.expressions.infer_expression_type(node, context)

    def infer_variable_type(self, declarator: Node, context: TypeContext) -> InferredType:
        return self.expressions.infer_variable_type(declarator, context)

    def infer_object_shape(self, node: Node, context: TypeContext) -> InferredType:
        return self.object_shapes.infer_object_shape(node, context)

    def register_interface(self, shape: InferredType, context: TypeContext) -> InferredType:
        return self.object_shapes.register_interface(shape, context)

    def infer_function_return_type(self, node: Node, context: TypeContext) -> InferredType:
        return self.functions.infer_function_return_type(node, context)

    def infer_parameter_types(self, node: Node, context: TypeContext) -> list[InferredType]:
        return self.functions.infer_parameter_types(node, context)

    def infer_function_signature(self, node: Node, context: TypeContext) -> InferredType:
        return self.functions.infer_function_signature(node, context)
