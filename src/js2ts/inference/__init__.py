"""Type inference for JavaScript-to-TypeScript conversion.

Infers TypeScript type descriptors, each with a confidence score, for
JavaScript expressions, object literals and function signatures parsed by
Tree-sitter.

Key components:
- TypeInferrer: Expression, object-shape and function-signature inference
- TypeInferenceEngine: Top-level declarations of a whole source unit
- TypeContext: Per-unit scope and interface registry

Usage:
    from js2ts.inference import TypeInferenceEngine

    report = TypeInferenceEngine().infer_source("const user = { name: 'Ada' };")
    report.get_variable("user").type.value  # "{ name: string }"
"""

from js2ts.inference.engine import SourceTypeReport, TypeInferenceEngine
from js2ts.inference.inferrer import TypeInferrer
from js2ts.inference.models import (
    InferredType,
    InterfaceDefinition,
    InterfaceRegistry,
    PropertyDefinition,
    TypeContext,
    TypeKind,
    are_interfaces_equal,
    are_types_equal,
    create_array_type,
    create_function_type,
    create_interface_definition,
    create_object_type,
    create_primitive_type,
    create_property_definition,
    create_type_context,
    create_union_type,
    create_unknown_type,
    hash_interface_definition,
    merge_types,
)

__all__ = [
    "InferredType",
    "InterfaceDefinition",
    "InterfaceRegistry",
    "PropertyDefinition",
    "SourceTypeReport",
    "TypeContext",
    "TypeInferenceEngine",
    "TypeInferrer",
    "TypeKind",
    "are_interfaces_equal",
    "are_types_equal",
    "create_array_type",
    "create_function_type",
    "create_interface_definition",
    "create_object_type",
    "create_primitive_type",
    "create_property_definition",
    "create_type_context",
    "create_union_type",
    "create_unknown_type",
    "hash_interface_definition",
    "merge_types",
]
