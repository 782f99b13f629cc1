from __future__ import annotations

import hashlib
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

UNION_SEPARATOR = " | "
INTERFACE_NAME_PREFIX = "Interface"


class TypeKind(str, Enum):
    PRIMITIVE = "primitive"
    ARRAY = "array"
    OBJECT = "object"
    FUNCTION = "function"
    UNION = "union"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class PropertyDefinition:
    name: str
    type: str
    optional: bool = False
    readonly: bool = False

    @property
    def signature(self) -> str:
        optional = "?" if self.optional else ""
        readonly = "!" if self.readonly else ""
        return f"{self.name}{optional}{readonly}:{self.type}"


@dataclass(frozen=True)
class InferredType:
    """A type guess for a node, rendered as a TypeScript descriptor.

    `value` is the printed descriptor. The structured fields keep the parts
    the descriptor was rendered from so that consumers never re-parse it:
    `element` for arrays, `members` for unions and `properties` for object
    shapes.
    """

    kind: TypeKind
    value: str
    confidence: float = 1.0
    needs_interface: bool = False
    interface_name: str | None = None
    element: InferredType | None = None
    members: tuple[str, ...] = ()
    properties: tuple[PropertyDefinition, ...] = ()

    @property
    def is_unknown(self) -> bool:
        return self.kind == TypeKind.UNKNOWN

    @property
    def element_type(self) -> str | None:
        return self.element.value if self.element is not None else None

    def member_descriptors(self) -> tuple[str, ...]:
        if self.kind == TypeKind.UNION:
            return self.members or tuple(
                m.strip() for m in self.value.split(UNION_SEPARATOR)
            )
        return (self.value,)

    def __str__(self) -> str:
        return self.value


@dataclass
class InterfaceDefinition:
    name: str
    properties: list[PropertyDefinition] = field(default_factory=list)
    usage_count: int = 1
    hash: str = ""


class InterfaceRegistry:
    """Interfaces discovered during one inference pass, keyed by name.

    A secondary index by shape hash lets structurally identical shapes found
    at different sites converge on a single declaration.
    """

    def __init__(self) -> None:
        self._definitions: dict[str, InterfaceDefinition] = {}
        self._hash_index: dict[str, str] = {}

    def register(self, definition: InterfaceDefinition) -> InterfaceDefinition:
        """Add `definition`, or return the registered one with the same hash.

        A new shape whose name is already taken by a different shape is
        registered under the next free `InterfaceN` name instead; the returned
        definition carries the name actually used.
        """
        existing = self.find_by_hash(definition.hash)
        if existing is not None:
            existing.usage_count += 1
            return existing

        if definition.name in self._definitions:
            definition = replace(definition, name=self.next_name())

        self._definitions[definition.name] = definition
        self._hash_index[definition.hash] = definition.name
        return definition

    def next_name(self) -> str:
        index = len(self._definitions) + 1
        while f"{INTERFACE_NAME_PREFIX}{index}" in self._definitions:
            index += 1
        return f"{INTERFACE_NAME_PREFIX}{index}"

    def find_by_hash(self, shape_hash: str) -> InterfaceDefinition | None:
        name = self._hash_index.get(shape_hash)
        if name is None:
            return None
        return self._definitions.get(name)

    def get(self, name: str) -> InterfaceDefinition | None:
        return self._definitions.get(name)

    def __getitem__(self, name: str) -> InterfaceDefinition:
        return self._definitions[name]

    def __contains__(self, name: object) -> bool:
        return name in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)

    def __iter__(self) -> Iterator[str]:
        return iter(self._definitions)

    def items(self):
        return self._definitions.items()

    def values(self):
        return self._definitions.values()


@dataclass
class TypeContext:
    """Per-translation-unit inference state.

    `scope` is seeded by the binder with already inferred names, `interfaces`
    grows monotonically while the unit is analysed and `imports` is carried
    through untouched.
    """

    scope: dict[str, InferredType] = field(default_factory=dict)
    interfaces: InterfaceRegistry = field(default_factory=InterfaceRegistry)
    imports: list[Any] = field(default_factory=list)


def create_type_context() -> TypeContext:
    return TypeContext()


def create_primitive_type(value: str, confidence: float = 1.0) -> InferredType:
    return InferredType(kind=TypeKind.PRIMITIVE, value=value, confidence=confidence)


def _wrap_element(element_type: str) -> str:
    if UNION_SEPARATOR in element_type or "=>" in element_type:
        return f"({element_type})"
    return element_type


def create_array_type(
    element_type: str | InferredType,
    confidence: float = 1.0,
) -> InferredType:
    """Array of `element_type`, rendered as the element descriptor plus `[]`.

    Union and function elements are parenthesized, `(string | number)[]`, so
    the descriptor stays a valid TypeScript array type.
    """
    if isinstance(element_type, InferredType):
        element = element_type
    elif element_type == "unknown":
        element = create_unknown_type()
    else:
        element = create_primitive_type(element_type)

    return InferredType(
        kind=TypeKind.ARRAY,
        value=f"{_wrap_element(element.value)}[]",
        confidence=confidence,
        element=element,
    )


def create_object_type(
    value: str,
    confidence: float = 1.0,
    needs_interface: bool = False,
    interface_name: str | None = None,
    properties: Sequence[PropertyDefinition] = (),
) -> InferredType:
    return InferredType(
        kind=TypeKind.OBJECT,
        value=value,
        confidence=confidence,
        needs_interface=needs_interface,
        interface_name=interface_name,
        properties=tuple(properties),
    )


def create_function_type(value: str, confidence: float = 1.0) -> InferredType:
    return InferredType(kind=TypeKind.FUNCTION, value=value, confidence=confidence)


def create_union_type(types: Sequence[str], confidence: float = 1.0) -> InferredType:
    members = tuple(types)
    return InferredType(
        kind=TypeKind.UNION,
        value=UNION_SEPARATOR.join(members),
        confidence=confidence,
        members=members,
    )


def create_unknown_type(confidence: float = 0.0) -> InferredType:
    return InferredType(kind=TypeKind.UNKNOWN, value="unknown", confidence=confidence)


def are_types_equal(first: InferredType, second: InferredType) -> bool:
    return first.kind == second.kind and first.value == second.value


def merge_types(first: InferredType, second: InferredType) -> InferredType:
    """Combine two guesses for the same value.

    Different types become a flat union at the mean of the two confidences.
    Folding more than two types must go left to right, so the confidence of
    an n-way merge is the result of repeated pairwise averaging.
    """
    if are_types_equal(first, second):
        return first if first.confidence >= second.confidence else second

    if first.is_unknown:
        return second
    if second.is_unknown:
        return first

    members: dict[str, None] = {}
    for descriptor in (*first.member_descriptors(), *second.member_descriptors()):
        members.setdefault(descriptor, None)

    confidence = (first.confidence + second.confidence) / 2
    return create_union_type(list(members), confidence)


def fold_types(types: Sequence[InferredType]) -> InferredType:
    merged = types[0]
    for inferred in types[1:]:
        merged = merge_types(merged, inferred)
    return merged


def create_property_definition(
    name: str,
    type: str,
    optional: bool = False,
    readonly: bool = False,
) -> PropertyDefinition:
    return PropertyDefinition(name=name, type=type, optional=optional, readonly=readonly)


def hash_interface_definition(properties: Sequence[PropertyDefinition]) -> str:
    ordered = sorted(properties, key=lambda p: p.name)
    signature = "|".join(p.signature for p in ordered)
    return hashlib.sha256(signature.encode("utf-8")).hexdigest()


def create_interface_definition(
    name: str,
    properties: Sequence[PropertyDefinition],
) -> InterfaceDefinition:
    return InterfaceDefinition(
        name=name,
        properties=list(properties),
        usage_count=1,
        hash=hash_interface_definition(properties),
    )


def are_interfaces_equal(first: InterfaceDefinition, second: InterfaceDefinition) -> bool:
    return first.hash == second.hash
