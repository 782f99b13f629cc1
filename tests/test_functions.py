"""Tests for function return, parameter and signature inference."""

import pytest

from js2ts.inference.models import TypeKind, create_array_type


class TestReturnTypes:
    def test_single_return(self, inferrer, context, function_node):
        fn = function_node("function answer() { return 42; }")

        t = inferrer.infer_function_return_type(fn, context)

        assert t.value == "number"
        assert t.confidence == 1.0

    @pytest.mark.parametrize(
        "code",
        [
            "function noop() {}",
            "function bail() { return; }",
            "function log(msg) { console.log(msg); }",
        ],
    )
    def test_void(self, inferrer, context, function_node, code):
        t = inferrer.infer_function_return_type(function_node(code), context)

        assert t.value == "void"
        assert t.confidence == 1.0

    def test_branches_with_different_types(self, inferrer, context, function_node):
        fn = function_node(
            """
            function pick(flag) {
                if (flag) {
                    return "yes";
                } else {
                    return 0;
                }
            }
            """
        )

        t = inferrer.infer_function_return_type(fn, context)

        assert t.kind == TypeKind.UNION
        assert t.value == "string | number"
        assert t.confidence == pytest.approx(0.85)
        assert t.confidence < 1.0

    def test_branches_with_same_type_keep_lowest_confidence(self, inferrer, context, function_node):
        fn = function_node(
            """
            function describe(x) {
                if (x) return "positive";
                return x + "";
            }
            """
        )

        t = inferrer.infer_function_return_type(fn, context)

        assert t.value == "string"
        assert t.confidence == 0.95

    @pytest.mark.parametrize(
        "statement",
        [
            'for (let i = 0; i < 10; i++) { return "x"; }',
            'for (const key in items) { return "x"; }',
            'for (const item of items) { if (item) { return "x"; } }',
            'while (items.length) { return "x"; }',
            'do { return "x"; } while (items.length);',
            'outer: for (const item of items) { return "x"; }',
            'block: { return "x"; }',
        ],
    )
    def test_returns_inside_loops_and_labels(self, inferrer, context, function_node, statement):
        fn = function_node(f"function search(items) {{ {statement} return 1; }}")

        t = inferrer.infer_function_return_type(fn, context)

        assert t.kind == TypeKind.UNION
        assert t.value == "string | number"
        assert t.confidence == pytest.approx(0.85)

    def test_nested_loops(self, inferrer, context, function_node):
        fn = function_node(
            """
            function search(grid) {
                outer: for (const row of grid) {
                    for (let i = 0; i < row.length; i++) {
                        while (true) {
                            return true;
                        }
                    }
                }
                return null;
            }
            """
        )

        t = inferrer.infer_function_return_type(fn, context)

        assert t.value == "boolean | null"
        assert t.confidence == pytest.approx(0.85)

    def test_returns_inside_switch(self, inferrer, context, function_node):
        fn = function_node(
            """
            function label(code) {
                switch (code) {
                    case 1:
                        return "one";
                    case 2: {
                        return "two";
                    }
                    default:
                        return "many";
                }
            }
            """
        )

        t = inferrer.infer_function_return_type(fn, context)

        assert t.value == "string"
        assert t.confidence == 1.0

    def test_returns_inside_try(self, inferrer, context, function_node):
        fn = function_node(
            """
            function safe(fn) {
                try {
                    return true;
                } catch (error) {
                    return false;
                } finally {
                    cleanup();
                }
            }
            """
        )

        t = inferrer.infer_function_return_type(fn, context)

        assert t.value == "boolean"

    def test_nested_functions_are_ignored(self, inferrer, context, function_node):
        fn = function_node(
            """
            function outer() {
                function inner() { return "inner"; }
                const arrow = () => { return true; };
                const expr = function () { return null; };
                return 1;
            }
            """
        )

        t = inferrer.infer_function_return_type(fn, context)

        assert t.value == "number"
        assert t.confidence == 1.0

    def test_arrow_expression_body(self, inferrer, context, function_node):
        fn = function_node("const double = (n) => n * 2;")

        t = inferrer.infer_function_return_type(fn, context)

        assert t.value == "number"

    def test_arrow_block_body(self, inferrer, context, function_node):
        fn = function_node('const greet = () => { return "hi"; };')

        t = inferrer.infer_function_return_type(fn, context)

        assert t.value == "string"

    def test_function_expression(self, inferrer, context, function_node):
        fn = function_node("const check = function () { return !ready; };")

        t = inferrer.infer_function_return_type(fn, context)

        assert t.value == "boolean"


class TestParameterTypes:
    """Parameter types come from defaults, patterns and usage."""

    def test_arithmetic_usage(self, inferrer, context, function_node):
        fn = function_node("function sub(a, b) { return a - b; }")

        params = inferrer.infer_parameter_types(fn, context)

        assert [p.value for p in params] == ["number", "number"]
        assert all(p.confidence == 0.8 for p in params)

    def test_negation_usage(self, inferrer, context, function_node):
        fn = function_node("function toggle(flag) { if (!flag) { return 1; } }")

        (param,) = inferrer.infer_parameter_types(fn, context)

        assert param.value == "boolean"
        assert param.confidence == 0.7

    def test_numeric_unary_usage(self, inferrer, context, function_node):
        fn = function_node("function negate(n) { return -n; }")

        (param,) = inferrer.infer_parameter_types(fn, context)

        assert param.value == "number"
        assert param.confidence == 0.8

    def test_string_method_usage(self, inferrer, context, function_node):
        fn = function_node("function shout(text) { return text.toUpperCase(); }")

        (param,) = inferrer.infer_parameter_types(fn, context)

        assert param.value == "string"
        assert param.confidence == 0.7

    def test_array_method_usage(self, inferrer, context, function_node):
        fn = function_node("function total(values) { return values.reduce(add, 0); }")

        (param,) = inferrer.infer_parameter_types(fn, context)

        assert param.kind == TypeKind.ARRAY
        assert param.value == "unknown[]"
        assert param.confidence == 0.7

    def test_ambiguous_method_is_not_evidence(self, inferrer, context, function_node):
        fn = function_node("function has(collection) { return collection.includes(1); }")

        (param,) = inferrer.infer_parameter_types(fn, context)

        assert param.kind == TypeKind.UNKNOWN
        assert param.confidence == 0.3

    def test_called_parameter(self, inferrer, context, function_node):
        fn = function_node("function run(callback) { callback(); }")

        (param,) = inferrer.infer_parameter_types(fn, context)

        assert param.value == "Function"
        assert param.confidence == 0.8

    def test_unused_parameter(self, inferrer, context, function_node):
        fn = function_node("function ignore(x) { return 1; }")

        (param,) = inferrer.infer_parameter_types(fn, context)

        assert param.kind == TypeKind.UNKNOWN
        assert param.confidence == 0.3

    def test_conflicting_evidence_forms_union(self, inferrer, context, function_node):
        fn = function_node(
            """
            function mixed(v) {
                v.trim();
                return v * 2;
            }
            """
        )

        (param,) = inferrer.infer_parameter_types(fn, context)

        assert param.kind == TypeKind.UNION
        assert param.value == "string | number"
        assert param.confidence == pytest.approx(0.75)

    def test_usage_inside_nested_function_is_ignored(self, inferrer, context, function_node):
        fn = function_node(
            """
            function outer(a) {
                const inner = () => a * 2;
                return 1;
            }
            """
        )

        (param,) = inferrer.infer_parameter_types(fn, context)

        assert param.kind == TypeKind.UNKNOWN

    def test_usage_in_declaration(self, inferrer, context, function_node):
        fn = function_node("function area(r) { const sq = r * r; return sq; }")

        (param,) = inferrer.infer_parameter_types(fn, context)

        assert param.value == "number"

    @pytest.mark.parametrize(
        "code,expected",
        [
            ("function f(count = 10) {}", "number"),
            ('function f(name = "guest") {}', "string"),
            ("function f(enabled = false) {}", "boolean"),
        ],
    )
    def test_default_values(self, inferrer, context, function_node, code, expected):
        (param,) = inferrer.infer_parameter_types(function_node(code), context)

        assert param.value == expected
        assert param.confidence == 1.0

    def test_rest_parameter(self, inferrer, context, function_node):
        (param,) = inferrer.infer_parameter_types(function_node("function f(...args) {}"), context)

        assert param.kind == TypeKind.ARRAY
        assert param.value == "unknown[]"

    def test_rest_parameter_uses_scope(self, inferrer, context, function_node):
        context.scope["args"] = create_array_type("number", 0.8)

        (param,) = inferrer.infer_parameter_types(function_node("function f(...args) {}"), context)

        assert param.value == "number[][]"
        assert param.confidence == pytest.approx(0.72)

    def test_object_destructuring(self, inferrer, context, function_node):
        (param,) = inferrer.infer_parameter_types(function_node("function f({ a, b }) {}"), context)

        assert param.kind == TypeKind.OBJECT
        assert param.value == "object"
        assert param.confidence == 0.5

    def test_array_destructuring(self, inferrer, context, function_node):
        (param,) = inferrer.infer_parameter_types(function_node("function f([a, b]) {}"), context)

        assert param.value == "unknown[]"
        assert param.confidence == 0.5

    def test_single_arrow_parameter(self, inferrer, context, function_node):
        (param,) = inferrer.infer_parameter_types(function_node("const f = x => x * 2;"), context)

        assert param.value == "number"
        assert param.confidence == 0.8

    def test_no_parameters(self, inferrer, context, function_node):
        assert inferrer.infer_parameter_types(function_node("function f() {}"), context) == []


class TestSignatures:
    def test_signature_uses_declared_names(self, inferrer, context, function_node):
        fn = function_node("function multiply(a, b) { return a * b; }")

        t = inferrer.infer_function_signature(fn, context)

        assert t.kind == TypeKind.FUNCTION
        assert t.value == "(a: number, b: number) => number"
        assert t.confidence == 1.0

    def test_signature_with_rest_and_pattern(self, inferrer, context, function_node):
        fn = function_node("function format(first, { sep }, ...rest) { return first * 2; }")

        t = inferrer.infer_function_signature(fn, context)

        assert t.value == "(first: number, arg1: object, ...rest: unknown[]) => number"

    def test_signature_of_void_function(self, inferrer, context, function_node):
        t = inferrer.infer_function_signature(function_node("function reset() {}"), context)

        assert t.value == "() => void"
