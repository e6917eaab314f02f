import pytest
from hypothesis import given, strategies as st

from beavieeer.evaluation.evaluator import evaluate
from beavieeer.reader.parser import parse
from beavieeer.types.environment import Environment
from beavieeer.types.objects import Error, Function, Integer, NULL, TRUE, FALSE, is_truthy


@pytest.mark.parametrize(
    "source,expected",
    [
        ("5", "5"),
        ("-5", "-5"),
        ("+5", "5"),
        ("--5", "5"),
        ("5 + 5 + 5 + 5 - 10", "10"),
        ("2 * 2 * 2 * 2 * 2", "32"),
        ("-50 + 100 + -50", "0"),
        ("2 * (5 + 10)", "30"),
        ("3 * 3 * 3 + 10", "37"),
        ("(5 + 10 * 2 + 15 / 3) * 2 + -10", "50"),
        ("50 / 2 * 2 + 10 - 5", "55"),
        ("7 / 2", "3"),
        ("-7 / 2", "-3"),
        ("7 / -2", "-3"),
    ],
)
def test_integer_arithmetic(run, source, expected):
    assert run(source) == expected


@pytest.mark.parametrize(
    "source,expected",
    [
        ("true", "true"),
        ("false", "false"),
        ("1 < 2", "true"),
        ("1 > 2", "false"),
        ("1 <= 1", "true"),
        ("2 >= 3", "false"),
        ("1 == 1", "true"),
        ("1 != 1", "false"),
        ("true == true", "true"),
        ("true != false", "true"),
        ("(1 < 2) == true", "true"),
        ("(1 > 2) == true", "false"),
        ("!true", "false"),
        ("!false", "true"),
        ("!5", "false"),
        ("!!5", "true"),
        ("!0", "false"),
        ('!""', "false"),
        ("!if (false) { 1 }", "true"),
    ],
)
def test_boolean_expressions(run, source, expected):
    assert run(source) == expected


@pytest.mark.parametrize(
    "source,expected",
    [
        ("if (0) { 1 } else { 2 }", "1"),
        ('if ("") { 1 } else { 2 }', "1"),
        ("if ([]) { 1 } else { 2 }", "1"),
        ("if (false) { 1 } else { 2 }", "2"),
        ("let nothing = if (false) { 1 }; if (nothing) { 1 } else { 2 }", "2"),
        ("if (1 < 2) { 10 }", "10"),
        ("if (1 > 2) { 10 }", "null"),
        ("if (true) { }", "null"),
        ("if (1 > 2) { 10 } else { 20 }", "20"),
    ],
)
def test_conditionals_and_truthiness(run, source, expected):
    assert run(source) == expected


def test_is_truthy_table():
    assert is_truthy(Integer(0))
    assert is_truthy(TRUE)
    assert not is_truthy(FALSE)
    assert not is_truthy(NULL)


@pytest.mark.parametrize(
    "source,expected",
    [
        ("return 10;", "10"),
        ("return 10; 9;", "10"),
        ("return 2 * 5; 9;", "10"),
        ("9; return 2 * 5; 9;", "10"),
        ("if (10 > 1) { if (10 > 1) { return 10; } return 1; }", "10"),
        ("let f = fun(x) { return x; x + 10; }; f(10);", "10"),
        ("let f = fun(x) { let result = x + 10; return result; return 10; }; f(10);", "20"),
        ("let f = fun() { if (true) { return 1; } 2 }; f() + 10", "11"),
    ],
)
def test_return_statements(run, source, expected):
    assert run(source) == expected


@pytest.mark.parametrize(
    "source,expected",
    [
        ("5 + true;", "type mismatch: INTEGER + BOOLEAN"),
        ("5 + true; 5;", "type mismatch: INTEGER + BOOLEAN"),
        ('1 + "a"', "type mismatch: INTEGER + STRING"),
        ("-true", "type mismatch: -BOOLEAN"),
        ('-"a"', "type mismatch: -STRING"),
        ("true + false;", "unknown operator: BOOLEAN + BOOLEAN"),
        ("true < false", "unknown operator: BOOLEAN < BOOLEAN"),
        ("5; true + false; 5", "unknown operator: BOOLEAN + BOOLEAN"),
        ("if (10 > 1) { true + false; }", "unknown operator: BOOLEAN + BOOLEAN"),
        ("if (10 > 1) { if (10 > 1) { return true + false; } return 1; }",
         "unknown operator: BOOLEAN + BOOLEAN"),
        ('"Hello" - "World"', "unknown operator: STRING - STRING"),
        ('"a" == "a"', "unknown operator: STRING == STRING"),
        ("[1] + [2]", "unknown operator: ARRAY + ARRAY"),
        ("foobar", "identifier not found: foobar"),
        ("1 / 0", "division by zero"),
        ("[1, 1 / 0, 3]", "division by zero"),
        ('{"a": 1 / 0}', "division by zero"),
        ("len(1 / 0)", "division by zero"),
        ("(1 / 0)(2)", "division by zero"),
        ("if (1 / 0) { 1 }", "division by zero"),
        ("let x = 1 / 0; x", "division by zero"),
        ("5(1)", "not a function: INTEGER"),
        ('"f"()', "not a function: STRING"),
        ("fun(x) { x }(1, 2)", "wrong number of arguments: want=1, got=2"),
        ("fun(x, y) { x }(1)", "wrong number of arguments: want=2, got=1"),
        ("len(1, 2)", "wrong number of arguments to `len`: want=1, got=2"),
        ("1[0]", "type mismatch: index operator not supported: INTEGER"),
        ("[1][true]", "type mismatch: ARRAY index must be INTEGER, got BOOLEAN"),
        ('{"a": 1}[fun(x) { x }]', "unusable as map key: FUNCTION"),
        ("9223372036854775807 + 1", "integer overflow: 9223372036854775807 + 1"),
        ("-9223372036854775807 - 2", "integer overflow: -9223372036854775807 - 2"),
        ("4611686018427387904 * 2", "integer overflow: 4611686018427387904 * 2"),
    ],
)
def test_runtime_errors(interp, source, expected):
    result = interp.eval(source)
    assert isinstance(result, Error)
    assert result.message == expected
    assert str(result) == f"ERROR: {expected}"


def test_error_stops_program(interp, out):
    assert isinstance(interp.eval('print("before"); 1 + true; print("after");'), Error)
    assert out.getvalue() == "before\n"


def test_let_yields_no_value(interp):
    assert interp.eval("let a = 5;") is None
    assert interp.eval("let a = 5; a * 2; let b = 1;").value == 10


@pytest.mark.parametrize(
    "source,expected",
    [
        ("let a = 5; a;", "5"),
        ("let a = 5 * 5; a;", "25"),
        ("let a = 5; let b = a; b;", "5"),
        ("let a = 5; let b = a; let c = a + b + 5; c;", "15"),
        ("let a = 1; let a = a + 1; a", "2"),
        ("let x = 1; if (true) { let x = 2; x }", "2"),
        ("let x = 1; if (true) { let x = 2; }; x", "1"),
    ],
)
def test_let_statements_and_scoping(run, source, expected):
    assert run(source) == expected


def test_function_object(interp):
    fn = interp.eval("fun(x) { x + 2; };")
    assert isinstance(fn, Function)
    assert fn.parameters == ("x",)
    assert str(fn.body) == "{ (x + 2) }"
    assert str(fn) == "fun(x) { (x + 2) }"


@pytest.mark.parametrize(
    "source,expected",
    [
        ("let identity = fun(x) { x; }; identity(5);", "5"),
        ("let double = fun(x) { x * 2; }; double(5);", "10"),
        ("let add = fun(x, y) { x + y; }; add(5, 5);", "10"),
        ("let add = fun(x, y) { x + y; }; add(5 + 5, add(5, 5));", "20"),
        ("fun(x) { x; }(5)", "5"),
        ("let noop = fun() { }; noop()", "null"),
        ("let newAdder = fun(x) { fun(y) { x + y } }; let addTwo = newAdder(2); addTwo(3);", "5"),
        ("let apply = fun(f, x) { f(x) }; apply(fun(n) { n * n }, 7)", "49"),
        ("let fact = fun(n) { if (n < 2) { 1 } else { n * fact(n - 1) } }; fact(10)", "3628800"),
    ],
)
def test_function_application(run, source, expected):
    assert run(source) == expected


def test_counter_closure_captures_fresh_binding(run):
    run("let counter = fun() { let x = 0; fun() { x } }; let get = counter();")
    assert run("get()") == "0"
    assert run("get()") == "0"


def test_closure_sees_later_rebinding_of_captured_scope(run):
    # Environments are shared by reference, never copied.
    run("let base = 1; let f = fun() { base };")
    run("let base = 41;")
    assert run("f() + 1") == "42"


def test_arguments_are_evaluated_left_to_right(interp, out):
    interp.eval('let f = fun(a, b) { 0 }; f(print("a"), print("b"));')
    assert out.getvalue() == "a\nb\n"


@pytest.mark.parametrize(
    "source,expected",
    [
        ('"Hello World!"', "Hello World!"),
        ('"Hello" + " " + "World!"', "Hello World!"),
        ("[1, 2 * 2, 3 + 3]", "[1, 4, 6]"),
        ('["a", 1, true, [2]]', '["a", 1, true, [2]]'),
        ("[1, 2, 3][0]", "1"),
        ("[1, 2, 3][1 + 1]", "3"),
        ("let i = 0; [1][i];", "1"),
        ("[1, 2, 3][3]", "null"),
        ("[1, 2, 3][-1]", "null"),
        ("let a = [1, 2, 3]; a[0] + a[1] + a[2]", "6"),
        ("let a = [1, 2, 3]; let i = a[0]; a[i]", "2"),
        ('{"one": 1, 2: "two", true: 3}', '{"one": 1, 2: "two", true: 3}'),
        ('{"a": 5}["a"]', "5"),
        ('{"a": 5}["b"]', "null"),
        ('let key = "a"; {"a": 5}[key]', "5"),
        ("{}[1]", "null"),
        ('{1: "int", true: "bool"}[true]', "bool"),
        ('{1: "int", true: "bool"}[1]', "int"),
        ('{"k": 1, "k": 2}["k"]', "2"),
        ('{"f": fun(x) { x * 3 }}["f"](3)', "9"),
    ],
)
def test_strings_arrays_and_maps(run, source, expected):
    assert run(source) == expected


def test_evaluate_directly_with_environment(env):
    program, errors = parse("let x = 10; len([x, x])")
    assert errors == []
    assert evaluate(program, env) == Integer(2)
    assert env.get("x") == Integer(10)


small_ints = st.integers(min_value=-10**6, max_value=10**6)


@given(small_ints, small_ints)
def test_addition_and_multiplication_match_python(a, b):
    env = Environment()
    program, _ = parse(f"[{a} + {b}, {a} * {b}, {a} - {b}]")
    assert str(evaluate(program, env)) == f"[{a + b}, {a * b}, {a - b}]"


@given(small_ints, small_ints.filter(lambda n: n != 0))
def test_division_truncates_toward_zero(a, b):
    program, _ = parse(f"{a} / {b}")
    assert evaluate(program, Environment()) == Integer(int(a / b))
