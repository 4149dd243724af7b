import pytest

from keel.errors import ArityError, InvalidSymbolError, KeelTypeError, UnboundSymbolError
from keel.types.lambda_fn import Lambda


@pytest.mark.parametrize("code,expected", [
    ("(+ 1 2 3)", 6),
    ("(+)", 0),
    ("(- 5)", -5),
    ("(- 10 3 2)", 5),
    ("(* 2 3 4)", 24),
    ("(/ 9 2)", 4.5),
    ("(= 1 1 1)", True),
    ("(not= 1 2)", True),
    ("(< 1 2 3)", True),
    ("(>= 3 3 4)", False),
    ("(not nil)", True),
    ("(not 0)", False),
    ("(if 0 :yes :no)", "yes"),
    ("(if false :yes :no)", "no"),
    ("(if nil :yes)", None),
    ("(do 1 2 3)", 3),
    ("(do)", None),
    ("(let [a 1 b (+ a 1)] (* a b))", 2),
    ("((fn [a b] (- a b)) 5 2)", 3),
    ("((fn [a & more] more) 1 2 3)", [2, 3]),
    ("(count [1 2 3])", 3),
    ("(length nil)", 0),
    ("(list 1 :a)", [1, "a"]),
    ('(.. "a" 1 nil true)', "a1niltrue"),
    ("(. {:a {:b 7}} :a :b)", 7),
    ("(get [10 20] 1)", 20),
    ("[1 (+ 1 1)]", [1, 2]),
    ("{:k (+ 1 1)}", {"k": 2}),
])
def test_expressions(itp, code, expected):
    assert itp.eval(code) == expected


def test_def_then_use(itp):
    assert itp.eval("(def x 10) (* x 2)") == 20
    assert itp.registry.get("user").exports["x"] == 10


def test_recursive_named_fn(itp):
    code = "(def fact (fn fact [n] (if (<= n 1) 1 (* n (fact (- n 1))))))\n(fact 5)"
    assert itp.eval(code) == 120


def test_defn_skips_docstring(itp):
    fn = itp.eval('(defn twice [x] "Double x." (* 2 x))')
    assert isinstance(fn, Lambda)
    assert fn(4) == 8
    assert itp.eval('(defn doc-only [] "just a string") (doc-only)') == "just a string"


def test_defn_variants(itp):
    itp.eval("(defn pub [] 1) (defn- priv [] 2) (def- hidden 3) (defonce- once 4)", ns="app.v")
    ns = itp.registry.get("app.v")
    assert sorted(ns.exports) == ["pub"]
    assert {"priv", "hidden", "once"} <= set(ns.locals)


def test_dotted_paths_walk_tables(itp):
    assert itp.eval("(local t {:a {:b 1}}) t.a.b") == 1


def test_late_binding_inside_a_pass(itp):
    assert itp.eval("(def x 1) (defn getx [] x) (def x 2) (getx)") == 2


def test_lookup_follows_a_module_switch_within_one_form(itp):
    itp.eval("(module a1) (def y 1)")
    assert itp.eval("(module a1) (do (module a2) (def y 2) y)") == 2
    assert itp.registry.get("a1").exports["y"] == 1



def test_functions_see_redefinitions_from_later_passes(itp):
    itp.eval("(defn f [] (g)) (defn g [] 1)")
    assert itp.eval("(f)") == 1
    itp.eval("(defn g [] 2)")
    assert itp.eval("(f)") == 2


def test_top_level_local_is_captured(itp):
    itp.eval("(local counter 5)", ns="app.l")
    ns = itp.registry.get("app.l")
    assert "counter" not in ns.exports
    assert ns.locals["counter"] == 5
    assert itp.eval("(+ counter 1)", ns="app.l") == 6


def test_nested_local_is_lexical(itp):
    assert itp.eval("(let [y 1] (local z 2) (+ y z))", ns="app.n") == 3
    assert "z" not in itp.registry.get("app.n").locals
    with pytest.raises(UnboundSymbolError):
        itp.eval("z", ns="app.n")


def test_print(itp, capsys):
    itp.eval('(print "a" 1 nil false)')
    assert capsys.readouterr().out == "a 1 nil false\n"


@pytest.mark.parametrize("code,error", [
    ("undefined", UnboundSymbolError),
    ("()", KeelTypeError),
    ("(1 2)", KeelTypeError),
    ("((fn [a] a))", ArityError),
    ("(+ 1 :a)", KeelTypeError),
    ("(< 1 :a)", KeelTypeError),
    ("(def)", ArityError),
    ("(def 1 2)", KeelTypeError),
    ("(defn f (a) a)", KeelTypeError),
    ("(let (a 1) a)", KeelTypeError),
    ("(let [a] a)", ArityError),
    ("(let [a.b 1] a.b)", InvalidSymbolError),
    ("(if)", ArityError),
    ("(module)", ArityError),
    ("(module 3)", KeelTypeError),
    ("(module x [1])", KeelTypeError),
])
def test_errors(itp, code, error):
    with pytest.raises(error):
        itp.eval(code)


def test_unbound_symbol_is_a_name_error(itp):
    with pytest.raises(NameError):
        itp.eval("nope")
