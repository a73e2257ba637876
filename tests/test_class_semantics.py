from __future__ import annotations


def test_fields_and_methods(lox_output):
    source = """
class Point {
  init(x, y) {
    this.x = x;
    this.y = y;
  }
  sum() { return this.x + this.y; }
}
var p = Point(2, 3);
print p.x;
print p.sum();
p.x = 10;
print p.sum();
p.label = "tagged";
print p.label;
"""
    assert lox_output(source) == ["2", "5", "13", "tagged"]


def test_subclass_override_dispatches_dynamically(lox_output):
    source = """
class Animal {
  speak() { return "..."; }
  describe() { return "I say " + this.speak(); }
}
class Dog : Animal {
  speak() { return "woof"; }
}
fun announce(animal) { print animal.describe(); }
announce(Animal());
announce(Dog());
"""
    assert lox_output(source) == ["I say ...", "I say woof"]


def test_super_calls_reach_the_superclass_method(lox_output):
    source = """
class A {
  method() { return "A method"; }
}
class B : A {
  method() { return "B method"; }
  test() { return super.method(); }
}
class C : B {}
print C().test();
"""
    assert lox_output(source) == ["A method"]


def test_inherited_initializer_and_super_init(lox_output):
    source = """
class Base {
  init(n) { this.n = n; }
}
class Child : Base {
  init(n) {
    super.init(n + 1);
    this.extra = true;
  }
}
class Plain : Base {}
var c = Child(4);
print c.n;
print c.extra;
print Plain(7).n;
"""
    assert lox_output(source) == ["5", "true", "7"]


def test_less_than_superclass_syntax_is_accepted(lox_output):
    assert lox_output("class A { hi() { return 1; } } class B < A {} print B().hi();") == ["1"]


def test_initializer_always_returns_this(lox_output):
    source = """
class Foo {
  init() {
    this.calls = 0;
    return;
  }
}
var foo = Foo();
var again = foo.init();
print again == foo;
print foo.init();
"""
    assert lox_output(source) == ["true", "Foo instance"]


def test_class_arity_follows_init(run_lox):
    run = run_lox("class P { init(a, b) {} }\nP(1);")
    assert run.errors == ["Expected 2 arguments but got 1.", "[line 2]"]


def test_class_without_init_takes_no_arguments(run_lox):
    run = run_lox("class E {}\nE(1);")
    assert run.errors == ["Expected 0 arguments but got 1.", "[line 2]"]


def test_bound_methods_remember_their_instance(lox_output):
    source = """
class Counter {
  init() { this.n = 0; }
  inc() { this.n = this.n + 1; return this.n; }
}
var a = Counter();
var b = Counter();
var incA = a.inc;
incA();
incA();
print b.inc();
print a.n;
"""
    assert lox_output(source) == ["1", "2"]


def test_fields_shadow_methods(lox_output):
    source = """
class Box {
  value() { return "method"; }
}
var box = Box();
print box.value();
box.value = lambda () { return "field"; };
print box.value();
"""
    assert lox_output(source) == ["method", "field"]


def test_this_inside_lambda_in_method(lox_output):
    source = """
class Greeter {
  init(name) { this.name = name; }
  greeter() { return lambda () { return "hi " + this.name; }; }
}
var g = Greeter("ann").greeter();
print g();
"""
    assert lox_output(source) == ["hi ann"]


def test_instances_compare_by_identity(lox_output):
    source = """
class K {}
var a = K();
var b = K();
print a == a;
print a == b;
"""
    assert lox_output(source) == ["true", "false"]


def test_super_method_missing_is_runtime_error(run_lox):
    run = run_lox("class A {}\nclass B : A { m() { return super.nope(); } }\nB().m();")
    assert run.errors == ["Undefined property 'nope'.", "[line 2]"]
