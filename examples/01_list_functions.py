"""
List Functions Example
======================

A few polymorphic list functions demonstrating:
- Declaring signatures with type variables
- Curried application and the `__` placeholder
- Callbacks checked on every call
- Reading a failure report
"""

from typedsig import CheckError, Options, __, create, function_type, type_variable
from typedsig.env import Array, Number, String

define = create(Options())

a = type_variable("a")
b = type_variable("b")


# ============================================================================
# Declare Functions
# ============================================================================

@define("map", {}, [function_type([a, b]), Array(a), Array(b)])
def map_(f, xs):
    """Apply f to every element."""
    return [f(x) for x in xs]


@define("append", {}, [a, Array(a), Array(a)])
def append(x, xs):
    """Add x to the end of xs."""
    return [*xs, x]


@define("join", {}, [String, Array(String), String])
def join(sep, parts):
    return sep.join(parts)


# ============================================================================
# Usage
# ============================================================================

def main() -> None:
    print(map_(len, ["one", "three"]))
    print(append(3)([1, 2]))

    comma_join = join(", ")
    print(comma_join(["a", "b"]))

    with_dash = join(__, ["a", "b"])
    print(with_dash("-"))

    for attempt in (
        lambda: append("x", [1, 2]),
        lambda: map_(lambda n: n if n else "zero", [1, 0]),
        lambda: join(1),
    ):
        try:
            attempt()
        except CheckError as e:
            print(f"{type(e).__name__}:\n{e}")


if __name__ == "__main__":
    main()
