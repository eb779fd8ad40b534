# qsim/scalar.py
import cmath

EPS = 1e-10

ZERO = 0j
ONE = 1 + 0j


def as_scalar(value) -> complex:
    """Coerce ints, floats, numpy scalars and complex values to a Python complex."""
    return complex(value)


def approx_eq(a, b, tol: float = EPS) -> bool:
    a = complex(a); b = complex(b)
    return abs(a.real - b.real) < tol and abs(a.imag - b.imag) < tol


def is_zero(value, tol: float = EPS) -> bool:
    return approx_eq(value, ZERO, tol)


def cexp(z) -> complex:
    """e**z via Euler's formula; exactly 1 for z == 0."""
    z = complex(z)
    if is_zero(z):
        return ONE
    return cmath.exp(z)


def format_scalar(value) -> str:
    value = complex(value)
    return f"{value.real} + {value.imag}i"
