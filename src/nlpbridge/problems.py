"""
Built-in Test Problems

Small CasADi models with known optima, used by the CLI and the tests.
"""

from typing import Callable, Dict

import casadi as ca

from .casadi import CasADiNLPModel


def hs071() -> CasADiNLPModel:
    """
    Hock-Schittkowski problem 71.

        min  x1 x4 (x1 + x2 + x3) + x3
        s.t. x1 x2 x3 x4 >= 25
             x1^2 + x2^2 + x3^2 + x4^2 = 40
             1 <= x <= 5

    Optimum f* = 17.0140173 at x* = (1, 4.7430, 3.8211, 1.3794).
    """
    x = ca.SX.sym('x', 4)
    f = x[0] * x[3] * (x[0] + x[1] + x[2]) + x[2]
    g = ca.vertcat(x[0] * x[1] * x[2] * x[3], ca.sumsqr(x))
    return CasADiNLPModel(
        x, f, g,
        lbx=[1.0] * 4, ubx=[5.0] * 4,
        lbg=[25.0, 40.0], ubg=[ca.inf, 40.0],
        x0=[1.0, 5.0, 5.0, 1.0],
        name="hs071",
    )


def rosenbrock(n: int = 2) -> CasADiNLPModel:
    """
    Unconstrained Rosenbrock function.

    f(x) = sum(100*(x_{i+1} - x_i^2)^2 + (1 - x_i)^2)

    Global optimum at x = (1, 1, ..., 1) with f* = 0.
    """
    if n < 2:
        raise ValueError("Rosenbrock needs n >= 2")
    x = ca.SX.sym('x', n)
    f = 0
    for i in range(n - 1):
        f += 100 * (x[i + 1] - x[i] ** 2) ** 2 + (1 - x[i]) ** 2
    return CasADiNLPModel(x, f, x0=[-1.2] + [1.0] * (n - 1),
                          name=f"rosenbrock-{n}")


def equality_qp() -> CasADiNLPModel:
    """
    min x1^2 + x2^2  s.t.  x1 + x2 = 1

    Optimum f* = 0.5 at x* = (0.5, 0.5).
    """
    x = ca.SX.sym('x', 2)
    return CasADiNLPModel(x, ca.sumsqr(x), x[0] + x[1],
                          lbg=[1.0], ubg=[1.0], name="equality-qp")


def max_concave() -> CasADiNLPModel:
    """
    max 4 - (x1 - 1)^2 - (x2 + 2)^2

    Optimum f* = 4 at x* = (1, -2).
    """
    x = ca.SX.sym('x', 2)
    f = 4 - (x[0] - 1) ** 2 - (x[1] + 2) ** 2
    return CasADiNLPModel(x, f, minimize=False, name="max-concave")


def small_minlp() -> CasADiNLPModel:
    """
    min (x1 - 0.3)^2 + (x2 - 2.6)^2  s.t.  x1 + x2 <= 3,  x2 integer

    with 0 <= x <= 3. Integer optimum f* = 0.25 at x* = (0, 3).
    """
    x = ca.SX.sym('x', 2)
    f = (x[0] - 0.3) ** 2 + (x[1] - 2.6) ** 2
    return CasADiNLPModel(
        x, f, x[0] + x[1],
        lbx=[0.0, 0.0], ubx=[3.0, 3.0],
        lbg=[-ca.inf], ubg=[3.0],
        discrete=[False, True],
        name="small-minlp",
    )


PROBLEMS: Dict[str, Callable[[], CasADiNLPModel]] = {
    'hs071': hs071,
    'rosenbrock': rosenbrock,
    'equality-qp': equality_qp,
    'max-concave': max_concave,
    'small-minlp': small_minlp,
}
