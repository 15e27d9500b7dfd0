"""
nlpbridge Command-Line Interface

Provides commands to decode variable category counts and to solve the
built-in test problems through the generic solver interface.
"""

import sys
import argparse
import json
import logging
import time
import numpy as np

from . import (
    NLPModelMeta,
    ScipySolver,
    VariableClassificationError,
    SolverCapabilityError,
    classify_variables,
    nlp_to_solver,
)
from .problems import PROBLEMS


COUNT_FIELDS = ('nlvb', 'nlvbi', 'nlvc', 'nlvci', 'nlvo', 'nlvoi', 'nwv', 'nbv', 'niv')


def build_solver(name: str):
    """Create a solver factory by name."""
    if name == 'ipopt':
        from .casadi import CasADiSolver
        return CasADiSolver()
    if name == 'slsqp':
        return ScipySolver(method='SLSQP')
    return ScipySolver(method='trust-constr')


SOLVERS = ('trust-constr', 'slsqp', 'ipopt')


def cmd_classify(args):
    """Decode variable category counts into variable types."""
    counts = {name: getattr(args, name) for name in COUNT_FIELDS}
    meta = NLPModelMeta(nvar=args.nvar, **counts)

    try:
        vtypes = classify_variables(meta)
    except VariableClassificationError as e:
        print(f"Error: {e}")
        return 1

    if args.json:
        print(json.dumps([v.value for v in vtypes]))
    else:
        for i, v in enumerate(vtypes):
            print(f"{i:6d}  {v.value}")
    return 0


def cmd_solve(args):
    """Solve a built-in problem."""
    nlp = PROBLEMS[args.problem]()
    solver = build_solver(args.solver)

    if not args.json:
        print("=" * 60)
        print("nlpbridge")
        print("=" * 60)
        print(f"\nProblem: {nlp.meta.name}")
        print(f"Variables: {nlp.meta.nvar}")
        print(f"Constraints: {nlp.meta.ncon}")
        print(f"Solver: {args.solver}")

    start = time.time()
    model = nlp_to_solver(nlp, solver)
    try:
        result = model.optimize()
    except SolverCapabilityError as e:
        print(f"Error: {e}")
        return 1
    elapsed = time.time() - start

    if args.json:
        output = result.to_dict()
        output['problem'] = nlp.meta.to_canonical()
        output['solver'] = args.solver
        output['counters'] = model.evaluator.counters.to_dict()
        print(json.dumps(output, indent=2))
    else:
        print("\n" + "-" * 60)
        print("RESULTS")
        print("-" * 60)
        print(f"Status: {result.status.value} ({result.return_status})")
        print(f"Objective: {result.f:.8e}")
        print(f"Iterations: {result.iterations}")
        print(f"Time: {elapsed:.3f}s")
        x = result.x
        print(f"Solution: {x[:min(5, len(x))]}{'...' if len(x) > 5 else ''}")
        if len(result.g):
            print(f"Constraints: {np.array2string(result.g, precision=6)}")

    return 0 if result.success else 1


def cmd_version(args):
    """Print version information."""
    from . import __version__
    print(f"nlpbridge {__version__}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='nlpbridge',
        description='nlpbridge - NLP models for generic nonlinear solvers'
    )
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Enable debug logging')
    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # Classify command
    classify_parser = subparsers.add_parser(
        'classify', help='Decode variable category counts')
    classify_parser.add_argument('nvar', type=int, help='Number of variables')
    for name in COUNT_FIELDS:
        classify_parser.add_argument(
            f'--{name}', type=int, default=0, help=f'{name} count (default: 0)')
    classify_parser.add_argument('--json', action='store_true',
                                 help='Print tags as a JSON list')
    classify_parser.set_defaults(func=cmd_classify)

    # Solve command
    solve_parser = subparsers.add_parser('solve', help='Solve a built-in problem')
    solve_parser.add_argument('problem', choices=list(PROBLEMS.keys()),
                              help='Problem to solve')
    solve_parser.add_argument('--solver', '-s', choices=SOLVERS,
                              default='trust-constr',
                              help='Solver backend (default: trust-constr)')
    solve_parser.add_argument('--json', action='store_true',
                              help='Print the result as JSON')
    solve_parser.set_defaults(func=cmd_solve)

    # Version command
    ver_parser = subparsers.add_parser('version', help='Print version')
    ver_parser.set_defaults(func=cmd_version)

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(name)s %(levelname)s %(message)s',
    )

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
