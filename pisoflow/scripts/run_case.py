"""
Run a pisoflow case from a JSON file or by built-in name.

    pisoflow sodium_loop --plot -v
    python -m pisoflow.scripts.run_case cases/vapor_channel.json --output out.csv
"""

import argparse
import logging
from dataclasses import replace
from pathlib import Path

from pisoflow.src.cases import BUILTIN_CASES, build_solver
from pisoflow.src.config import load_case
from pisoflow.src.log import setup_logging

logger = logging.getLogger('pisoflow.scripts.run_case')


def resolve_case(name: str):
    """Load a case file, or build a built-in case by name."""
    if name in BUILTIN_CASES:
        return BUILTIN_CASES[name]()
    path = Path(name)
    if not path.is_file():
        raise SystemExit(f"No case file or built-in case named {name!r}. "
                         f"Built-in cases: {', '.join(sorted(BUILTIN_CASES))}")
    return load_case(path)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Run a 1D compressible PISO case.")
    parser.add_argument("case", help="path to a JSON case file or a built-in case name")
    parser.add_argument("-o", "--output", help="profile output path (overrides the case)")
    parser.add_argument("-t", "--max-time", type=float, help="simulation end time [s]")
    parser.add_argument("--plot", action="store_true", help="plot the final solution")
    parser.add_argument("--no-display", action="store_true", help="do not open plot windows")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable verbose output")
    parser.add_argument("-vv", "--very-verbose", action="store_true", help="enable very verbose output")
    args = parser.parse_args(argv)

    setup_logging(verbose=args.verbose, very_verbose=args.very_verbose)

    case = resolve_case(args.case)
    logger.info(f"Running case '{case.name}' from {args.case}")
    if args.output:
        case.output = replace(case.output, profiles=args.output)

    solver = build_solver(case)
    info = solver.solve(max_time=args.max_time)

    if case.output.profiles:
        path = solver.write_profiles(case.output.profiles)
        print(f"Wrote profiles to {path}")

    print(f"{case.name}: {info['steps']} steps to t = {info['time']:.4e} s, "
          f"{info['nonconverged_steps']} without inner convergence, "
          f"final residual {info['final_residual']}")

    if args.plot:
        if args.no_display:
            import matplotlib
            matplotlib.use('Agg')
        plot_file = case.output.plot
        solver.plot_solution(filename=plot_file, show=not args.no_display)
        solver.plot_convergence(show=not args.no_display)



if __name__ == "__main__":
    main()
