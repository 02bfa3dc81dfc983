"""Plain-text rendering of solver output, and the command-line entry point.

Public functions:

    format_result(result, actors)  — terminal, bound variables, utilities
    print_result(result, actors)   — print format_result()
    format_cem_trace(trace)        — per-iteration CEM table
    print_cem_trace(trace)         — print format_cem_trace()
    execute(state, root)           — load state, load tree, solve, render

Usage (reference scenario):
    python -m alliance.analysis.report
"""

from __future__ import annotations

import argparse
import logging
from collections.abc import Iterable, Mapping

from alliance.engine.result import Result
from alliance.scenario.alliance_game import get_root, get_state
from alliance.solvers.cem import CemTrace
from alliance.solvers.nodes import Node

_RULE: str = "=" * 56


def format_result(result: Result, actors: Iterable[str] | None = None) -> str:
    """Render a Result as a fixed-width table.

    Args:
        result: Result returned by a root solve().
        actors: Actors to report, in order. Defaults to every actor the
                terminal defines.

    Returns:
        Multi-line string, no trailing newline.
    """
    actor_list = list(actors) if actors is not None else list(result.utilities)

    lines = [
        _RULE,
        f"Game outcome — terminal {result.terminal_name}",
        _RULE,
        "  State:",
    ]
    for name, value in sorted(result.final_state.items()):
        lines.append(f"    {name:<8} {value:+.6f}")
    lines.append("")
    lines.append("  Utilities:")
    for actor in actor_list:
        lines.append(f"    {actor:<8} {result.get_util(actor):+.6f}")
    return "\n".join(lines)


def print_result(result: Result, actors: Iterable[str] | None = None) -> None:
    print(format_result(result, actors))
    print()


def format_cem_trace(trace: CemTrace) -> str:
    """Render the per-iteration history of one CEM run."""
    status = "converged" if trace.converged else "iteration cap reached"
    lines = [
        _RULE,
        f"CEM trace — actor {trace.actor}, variable {trace.variable_name}",
        _RULE,
        f"  {'Iter':>4}  {'mu':>12}  {'sigma2':>12}  {'best util':>12}  {'elite util':>12}",
        f"  {'----':>4}  {'--':>12}  {'------':>12}  {'---------':>12}  {'----------':>12}",
    ]
    for it in trace.history:
        lines.append(
            f"  {it.iteration:>4}  {it.mu:>12.6f}  {it.sigma2:>12.4e}  "
            f"{it.best_utility:>12.6f}  {it.elite_mean_utility:>12.6f}"
        )
    lines.append("")
    lines.append(
        f"  Final: {trace.variable_name} = {trace.mu:.6f} "
        f"(sigma2 = {trace.sigma2:.3e}, {trace.n_iterations} iterations, {status})"
    )
    return "\n".join(lines)


def print_cem_trace(trace: CemTrace) -> None:
    print(format_cem_trace(trace))
    print()


def execute(
    state: Mapping[str, float] | None = None,
    root: Node | None = None,
    actors: Iterable[str] | None = None,
) -> Result:
    """Solve a tree from an initial state and print the outcome.

    Both arguments default to the reference scenario.

    Returns:
        The root Result, for callers that want more than the printout.
    """
    state = state if state is not None else get_state()
    root = root if root is not None else get_root()
    result = root.solve(state)
    print_result(result, actors)
    return result


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Solve the reference Actor Alliance Game and print the outcome."
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="log CEM iterations at DEBUG level"
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )
    execute()
    return 0


# ─── __main__ ─────────────────────────────────────────────────────────────────

if __name__ == "__main__":
    raise SystemExit(main())
