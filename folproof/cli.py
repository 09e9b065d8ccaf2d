import argparse
import itertools
import json
import logging
import sys
from collections.abc import Sequence

from folproof.config import Settings
from folproof.fixtures import GroupFixture, all_groups, cyclic_with_subgroup, two_element_non_group
from folproof.group_theory import build_group_theory
from folproof.helpers import var
from folproof.models import Evaluator, ModelError
from folproof.report import render_report
from folproof.result import Err, Ok
from folproof.serialization import dumps, theorem_to_json
from folproof.theory import Theory

logger = logging.getLogger(__name__)


def handle_report(theory: Theory, *, as_json: bool) -> int:
    if as_json:
        print(dumps(theory))
    else:
        print(render_report(theory))
    return 0


def handle_show(theory: Theory, name: str) -> int:
    theorem = theory.lookup(name)
    if theorem is None:
        print(f"No theorem, axiom or definition named '{name}'", file=sys.stderr)
        return 1
    print(json.dumps(theorem_to_json(theorem), indent=2, ensure_ascii=False))
    return 0


def check_fixture(theory: Theory, fixture: GroupFixture) -> list[str]:
    """Evaluate every stored theorem in ``fixture`` under all element assignments.

    Returns the names of the theorems that fail.
    """
    evaluator = Evaluator(theory, fixture.structure())
    elements = sorted(fixture.carrier, key=repr)
    failures = []
    for name, theorem in theory.theorems:
        base = fixture.env()
        names = sorted(
            {v.name for v in theorem.sequent.free_vars} - {v.name for v in base}
        )
        for values in itertools.product(elements, repeat=len(names)):
            env = {**base, **{var(n): value for n, value in zip(names, values, strict=True)}}
            if not evaluator.satisfies(theorem.sequent, env):
                logger.warning("%s fails in %s at %s", name, fixture.name, dict(zip(names, values)))
                failures.append(name)
                break
    return failures


def handle_models(theory: Theory) -> int:
    fixtures = (*all_groups(), cyclic_with_subgroup(), two_element_non_group())
    status = 0
    for fixture in fixtures:
        try:
            failures = check_fixture(theory, fixture)
        except ModelError as e:
            print(f"{fixture.name:<14} error: {e}", file=sys.stderr)
            status = 1
            continue
        if failures:
            print(f"{fixture.name:<14} FAILED: {', '.join(failures)}")
            status = 1
        else:
            print(f"{fixture.name:<14} ok ({len(theory.theorems)} theorems)")
    return status


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="folproof",
        description="Group theory with conditional definite descriptions",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    report_parser = subparsers.add_parser(
        "report", help="Print the group-theory library as a Markdown report."
    )
    report_parser.add_argument(
        "--json", action="store_true", default=False, help="Emit JSON instead of Markdown."
    )

    show_parser = subparsers.add_parser(
        "show", help="Print one theorem, axiom or definition as JSON."
    )
    show_parser.add_argument("name", help="Name of the theorem, axiom or definition.")

    subparsers.add_parser(
        "models", help="Check every library theorem against the finite group fixtures."
    )

    args = parser.parse_args(argv)

    match Settings.from_env():
        case Ok(settings):
            logging.basicConfig(level=settings.log_level_number)
        case Err(e):
            print(f"Invalid configuration: {e}", file=sys.stderr)
            return 2

    if args.command is None:
        parser.print_help()
        return 1

    theory = build_group_theory().theory

    match args.command:
        case "report":
            return handle_report(theory, as_json=args.json)
        case "show":
            return handle_show(theory, args.name)
        case "models":
            return handle_models(theory)
        case _:
            print(f"Unknown command: {args.command}", file=sys.stderr)
            parser.print_help()
            return 1


if __name__ == "__main__":
    sys.exit(main())
