"""
CLI entry point. Run as: python -m kbcomplete --presentation <name>
"""

import argparse
import itertools
import math

from .core.engine import KnuthBendix, NotConfluentError
from .core.state import OverlapPolicy, Settings
from .gilman import normal_forms
from .presentations import PRESENTATIONS, make_presentation
from .visualization import print_state, print_history, export_dot


def main(argv=None):
    parser = argparse.ArgumentParser(description="Knuth-Bendix completion")
    parser.add_argument(
        "--presentation",
        choices=list(PRESENTATIONS.keys()),
        default="symmetric",
        help="Which presentation to complete",
    )
    parser.add_argument("--n",           type=int,   default=None, help="Size parameter of the presentation")
    parser.add_argument("--max-rules",   type=int,   default=None, help="Stop at this many active rules")
    parser.add_argument("--max-overlap", type=int,   default=None, help="Largest overlap to consider")
    parser.add_argument("--interval",    type=int,   default=4096, help="Overlaps between confluence checks")
    parser.add_argument("--policy",      choices=[p.value for p in OverlapPolicy], default="ABC",
                        help="Overlap measure")
    parser.add_argument("--seconds",     type=float, default=None, help="Run for at most this long")
    parser.add_argument("--by-overlap-length", action="store_true",
                        help="Complete by increasing overlap length")
    parser.add_argument("--normal-forms", type=int,  default=0,    help="Print this many normal forms")
    parser.add_argument("--save",  type=str, default=None, help="Save state to file")
    parser.add_argument("--load",  type=str, default=None, help="Load state from file")
    parser.add_argument("--dot",   type=str, default=None, help="Export the Gilman digraph to file")
    parser.add_argument("--quiet", action="store_true",    help="Less output")
    args = parser.parse_args(argv)

    settings = Settings(
        check_confluence_interval=args.interval,
        max_overlap=args.max_overlap,
        max_rules=args.max_rules,
        overlap_policy=args.policy,
    )

    # --- Load or build the presentation ---
    if args.load:
        kb = KnuthBendix.load(args.load, verbose=not args.quiet)
        kb.settings = settings
        print(f"Loaded state from {args.load} ({kb.number_of_active_rules()} active rules)")
    else:
        kb = make_presentation(args.presentation, args.n,
                               settings=settings, verbose=not args.quiet)
        print(f"Presentation: {args.presentation} "
              f"({PRESENTATIONS[args.presentation]['description']})")

    # --- Run ---
    try:
        if args.by_overlap_length:
            kb.run_by_overlap_length()
        elif args.seconds is not None:
            kb.run_for(args.seconds)
        else:
            kb.run()
    except KeyboardInterrupt:
        print("\nInterrupted.")

    print_state(kb)
    print_history(kb)

    # --- Post-processing ---
    if kb.finished():
        try:
            size = kb.size()
        except NotConfluentError as e:
            print(f"\nSize unknown: {e}")
        else:
            print(f"\nSize: {'infinite' if size == math.inf else size}")
            if args.normal_forms:
                print(f"First {args.normal_forms} normal forms:")
                for word in itertools.islice(normal_forms(kb), args.normal_forms):
                    print(f"  {word or '1'}")
            if args.dot:
                export_dot(kb, args.dot)
    else:
        print(f"\nNot finished ({kb.halt_reason}); run again to resume.")

    if args.save:
        kb.save(args.save)
        print(f"State saved to {args.save}")


if __name__ == "__main__":
    main()
