"""
EqReduce — Entry point.

Solve the system given on the command line and print the trail, e.g.

    python main.py "x^2 = 4, y = x + 1"
"""

import sys

from eqreduce.engine import solve_equations


def main(argv=None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if not args:
        print(__doc__.strip())
        return 2
    try:
        result = solve_equations(" ".join(args))
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    for step in result["steps"]:
        print(f"  {step['step_number']}. {step['description']}")
        for line in step["expression"].split("\n"):
            print(f"       {line}")
    print(f"\n  => {result['final_answer']}")
    print(f"     [{result['summary']['status']}, "
          f"validation {result['summary']['validation_status']}]")
    return 0 if result["summary"]["status"] == "solved" else 1


if __name__ == "__main__":
    sys.exit(main())
