import argparse
import json
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from packages.error_reporting import init_error_reporting
from packages.logging_utils import setup_logging
from services.processing.models import to_dict
from services.processing.wrapped import ACTIVITIES, SLEEP, STEPS, WrappedState, run_category

logger = logging.getLogger("fitness.cli")


def main():
    p = argparse.ArgumentParser(description="Compute wrapped summaries from exported CSV files.")
    p.add_argument("--activities", type=Path, help="Activities export (CSV).")
    p.add_argument("--steps", type=Path, help="Steps export (CSV).")
    p.add_argument("--sleep", type=Path, help="Sleep export (CSV).")
    p.add_argument("--top-types", type=int, default=None, help="How many activity types to list; defaults to FITNESS_TOP_ACTIVITY_TYPES.")
    p.add_argument("--include-undated", action="store_true", default=None, help="Count undated activity rows in totals.")
    p.add_argument("--output", type=Path, help="Write JSON here instead of stdout.")
    args = p.parse_args()

    setup_logging()
    init_error_reporting("cli")

    inputs = {ACTIVITIES: args.activities, STEPS: args.steps, SLEEP: args.sleep}
    if not any(inputs.values()):
        raise SystemExit("Pass at least one of --activities, --steps or --sleep.")

    state = WrappedState()
    for category, path in inputs.items():
        if path is None:
            continue
        path = path.expanduser().resolve()
        if not path.exists():
            raise SystemExit(f"File not found: {path}")
        options = {}
        if category == ACTIVITIES:
            options = {"top_types": args.top_types, "include_undated": args.include_undated}
        state = state.apply(run_category(category, path.read_bytes(), upload_id=path.name, **options))

    out = {
        category: {
            "status": result.status,
            "error": result.error,
            "snapshot": to_dict(result.snapshot),
        }
        for category, result in state.results.items()
    }
    body = json.dumps(out, indent=2, default=str)
    if args.output:
        args.output.write_text(body + "\n")
        logger.info("wrote %s", args.output)
    else:
        print(body)
    if not all(result.ok for result in state.results.values()):
        raise SystemExit(1)


if __name__ == "__main__":
    main()
