from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

try:
    from truenas2gatus.config import Settings
except ModuleNotFoundError as exc:
    missing = exc.name or "dependency"
    if missing.startswith("pydantic"):
        print("Missing dependencies. Install with:")
        print("  python3 -m pip install -r requirements.txt")
        raise SystemExit(1) from exc
    raise
from truenas2gatus.gatus import format_timestamp
from truenas2gatus.store import PersistenceError, read_results


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Print the result history kept in a store file.")
    parser.add_argument(
        "--path",
        help="Store file to read (defaults to TRUENAS_RESULT_STORE from .env).",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the raw Gatus result objects instead of a table.",
    )
    return parser.parse_args()


def _default_path() -> str:
    try:
        return Settings().TRUENAS_RESULT_STORE
    except ValueError:
        return Settings.model_fields["TRUENAS_RESULT_STORE"].default


def run() -> int:
    args = parse_args()
    path = args.path or _default_path()
    if not Path(path).exists():
        print(f"No store file at {path}")
        return 1

    try:
        results = read_results(path)
    except PersistenceError as exc:
        print(f"Failed to read {path}: {exc}")
        return 1

    if args.json:
        print(json.dumps([r.as_dict() for r in results], indent=2))
        return 0

    print(f"{len(results)} result(s) in {path}")
    for result in results:
        state = "OK  " if result.success else "FAIL"
        duration_ms = result.duration.total_seconds() * 1000
        print(f"{format_timestamp(result.timestamp)}  {state}  {duration_ms:8.1f} ms  status={result.status}")
        for cond in result.condition_results:
            mark = "+" if cond.success else "-"
            print(f"    {mark} {cond.condition}")
        for err in result.errors:
            print(f"    ! {err}")
    return 0


if __name__ == "__main__":
    sys.exit(run())
