from __future__ import annotations

import json
import sys
from datetime import datetime, timezone
from typing import Any


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def log(event: str, level: str = "info", **fields: Any) -> None:
    payload = {"ts": _now_iso(), "level": level, "event": event, **fields}
    sys.stdout.write(json.dumps(payload, default=str) + "\n")
    sys.stdout.flush()
