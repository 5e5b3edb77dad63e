from __future__ import annotations

import argparse
import json
import os
import sys

SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.abspath(os.path.join(SCRIPT_DIR, ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)


def load_env_file(env_path: str) -> None:
    if not os.path.exists(env_path):
        return
    with open(env_path, "r", encoding="utf-8") as env_file:
        for line in env_file:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, value = line.split("=", 1)
            os.environ.setdefault(key, value)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Record one employee's daily call-center performance and mirror it to the archive."
    )
    parser.add_argument("employee", help="Employee name as listed in EMPLOYEE_NAMES.")
    parser.add_argument("--calls", type=int, default=0, help="Calls made today.")
    parser.add_argument("--bookings", type=int, default=0, help="Bookings confirmed today.")
    parser.add_argument("--attendance", type=int, default=0, help="Booked customers who attended today.")
    parser.add_argument(
        "--leads",
        type=int,
        default=None,
        help="Marketing leads received today (default: DEFAULT_DAILY_LEADS).",
    )
    parser.add_argument(
        "--env-file",
        default=os.path.join(PROJECT_ROOT, ".env"),
        help="Path to .env file.",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    load_env_file(os.path.abspath(args.env_file))

    from src.api.dependencies import get_performance_service
    from src.core.errors import AppError
    from src.core.logging import configure_logging
    from src.schemas.performance import PerformanceSubmissionRequest

    configure_logging()
    service = get_performance_service()
    request = PerformanceSubmissionRequest(
        employee_name=args.employee,
        calls=args.calls,
        bookings=args.bookings,
        attendance=args.attendance,
        leads=args.leads,
    )
    try:
        result = service.submit(request)
    except AppError as exc:
        print(json.dumps({"error": {"code": exc.code, "message": exc.message}}, ensure_ascii=False))
        return 1
    print(json.dumps(result.model_dump(by_alias=True), indent=2, default=str, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
