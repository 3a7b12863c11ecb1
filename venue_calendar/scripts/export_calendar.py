from __future__ import annotations

import argparse
import json
from datetime import date

from venue_calendar.db.session import SessionLocal
from venue_calendar.services.availability_service import build_venue_calendar


def main() -> int:
    p = argparse.ArgumentParser(description="Print a venue's availability calendar as JSON")
    p.add_argument('--venue-id', required=True)
    p.add_argument('--start-date', required=True, type=date.fromisoformat)
    p.add_argument('--end-date', required=True, type=date.fromisoformat)
    args = p.parse_args()

    db = SessionLocal()
    try:
        days = build_venue_calendar(db, venue_id=args.venue_id, start=args.start_date, end=args.end_date)
        print(json.dumps([d.model_dump(mode="json", exclude_none=True) for d in days], indent=2))
        return 0
    finally:
        db.close()


if __name__ == '__main__':
    raise SystemExit(main())
