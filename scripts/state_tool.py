#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

from tablepos.core.database import Base, SessionLocal, engine  # noqa: E402
import tablepos.models  # noqa: E402,F401
from tablepos.services.bootstrap import seed_defaults  # noqa: E402
from tablepos.services.snapshot import export_state, import_state  # noqa: E402


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed, export or import the POS state store.")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("seed", help="Fill empty collections with the default menu, tables and settings")

    export_parser = sub.add_parser("export", help="Write tables, orders, dishes and config as JSON")
    export_parser.add_argument("path", nargs="?", help="Output file (stdout when omitted)")

    import_parser = sub.add_parser("import", help="Replace the whole store with a JSON snapshot")
    import_parser.add_argument("path", help="Snapshot file")
    import_parser.add_argument("--yes", action="store_true", help="Confirm replacing existing data")
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        if args.command == "seed":
            created = seed_defaults(db)
            db.commit()
            print(f"Seeded dishes={created['dishes']} tables={created['tables']} config={created['config']}")
            return 0

        if args.command == "export":
            payload = json.dumps(export_state(db), ensure_ascii=False, indent=2)
            if args.path:
                Path(args.path).write_text(payload, encoding="utf-8")
            else:
                print(payload)
            return 0

        if not args.yes:
            print("Import replaces every table, order, dish and the settings. Re-run with --yes.")
            return 1
        snapshot = json.loads(Path(args.path).read_text(encoding="utf-8"))
        counts = import_state(db, snapshot)
        db.commit()
        print(f"Imported tables={counts['tables']} orders={counts['orders']} dishes={counts['dishes']}")
        return 0
    except (OSError, ValueError) as exc:
        db.rollback()
        print(str(exc))
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    raise SystemExit(main())
