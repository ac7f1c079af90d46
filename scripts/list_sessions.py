#!/usr/bin/env python3
"""
List Sessions

Print stored capture sessions, newest first.

Usage:
    python scripts/list_sessions.py                 # All sessions
    python scripts/list_sessions.py --limit 10      # Last 10
    python scripts/list_sessions.py --id <id>       # One session, all fields
    python scripts/list_sessions.py --failed        # Failed uploads only
"""

import argparse
import json
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from capture.utils.capture_utils import format_duration
from config.settings import UPLOADS_DIR
from storage import SQLiteSessionStore, StorageError


def format_row(session) -> str:
    duration = format_duration(session.duration) if session.duration is not None else "-"
    location = session.remote_location or session.upload_error or ""
    return (
        f"{session.id}  {session.start_time:%Y-%m-%d %H:%M:%S}  "
        f"{session.status.value:<9}  {duration:>8}  "
        f"{session.upload_status.value:<9}  {location}"
    )


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="List stored capture sessions")
    parser.add_argument("--id", help="Show one session with every field")
    parser.add_argument("--limit", type=int, default=0, help="Show only the newest N")
    parser.add_argument("--failed", action="store_true", help="Only failed uploads")
    parser.add_argument(
        "--uploads-dir",
        default=str(UPLOADS_DIR),
        help=f"Directory holding the session database (default: {UPLOADS_DIR})",
    )
    args = parser.parse_args()

    try:
        store = SQLiteSessionStore(Path(args.uploads_dir))
    except StorageError as e:
        print(f"❌ Cannot open session store: {e}")
        sys.exit(1)

    try:
        if args.id:
            session = store.find(args.id)
            if session is None:
                print(f"❌ Session not found: {args.id}")
                sys.exit(1)
            print(json.dumps(session.to_dict(), indent=2))
            return

        if args.failed:
            sessions = list(reversed(store.find_failed_uploads()))
        else:
            sessions = store.find_all(newest_first=True)

        if args.limit:
            sessions = sessions[: args.limit]

        if not sessions:
            print("No sessions found")
            return

        for session in sessions:
            print(format_row(session))
        print(f"\n{len(sessions)} session(s)")

    finally:
        store.cleanup()


if __name__ == "__main__":
    main()
