#!/usr/bin/env python3
"""
Retry Failed Uploads - Maintenance Script

Re-dispatch completed sessions whose upload failed, using the configured
upload backend, and record the new outcome.

Usage:
    python scripts/retry_failed_uploads.py              # Dry run - show what would upload
    python scripts/retry_failed_uploads.py --upload     # Actually upload

Safety:
    - Dry run by default (requires --upload to actually upload)
    - Skips sessions whose artifact is missing
    - Continues on errors (one failed upload won't stop the rest)
"""

import argparse
import logging
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from config.settings import UPLOADS_DIR
from storage import Session, SQLiteSessionStore
from upload import UploadDispatcher, UploadError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def retry_session(
    store: SQLiteSessionStore,
    dispatcher: UploadDispatcher,
    session: Session,
    dry_run: bool = True,
) -> bool:
    """
    Retry the upload of one session.

    Returns:
        True if uploaded (or would be, in dry run)
    """
    artifact = Path(session.filepath)
    prefix = "[DRY RUN] " if dry_run else ""
    logger.info(f"{prefix}Session {session.id}: {artifact.name}")
    logger.info(f"  Previous error: {session.upload_error}")

    if not artifact.exists():
        logger.warning(f"  Artifact missing, skipping: {artifact}")
        return False

    if dry_run:
        logger.info("  [SKIPPED - dry run mode]")
        return True

    try:
        result = dispatcher.upload(artifact, session.id)
    except UploadError as e:
        store.update_status(session.id, session.mark_upload_failed(str(e)))
        logger.error(f"  ❌ FAILED ({e.status.value}): {e}")
        return False

    store.update_status(session.id, session.mark_upload_succeeded(result.location))
    logger.info(f"  ✅ SUCCESS: {result.location}")
    return True


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Retry uploads of sessions whose upload failed",
        epilog="""
Examples:
  %(prog)s              # Dry run - show what would be uploaded
  %(prog)s --upload     # Actually upload
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--upload",
        action="store_true",
        help="Actually upload (default is dry run)",
    )
    parser.add_argument(
        "--uploads-dir",
        default=str(UPLOADS_DIR),
        help=f"Directory holding the session database (default: {UPLOADS_DIR})",
    )
    args = parser.parse_args()

    logger.info("=" * 70)
    logger.info("Retry Failed Uploads - Maintenance Script")
    logger.info("=" * 70)
    logger.info(f"Mode: {'UPLOAD' if args.upload else 'DRY RUN'}")

    store = SQLiteSessionStore(Path(args.uploads_dir))
    try:
        sessions = store.find_failed_uploads()
        if not sessions:
            logger.info("✓ No failed uploads")
            return

        logger.info(f"Found {len(sessions)} failed upload(s)")
        dispatcher = UploadDispatcher() if args.upload else None

        succeeded = 0
        for session in sessions:
            if retry_session(store, dispatcher, session, dry_run=not args.upload):
                succeeded += 1

        logger.info("=" * 70)
        logger.info(f"Done: {succeeded}/{len(sessions)} succeeded")
        if succeeded < len(sessions):
            sys.exit(1)

    finally:
        store.cleanup()


if __name__ == "__main__":
    main()
