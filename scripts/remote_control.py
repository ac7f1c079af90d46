#!/usr/bin/env python3
"""
Remote Control Script

Send commands to the capture service remotely (via SSH or locally).

Usage:
    python scripts/remote_control.py preview             # Start live preview
    python scripts/remote_control.py stop_preview        # Stop live preview
    python scripts/remote_control.py start "drill 3"     # Start recording with notes
    python scripts/remote_control.py stop                # Stop recording
    python scripts/remote_control.py notes <id> "text"   # Update session notes
    python scripts/remote_control.py status              # Log status

Or even simpler:
    ssh pi@capture "echo STOP > /tmp/capture_control.cmd"

How it works:
- Writes command to control file (CONTROL_FILE)
- Service checks this file every CONTROL_POLL_INTERVAL
- File is deleted after processing
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from config.settings import CONTROL_FILE

COMMANDS = ["preview", "stop_preview", "start", "stop", "notes", "status"]


def build_command(command: str, arguments: List[str]) -> str:
    """
    Build the control file line.

    Raises:
        ValueError: If arguments do not fit the command
    """
    keyword = command.upper()

    if keyword == "NOTES":
        if len(arguments) < 2:
            raise ValueError("notes requires a session id and the text")
        return f"NOTES {arguments[0]} {' '.join(arguments[1:])}"

    if keyword == "START":
        return f"START {' '.join(arguments)}".strip()

    if arguments:
        raise ValueError(f"{command} takes no arguments")
    return keyword


def send_command(line: str, control_file: Optional[Path] = None) -> bool:
    """
    Send a command to the capture service.

    Returns:
        True if command was written, False otherwise
    """
    target = control_file or Path(CONTROL_FILE)
    try:
        target.write_text(line)
    except OSError as e:
        print(f"❌ Failed to send command: {e}")
        return False

    print(f"✅ Command sent: {line}")
    print("Service will process it within ~1 second")
    return True


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Send commands to the capture service remotely",
        epilog="""
Examples:
  %(prog)s preview                  # Start live preview
  %(prog)s start "warmup drills"    # Start recording with notes
  %(prog)s stop                     # Stop recording
  %(prog)s notes <session-id> text  # Update notes
  %(prog)s status                   # Show current status in service logs
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "command",
        choices=COMMANDS,
        help="Command to send to capture service",
    )
    parser.add_argument(
        "arguments",
        nargs="*",
        help="Notes for start, or <session id> <text> for notes",
    )

    args = parser.parse_args()

    try:
        line = build_command(args.command, args.arguments)
    except ValueError as e:
        parser.error(str(e))

    success = send_command(line)
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
