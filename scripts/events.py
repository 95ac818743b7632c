#!/usr/bin/env python3

"""
This script provides a command-line interface for operators managing event statuses.

This script handles:
- Creating the database schema
- Moving a single event between statuses (with its history row)
- Bulk status changes with the publication readiness gate
- Showing the status history and publication readiness of an event

For usage information, run:
    python events.py --help

Common use cases:
    # Approve a scraped draft
    python events.py transition 5f0c... DRAFT_SCRAPED PENDING_DETAILS --actor alice

    # Publish several events at once
    python events.py publish PUBLISHED 5f0c... 91ab...

    # Show what an event is missing before it can be published
    python events.py readiness 5f0c...
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

# Add project root to Python path
sys.path.append(str(Path(__file__).parent.parent))

from event_lifecycle.db import db, with_retry, DatabaseError
from event_lifecycle.lifecycle import (
    SYSTEM_ACTOR,
    LifecycleError,
    get_publish_readiness,
    get_state_history,
    publish_status,
    transition,
)
from event_lifecycle.models.event import EventStatus
from event_lifecycle.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)

STATUS_CHOICES = [status.value for status in EventStatus]

def _print_json(data) -> None:
    print(json.dumps(data, indent=2, default=str))

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Event lifecycle management tool',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""Examples:
  # Create tables
  events.py init-db

  # Move one event, recording who did it and why
  events.py transition ID READY_TO_PUBLISH CANCELED --actor bob --metadata '{"reason": "venue closed"}'

  # Bulk publish
  events.py publish PUBLISHED ID1 ID2

  # Status history, newest first
  events.py history ID
        """
    )

    subparsers = parser.add_subparsers(dest='command', help='Command to execute', required=True)

    subparsers.add_parser('init-db', help='Create database tables')

    transition_parser = subparsers.add_parser('transition', help='Move one event to a new status')
    transition_parser.add_argument('event_id', help='Event ID')
    transition_parser.add_argument('expected_status', choices=STATUS_CHOICES,
                                   help='Status the event is expected to have')
    transition_parser.add_argument('status', choices=STATUS_CHOICES, help='Target status')
    transition_parser.add_argument('--actor', default=SYSTEM_ACTOR, help='Who performs the change')
    transition_parser.add_argument('--metadata', type=json.loads, default={},
                                   help='JSON object stored with the history row')

    publish_parser = subparsers.add_parser('publish', help='Move several events to one status')
    publish_parser.add_argument('status', choices=STATUS_CHOICES, help='Target status')
    publish_parser.add_argument('event_ids', nargs='+', help='Event IDs')
    publish_parser.add_argument('--actor', default=SYSTEM_ACTOR, help='Who performs the change')

    history_parser = subparsers.add_parser('history', help='Show the status history of an event')
    history_parser.add_argument('event_id', help='Event ID')
    history_parser.add_argument('--oldest-first', action='store_true',
                                help='List the oldest change first')

    readiness_parser = subparsers.add_parser('readiness', help='Check publication readiness')
    readiness_parser.add_argument('event_id', help='Event ID')

    return parser

def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the script"""
    args = build_parser().parse_args(argv)
    setup_logging()

    try:
        if args.command == 'init-db':
            db.init_db()

        elif args.command == 'transition':
            updated = with_retry()(transition)(
                args.event_id,
                args.expected_status,
                args.status,
                actor=args.actor,
                metadata=args.metadata,
            )
            if updated is None:
                logger.info(f"Event {args.event_id} already {args.status}, nothing to do")
            else:
                _print_json(updated)

        elif args.command == 'publish':
            results = publish_status(args.event_ids, args.status, actor=args.actor)
            _print_json(results)
            if results['failed']:
                return 1

        elif args.command == 'history':
            _print_json(get_state_history(args.event_id, newest_first=not args.oldest_first))

        elif args.command == 'readiness':
            readiness = get_publish_readiness(args.event_id)
            _print_json(readiness.to_dict())
            if not readiness.ready:
                return 1

    except (LifecycleError, DatabaseError) as e:
        logger.error(f"{args.command} failed: {e}")
        return 1

    return 0

if __name__ == "__main__":
    sys.exit(main())
