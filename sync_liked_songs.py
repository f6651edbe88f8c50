#!/usr/bin/env python3
"""
Sync Spotify liked songs into the S3 snapshot.

Fetches every saved track, prints a colored diff against the snapshot
stored in S3, then uploads the new snapshot.
"""

import argparse
import asyncio
import sys

from dotenv import load_dotenv

from liked_songs.sync_service import AsyncSyncService, SyncService
from liked_songs.utils.credentials import DEFAULT_CREDENTIALS_PATH
from liked_songs.utils.logger import get_logger


logger = get_logger()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Sync Spotify liked songs into the S3 snapshot',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Sync using ./credentials.json and the AWS credentials from the environment
  python sync_liked_songs.py

  # Keep a detailed log file
  LOG_LEVEL=DEBUG python sync_liked_songs.py --log-file sync_logs/latest.log
        """
    )

    parser.add_argument(
        '--credentials',
        default=DEFAULT_CREDENTIALS_PATH,
        help=f'Path to credentials file (default: {DEFAULT_CREDENTIALS_PATH})'
    )

    parser.add_argument(
        '--log-file',
        default=None,
        help='Optional path to a detailed log file'
    )

    return parser


def main(argv=None):
    """Main entry point for the liked songs sync."""
    load_dotenv()
    args = build_parser().parse_args(argv)

    try:
        service = SyncService(
            credentials_path=args.credentials,
            log_file=args.log_file
        )
        report = asyncio.run(AsyncSyncService(service).run())
        logger.info(f"✅ Snapshot uploaded ({report.tracks_total} liked songs)")

    except KeyboardInterrupt:
        logger.info("\n\n⚠️  Sync interrupted by user")
        sys.exit(130)
    except Exception as e:
        logger.error(f"\n❌ Fatal error: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
