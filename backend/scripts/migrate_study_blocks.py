#!/usr/bin/env python3
"""
Migration script to copy a user's legacy study slots into the study_blocks table.

This script:
1. Skips the user if they already have study blocks
2. Reads their slots from the legacy Cognito custom attributes (--source cognito)
   or from the local schedule cache (--source cache)
3. Creates one study block per slot

Cognito slots carry no weekday and are stored without one. Cached slots keep
their weekday in the cache, so the study hours page can still group them.

Usage:
    python scripts/migrate_study_blocks.py --owner-id USER_ID --source cache
    python scripts/migrate_study_blocks.py --owner-id USER_ID --source cognito --username EMAIL
"""

import argparse
import sys
from pathlib import Path

# Add backend/src to path
backend_src = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(backend_src))

import boto3  # type: ignore

from core.config import AWS_REGION, COGNITO_USER_POOL_ID, SCHEDULE_CACHE_DIR
from core.database import create_db_engine, create_session_factory, create_tables, session_scope
from core.log_config import configure_logging
from services.legacy_attribute_source import CognitoAttributeSource
from services.schedule_cache import JsonFileScheduleCache
from services.study_block_migration_service import MigrationResult, StudyBlockMigrationService
from services.study_block_store import SqlAlchemyStudyBlockStore


def run_migration(args: argparse.Namespace) -> MigrationResult:
    """
    Run one owner's migration against the configured database.

    Args:
        args: Parsed command line arguments
    """
    engine = create_db_engine(args.database_url)
    try:
        create_tables(engine)
        factory = create_session_factory(engine)
        with session_scope(factory) as db:
            service = StudyBlockMigrationService(SqlAlchemyStudyBlockStore(db))

            if args.source == "cache":
                cache = JsonFileScheduleCache(args.cache_dir)
                return service.migrate_from_cache(args.owner_id, cache)

            client = boto3.client("cognito-idp", region_name=args.region)
            source = CognitoAttributeSource(client, args.user_pool_id)
            return service.migrate_from_cognito(args.owner_id, source, args.username or args.owner_id)
    finally:
        engine.dispose()


def main() -> int:
    parser = argparse.ArgumentParser(description="Migrate legacy study slots into study blocks")
    parser.add_argument("--owner-id", required=True, help="Owner id of the study blocks")
    parser.add_argument("--source", choices=["cognito", "cache"], required=True)
    parser.add_argument("--username", help="Cognito username (defaults to owner id)")
    parser.add_argument("--user-pool-id", default=COGNITO_USER_POOL_ID)
    parser.add_argument("--region", default=AWS_REGION)
    parser.add_argument("--cache-dir", default=SCHEDULE_CACHE_DIR)
    parser.add_argument("--database-url", default=None)
    args = parser.parse_args()

    configure_logging()

    if args.source == "cognito" and not args.user_pool_id:
        print("✗ COGNITO_USER_POOL_ID is not set (or pass --user-pool-id)")
        return 1

    result = run_migration(args)

    if not result.success:
        print(f"✗ Migration failed for {args.owner_id}: {result.error}")
        return 1
    if result.skipped_reason:
        print(f"- Skipped {args.owner_id}: {result.skipped_reason}")
    else:
        print(f"✓ Migrated {result.migrated} study blocks for {args.owner_id}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
