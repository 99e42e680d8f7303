#!/usr/bin/env python3
"""
Migration runner for the LuvNFT contracts

Usage:
    luv-migrate                      # run every pending migration
    luv-migrate --migration 3        # run a single migration
    luv-migrate --check              # report ordering problems only
    luv-migrate --reset              # re-run migrations already in the ledger
"""

import sys
import logging
import argparse
from typing import List, Optional

from deployment.backends import Web3Backend
from deployment.config import Config
from deployment.errors import MigrationError, OrderingError
from deployment.ledger import MigrationLedger
from deployment.migrations import MIGRATIONS, migration_names, resolve_migration
from deployment.notifier import Notifier
from deployment.sequencer import check_plan, run_steps
from deployment.steps import DeployContract, DeployLibrary

logger = logging.getLogger(__name__)


def configure_logging(log_file: str):
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler()
        ]
    )


def check_migrations(names: List[str], ledger: MigrationLedger) -> List[str]:
    """Ordering problems across the selected migrations, in run order"""
    known = set(ledger.contracts())
    problems = []
    for name in names:
        steps = MIGRATIONS[name]
        problems.extend(f"{name}: {problem}" for problem in check_plan(steps, previous=known))
        # later migrations may rely on anything this one deploys
        known.update(step.contract for step in steps if isinstance(step, (DeployLibrary, DeployContract)))
    return problems


def run_migrations(config: Config, names: Optional[List[str]] = None, reset: bool = False,
                   backend=None, ledger: Optional[MigrationLedger] = None,
                   notifier: Optional[Notifier] = None) -> List[str]:
    """
    Run pending migrations in order

    Args:
        config: Runner configuration
        names: Migrations to run (full names or numeric prefixes); all when omitted
        reset: Ignore completed migrations recorded in the ledger
        backend: Deployment backend; a Web3Backend is built from config when omitted
        ledger: Migration ledger; loaded from config.deployment_file when omitted
        notifier: Alert sink; built from config.slack_webhook when omitted

    Returns:
        Names of the migrations that ran
    """
    ledger = ledger or MigrationLedger(config.deployment_file, config.network)
    notifier = notifier or Notifier(config.slack_webhook)

    if reset:
        ledger.reset()

    selected = [resolve_migration(name) for name in names] if names else migration_names()
    pending = [name for name in selected if not ledger.is_complete(name)]
    for name in selected:
        if name not in pending:
            logger.info(f"Skipping {name}: already completed on {config.network}")
    if not pending:
        logger.info("Nothing to migrate")
        return []

    problems = check_migrations(pending, ledger)
    if problems:
        raise OrderingError("Migration plan is out of order:\n" + "\n".join(problems))

    if backend is None:
        backend = Web3Backend.from_config(config, known=ledger.contracts())
    account = getattr(backend, 'account', None)
    deployer = account.address if account is not None else None

    completed = []
    for name in pending:
        logger.info(f"Running migration {name} on {config.network}")
        try:
            result = run_steps(MIGRATIONS[name], backend, previous=ledger.contracts())
        except MigrationError as e:
            notifier.migration_failed(name, config.network, e)
            raise

        addresses = {contract: record.address for contract, record in result.records.items()}
        chain_id = config.chain_id if config.chain_id is not None else getattr(backend, 'chain_id', None)
        ledger.record(name, addresses, chain_id=chain_id, deployer=deployer)
        notifier.migration_succeeded(name, config.network, addresses)
        logger.info(f"Migration {name} completed ({result.steps_completed} steps)")
        completed.append(name)

    return completed


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Deploy the LuvNFT contracts")
    parser.add_argument("--network", help="Ledger network name (default: NETWORK or 'development')")
    parser.add_argument("--migration", action="append", dest="migrations",
                        help="Migration to run; may be repeated (default: all pending)")
    parser.add_argument("--check", action="store_true", help="Only report ordering problems")
    parser.add_argument("--reset", action="store_true", help="Re-run completed migrations")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Main function to run the migrations"""
    args = parse_args(argv)
    config = Config.from_env()
    if args.network:
        config.network = args.network

    configure_logging(config.log_file)

    try:
        if args.check:
            ledger = MigrationLedger(config.deployment_file, config.network)
            names = [resolve_migration(name) for name in args.migrations] if args.migrations else migration_names()
            problems = check_migrations(names, ledger)
            for problem in problems:
                logger.error(problem)
            if not problems:
                logger.info("Migration plan OK")
            return 1 if problems else 0

        run_migrations(config, args.migrations, reset=args.reset)
        return 0

    except KeyError as e:
        logger.error(str(e))
        return 2
    except MigrationError as e:
        logger.error(f"Migration failed: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Migration stopped by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
