"""Command dispatch: bootstrap the schema, run one update, or do nothing."""

from __future__ import annotations

import asyncio
import logging
import os
import sys

from dotenv import load_dotenv
from sqlalchemy.exc import SQLAlchemyError

from gridwatch.db.migrate import run_migrations
from gridwatch.db.session import create_engine_from_env
from gridwatch.ingest.errors import IngestError
from gridwatch.jobs.update import run_update

logger = logging.getLogger(__name__)


def _flag(name: str) -> bool:
    return os.environ.get(name, "") == "1"


def main() -> None:
    env_file = os.environ.get("DOT_ENV")
    if env_file:
        if not os.path.isfile(env_file):
            print(f"Environment file not found: {env_file}", file=sys.stderr)
            sys.exit(1)
        load_dotenv(env_file)
    else:
        load_dotenv()
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if _flag("CREATE"):
        engine = create_engine_from_env()
        try:
            run_migrations(engine)
        except SQLAlchemyError as exc:
            logger.error("Schema bootstrap failed: %s", exc)
            sys.exit(2)
        finally:
            engine.dispose()
        return

    if _flag("UPDATE"):
        engine = create_engine_from_env()
        try:
            asyncio.run(run_update(engine))
        except IngestError as exc:
            logger.error("Ingestion failed in %s stage: %s", exc.stage, exc)
            sys.exit(1)
        except SQLAlchemyError as exc:
            logger.error("Ingestion failed in persist stage: %s", exc)
            sys.exit(1)
        except ValueError as exc:
            logger.error("Invalid configuration: %s", exc)
            sys.exit(1)
        finally:
            engine.dispose()
        return

    logger.info("nothing ran")


if __name__ == "__main__":
    main()
