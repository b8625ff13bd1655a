"""
Environment bootloader.

Used by:
1. Application startup (lifespan) -> mode="critical"
2. The /health endpoint -> individual service checks
3. Manual smoke checks -> ``python -m happy_thoughts.boot --mode full``
"""

import asyncio
import sys
import time
from dataclasses import dataclass
from enum import Enum

import redis.asyncio as aioredis
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from happy_thoughts.config import Settings
from happy_thoughts.database import Database
from happy_thoughts.logger import get_logger

logger = get_logger(__name__)


class BootMode(str, Enum):
    CRITICAL = "critical"  # Config + DB (fast fail for startup)
    FULL = "full"  # Config + DB + Redis (smoke tests)
    DRY_RUN = "dry-run"  # Static config check only


@dataclass
class ServiceStatus:
    service: str
    status: str  # 'ok', 'warning', 'error', 'skipped'
    message: str
    duration_ms: float = 0.0


class Bootloader:
    """Handles environment validation and service connectivity checks."""

    def __init__(self, settings: Settings, database: Database) -> None:
        self.settings = settings
        self.database = database

    async def validate(self, mode: BootMode = BootMode.CRITICAL) -> bool:
        """Run validation checks. Returns True if passed, False if failed.

        In CRITICAL mode a failure exits the process with status 1.
        """
        logger.info("Bootloader starting validation", mode=mode.value)

        if not self.check_static_config():
            if mode == BootMode.CRITICAL:
                logger.critical("Static configuration check failed. Refusing to start.")
                sys.exit(1)
            return False

        if mode == BootMode.DRY_RUN:
            return True

        results = [await self.check_database()]
        if mode == BootMode.FULL:
            results.append(await self.check_redis())

        passed = True
        for res in results:
            if res.status == "error":
                passed = False
                logger.error("Service check failed", service=res.service, error=res.message, duration_ms=res.duration_ms)
            else:
                logger.info("Service check passed", service=res.service, status=res.status, duration_ms=res.duration_ms)

        if not passed:
            if mode == BootMode.CRITICAL:
                logger.critical("Critical service checks failed. Application cannot start.")
                sys.exit(1)
            return False

        logger.info("Bootloader validation successful")
        return True

    def check_static_config(self) -> bool:
        """Reject configurations that must never reach production."""
        if self.settings.is_production and self.settings.uses_placeholder_secret:
            logger.error("SECRET_KEY is a placeholder value in production")
            return False
        if self.settings.is_production and self.settings.debug:
            logger.error("DEBUG must be disabled in production")
            return False
        if self.settings.uses_placeholder_secret:
            logger.warning("SECRET_KEY is a placeholder value; tokens are forgeable")
        return True

    async def check_database(self) -> ServiceStatus:
        """Verify database connectivity (SELECT 1)."""
        start = time.perf_counter()
        try:
            await self.database.ping()
        except (SQLAlchemyError, OSError) as e:
            duration_ms = (time.perf_counter() - start) * 1000
            return ServiceStatus("database", "error", str(e), duration_ms)
        duration_ms = (time.perf_counter() - start) * 1000
        return ServiceStatus("database", "ok", "Connection successful", duration_ms)

    async def check_redis(self) -> ServiceStatus:
        if not self.settings.redis_url:
            return ServiceStatus("redis", "skipped", "Not configured")

        start = time.perf_counter()
        try:
            client = aioredis.from_url(self.settings.redis_url, decode_responses=True)
            try:
                await client.ping()
            finally:
                await client.aclose()
        except (aioredis.RedisError, OSError) as e:
            duration_ms = (time.perf_counter() - start) * 1000
            return ServiceStatus("redis", "error", str(e), duration_ms)
        duration_ms = (time.perf_counter() - start) * 1000
        return ServiceStatus("redis", "ok", "Ping successful", duration_ms)


async def _run(mode: BootMode) -> bool:
    settings = Settings()
    database = Database(settings.database_url)
    try:
        return await Bootloader(settings, database).validate(mode)
    finally:
        await database.dispose()


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser()
    parser.add_argument("--mode", type=str, default="full", choices=["critical", "full", "dry-run"])
    args = parser.parse_args()

    try:
        success = asyncio.run(_run(BootMode(args.mode)))
    except ValidationError as exc:
        print(f"Configuration invalid: {exc}")
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nAborted.")
        sys.exit(130)

    sys.exit(0 if success else 1)
