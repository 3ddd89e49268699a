"""Builds the object graph from settings. Entry points call this once."""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from wordwise.catalog import ItemCatalog, SqlItemCatalog
from wordwise.config import Settings, get_settings
from wordwise.core.clock import Clock, SystemClock
from wordwise.db.database import Database
from wordwise.repository import ProgressRepository, SqlProgressRepository
from wordwise.scheduling import SchedulingEngine
from wordwise.service import ProgressService
from wordwise.stats import StatsAggregator


@dataclass
class Services:
    catalog: ItemCatalog
    repository: ProgressRepository
    progress: ProgressService
    stats: StatsAggregator
    db: Database | None = None

    def close(self) -> None:
        if self.db is not None:
            self.db.dispose()


def build_services(
    settings: Settings | None = None,
    clock: Clock | None = None,
    create_tables: bool = True,
) -> Services:
    """Wire the SQL-backed catalog, repository and service."""
    settings = settings or get_settings()
    db = Database(settings.database_url, echo=settings.database_echo)
    if create_tables:
        db.init_db()

    catalog = SqlItemCatalog(db)
    repository = SqlProgressRepository(db, catalog)
    service = ProgressService(
        repository,
        engine=SchedulingEngine(settings.sm2_config()),
        clock=clock or SystemClock(),
        read_workers=settings.queue_read_workers,
    )
    logger.debug(f"Services built for {db.engine.url.render_as_string(hide_password=True)}")
    return Services(
        catalog=catalog,
        repository=repository,
        progress=service,
        stats=StatsAggregator(repository, catalog),
        db=db,
    )
