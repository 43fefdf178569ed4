"""Run orchestrator wiring together paging, dedup and tag formatting."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable

import structlog

from .config import AppConfig, ConfigRepository, SubgraphConfig
from .engine import DeduplicationStore, Fetcher, NormalizedTag, RawPool, TagFormatter
from .engine.formatter import is_valid_record
from .errors import PaginationStallError, PoolTagError, ValidationError
from .logging_conf import run_logger


class RunState(str, Enum):
    VALIDATING = "validating"
    FETCHING = "fetching"
    DEDUPLICATING = "deduplicating"
    TRANSFORMING = "transforming"
    DONE = "done"
    ABORTED = "aborted"


@dataclass(slots=True)
class PageStats:
    """Per-page progress snapshot handed to `on_page` callbacks."""

    page: int
    cursor: str
    fetched: int
    new: int
    tags: int
    total_tags: int


@dataclass(slots=True)
class RunSummary:
    pages: int = 0
    fetched: int = 0
    duplicates: int = 0
    skipped_invalid: int = 0
    tags: int = 0


@dataclass(slots=True)
class RunReport:
    tags: list[NormalizedTag]
    summary: RunSummary = field(default_factory=RunSummary)


FetcherFactory = Callable[[SubgraphConfig, structlog.BoundLogger], Fetcher]


class TagRun:
    """State for a single produce-tags run: cursor, seen ids and accumulated tags.

    The run either returns every tag or raises; tags gathered before a
    failure are dropped.
    """

    def __init__(
        self,
        config: SubgraphConfig,
        fetcher: Fetcher,
        chain_id: str,
        access_key: str | None,
        *,
        formatter: TagFormatter | None = None,
        logger: structlog.BoundLogger | None = None,
        on_page: Callable[[PageStats], None] | None = None,
    ) -> None:
        self.config = config
        self.fetcher = fetcher
        self.chain_id = chain_id
        self.access_key = access_key
        self.formatter = formatter or TagFormatter()
        self.logger = logger or structlog.get_logger("pool_tags.orchestrator")
        self.on_page = on_page
        self.state = RunState.VALIDATING
        self.cursor = config.initial_cursor
        self.dedup = DeduplicationStore()
        self.results: list[NormalizedTag] = []
        self.summary = RunSummary()

    def execute(self) -> list[NormalizedTag]:
        self._validate()
        endpoint = self.config.endpoint_for(self.access_key or "")
        previous_cursor: str | None = None
        page = 0
        try:
            while True:
                page += 1
                self.state = RunState.FETCHING
                batch = self.fetcher.fetch(endpoint, self.cursor)

                self.state = RunState.DEDUPLICATING
                fresh = self.dedup.filter(batch)

                self.state = RunState.TRANSFORMING
                produced = self._transform(fresh)
                self._record_page(page, batch, fresh, produced)

                if len(batch) < self.config.page_size:
                    self.state = RunState.DONE
                    self.logger.info(
                        "run_completed",
                        pages=page,
                        unique=self.dedup.seen_count,
                        tags=len(self.results),
                    )
                    return self.results

                next_cursor = batch[-1].id
                if (
                    not next_cursor
                    or next_cursor == self.cursor
                    or next_cursor == previous_cursor
                ):
                    raise PaginationStallError(self.cursor, next_cursor, previous_cursor)
                previous_cursor, self.cursor = self.cursor, next_cursor
        except PoolTagError as exc:
            failed_in = self.state
            self.state = RunState.ABORTED
            self.results = []
            self.logger.error(
                "run_aborted",
                page=page,
                state=failed_in.value,
                kind=exc.kind.value,
                error=exc.message,
            )
            exc.with_context(chain_id=self.chain_id, page=page, state=failed_in.value)
            raise

    # ------------------------------------------------------------------
    def _validate(self) -> None:
        chain_id = self.chain_id
        if chain_id != self.config.chain_id:
            self.state = RunState.ABORTED
            raise ValidationError(
                f"Unsupported chain id {chain_id!r}; only {self.config.chain_id!r} is supported",
                context={"chain_id": chain_id},
            )
        if self.access_key is None or not self.access_key.strip():
            self.state = RunState.ABORTED
            raise ValidationError(
                "An access key is required to query the subgraph",
                context={"chain_id": chain_id},
            )

    def _transform(self, records: Iterable[RawPool]) -> int:
        produced = 0
        for record in records:
            if not is_valid_record(record):
                self.summary.skipped_invalid += 1
                self.logger.info("record_skipped", pool_id=record.id, reason="invalid_kind")
                continue
            self.results.append(self.formatter.format(self.chain_id, record))
            produced += 1
        return produced

    def _record_page(
        self, page: int, batch: list[RawPool], fresh: list[RawPool], produced: int
    ) -> None:
        self.summary.pages = page
        self.summary.fetched += len(batch)
        self.summary.duplicates += len(batch) - len(fresh)
        self.summary.tags = len(self.results)
        self.logger.info(
            "page_fetched",
            page=page,
            cursor=self.cursor,
            fetched=len(batch),
            new=len(fresh),
            tags=produced,
        )
        if self.on_page is not None:
            self.on_page(
                PageStats(
                    page=page,
                    cursor=self.cursor,
                    fetched=len(batch),
                    new=len(fresh),
                    tags=produced,
                    total_tags=len(self.results),
                )
            )


class Orchestrator:
    """Entry point building a fresh `TagRun` per call."""

    def __init__(
        self,
        config_repository: ConfigRepository | None = None,
        *,
        config: AppConfig | None = None,
        fetcher_factory: FetcherFactory | None = None,
    ) -> None:
        if config is None:
            config = (config_repository or ConfigRepository()).load_config()
        self.config = config
        self.fetcher_factory: FetcherFactory = fetcher_factory or (
            lambda subgraph, logger: Fetcher(subgraph, logger=logger)
        )

    def run(
        self,
        chain_id: str,
        access_key: str | None,
        on_page: Callable[[PageStats], None] | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> RunReport:
        log = logger or run_logger(str(chain_id))
        subgraph = self.config.subgraph
        log.info(
            "run_started",
            endpoint=subgraph.redacted_endpoint(),
            page_size=subgraph.page_size,
        )
        fetcher = self.fetcher_factory(subgraph, log)
        try:
            tag_run = TagRun(subgraph, fetcher, chain_id, access_key, logger=log, on_page=on_page)
            tags = tag_run.execute()
        finally:
            fetcher.close()
        return RunReport(tags=tags, summary=tag_run.summary)

    def produce_tags(self, chain_id: str, access_key: str | None) -> list[NormalizedTag]:
        """Library entry point: logs through structlog only, no run log file."""

        logger = structlog.get_logger("pool_tags.orchestrator").bind(chain_id=chain_id)
        return self.run(chain_id, access_key, logger=logger).tags


def produce_tags(
    chain_id: str, access_key: str | None, *, config: AppConfig | None = None
) -> list[NormalizedTag]:
    """Fetch every pool for the chain and return its tags, or raise `PoolTagError`."""

    return Orchestrator(config=config or AppConfig()).produce_tags(chain_id, access_key)


__all__ = [
    "Orchestrator",
    "PageStats",
    "RunReport",
    "RunState",
    "RunSummary",
    "TagRun",
    "produce_tags",
]
