from __future__ import annotations

import pytest

from bookbridge.config import ReconciliationConfig
from bookbridge.domain.reconciliation import ReconciliationContext, ReconciliationEngine
from bookbridge.domain.scheduling import ManualScheduler
from tests.helpers.reconciliation import FakeConnector, FakeFetcher


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def connector() -> FakeConnector:
    return FakeConnector()


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def config() -> ReconciliationConfig:
    return ReconciliationConfig()


@pytest.fixture
def context(
    scheduler: ManualScheduler,
    connector: FakeConnector,
    fetcher: FakeFetcher,
    config: ReconciliationConfig,
) -> ReconciliationContext:
    return ReconciliationContext.create(
        connector=connector,
        fetcher=fetcher,
        scheduler=scheduler,
        config=config,
    )


@pytest.fixture
def engine(
    scheduler: ManualScheduler,
    connector: FakeConnector,
    fetcher: FakeFetcher,
    config: ReconciliationConfig,
) -> ReconciliationEngine:
    return ReconciliationEngine.build(
        connector=connector,
        fetcher=fetcher,
        scheduler=scheduler,
        config=config,
    )
