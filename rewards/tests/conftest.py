import pytest

from rewards.service import RewardsService
from rewards.store import LedgerStore


@pytest.fixture
def store(tmp_path):
    ledger_store = LedgerStore(f"sqlite:///{tmp_path / 'rewards.db'}")
    yield ledger_store
    ledger_store.close()


@pytest.fixture
def service(store):
    return RewardsService(store)
