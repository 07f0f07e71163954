"""Tests for the demo banking graph."""

import numpy as np
import pandas as pd
import pytest

from mock_tables.generator import generate
from mock_tables.output import collect_tables
from mock_tables.samples.banking import build_graph


@pytest.fixture
def tables():
    graph = build_graph(customers=6, accounts=(1, 3), transactions=(0, 4), counterparties=1)
    return collect_tables(generate(graph, np.random.default_rng(2024)))


class TestBankingGraph:
    """Tests for referential integrity of the demo data."""

    def test_table_order(self, tables):
        assert list(tables)[:2] == ["customers", "accounts"]
        assert set(tables) == {"customers", "accounts", "transactions", "transfers"}

    def test_customer_count(self, tables):
        assert len(tables["customers"]) == 6
        assert tables["customers"]["customer_id"].is_unique

    def test_accounts_reference_customers(self, tables):
        customer_ids = set(tables["customers"]["customer_id"])
        assert set(tables["accounts"]["customer_id"]).issubset(customer_ids)

    def test_transactions_reference_accounts(self, tables):
        account_ids = set(tables["accounts"]["account_id"])
        assert set(tables["transactions"]["account_id"]).issubset(account_ids)

    def test_transaction_sequences(self, tables):
        for _, group in tables["transactions"].groupby("account_id", sort=False):
            assert group["sequence"].tolist() == list(range(1, len(group) + 1))
            assert group["posted_at"].is_monotonic_increasing

    def test_transfers_between_same_customer_accounts(self, tables):
        owner = tables["accounts"].set_index("account_id")["customer_id"]
        transfers = tables["transfers"]

        assert len(transfers) > 0
        assert (transfers["from_account_id"] != transfers["to_account_id"]).all()
        assert (
            transfers["from_account_id"].map(owner) == transfers["to_account_id"].map(owner)
        ).all()

    def test_deterministic_with_seed(self):
        graph = build_graph(customers=3)
        first = collect_tables(generate(graph, np.random.default_rng(1)))
        second = collect_tables(generate(graph, np.random.default_rng(1)))

        for name in first:
            pd.testing.assert_frame_equal(first[name], second[name])

    def test_different_seeds_different_results(self):
        graph = build_graph(customers=3)
        first = collect_tables(generate(graph, np.random.default_rng(111)))
        second = collect_tables(generate(graph, np.random.default_rng(222)))

        assert not first["customers"]["customer_id"].equals(second["customers"]["customer_id"])

    def test_zero_accounts(self):
        tables = collect_tables(generate(build_graph(customers=2, accounts=0), 1))
        assert list(tables) == ["customers"]

    def test_invalid_count_pair(self):
        with pytest.raises(ValueError):
            build_graph(customers=(1, 2, 3))
