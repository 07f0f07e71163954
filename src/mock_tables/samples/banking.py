"""
Demo graph: a small retail-banking dataset.

customers
└── accounts (dependency key "account")
    ├── transactions
    └── accounts (dependency key "counterparty")
        └── transfers

Every account belongs to the customer row it was generated under, every
transaction to its account, and every transfer moves money between the two
accounts on its path. The counterparty account shares the ``accounts`` table
but uses its own dependency key so transfers can reference both accounts.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, List, Sequence, Union

from mock_tables.generator.base import TableGenerator
from mock_tables.utils.randomness import sample_count, seeded_faker, uuid4

Count = Union[int, range, Sequence[int]]

ACCOUNT_TYPES = ["checking", "savings", "money_market", "certificate", "ira"]
TRANSACTION_TYPES = ["deposit", "withdrawal", "payment", "fee", "interest"]

# Timestamps fall in a fixed window, independent of the current date
HISTORY_START = datetime(2015, 1, 1)
HISTORY_END = datetime(2024, 12, 31)


def _as_count(value: Count) -> Union[int, range]:
    """Accept an int, a range, or an inclusive [low, high] pair (as in YAML)."""
    if isinstance(value, (list, tuple)):
        if len(value) != 2:
            raise ValueError(f"Expected a [low, high] pair, got {value!r}")
        low, high = value
        return range(int(low), int(high) + 1)
    return value


class CustomerGenerator(TableGenerator):
    """Root customers. A Faker instance is seeded once per visit."""

    table_key = "customers"

    def __init__(self, count: Count = 5):
        self.count = _as_count(count)

    def visit(self, rng, deps):
        return {"fake": seeded_faker(rng)}

    def num_rows(self, rng, state=None):
        return sample_count(rng, self.count)

    def emit(self, rng, deps, state=None):
        fake = state["fake"]
        return {
            "customer_id": str(uuid4(rng)),
            "name": fake.name(),
            "email": fake.email(),
            "created_at": fake.date_time_between(start_date=HISTORY_START, end_date=HISTORY_END),
        }


class AccountGenerator(TableGenerator):
    """
    Accounts owned by the enclosing customer.

    The visit pre-rolls a shuffled pool of account types and pops one per
    row, so a customer never holds two accounts of the same type in one visit.
    """

    table_key = "accounts"

    def __init__(self, count: Count = range(1, 4), dependency_key: str = "account"):
        self.count = _as_count(count)
        self._dependency_key = dependency_key

    @property
    def dependency_key(self) -> str:
        return self._dependency_key

    def visit(self, rng, deps):
        pool: List[str] = [str(t) for t in rng.permutation(ACCOUNT_TYPES)]
        return {"pool": pool, "n": min(sample_count(rng, self.count), len(pool))}

    def num_rows(self, rng, state=None):
        return state["n"]

    def emit(self, rng, deps, state=None):
        customer = deps["customers"]
        opened_days = int(rng.integers(0, 365 * 5))
        return {
            "account_id": str(uuid4(rng)),
            "customer_id": customer["customer_id"],
            "account_type": state["pool"].pop(),
            "opened_at": customer["created_at"] + timedelta(days=opened_days),
            "balance": round(float(rng.uniform(0, 25_000)), 2),
        }


class TransactionGenerator(TableGenerator):
    """Transactions on the enclosing account, numbered 1..n per account."""

    table_key = "transactions"

    def __init__(self, count: Count = range(0, 6)):
        self.count = _as_count(count)

    def visit(self, rng, deps):
        return {"seq": 1, "at": deps["account"]["opened_at"]}

    def num_rows(self, rng, state=None):
        return sample_count(rng, self.count)

    def emit(self, rng, deps, state=None):
        account = deps["account"]
        state["at"] = state["at"] + timedelta(minutes=int(rng.integers(1, 60 * 24 * 14)))
        row = {
            "transaction_id": str(uuid4(rng)),
            "account_id": account["account_id"],
            "sequence": state["seq"],
            "transaction_type": str(rng.choice(TRANSACTION_TYPES)),
            "amount": round(float(rng.lognormal(mean=3.5, sigma=1.0)), 2),
            "posted_at": state["at"],
        }
        state["seq"] += 1
        return row


class TransferGenerator(TableGenerator):
    """Transfers from the enclosing account to the counterparty account."""

    table_key = "transfers"

    def __init__(self, count: Count = 1):
        self.count = _as_count(count)

    def num_rows(self, rng, state=None):
        return sample_count(rng, self.count)

    def emit(self, rng, deps, state=None):
        source, target = deps["account"], deps["counterparty"]
        return {
            "transfer_id": str(uuid4(rng)),
            "from_account_id": source["account_id"],
            "to_account_id": target["account_id"],
            "amount": round(float(rng.uniform(10, min(source["balance"], 5_000) + 10)), 2),
        }


def build_graph(
    customers: Count = 5,
    accounts: Count = (1, 3),
    transactions: Count = (0, 5),
    counterparties: Count = (0, 1),
    transfers: Count = 1,
) -> Any:
    """
    Build the demo graph.

    Counts are an int, a range, or an inclusive ``[low, high]`` pair.
    """
    return (
        CustomerGenerator(customers),
        [
            (
                AccountGenerator(accounts),
                [
                    TransactionGenerator(transactions),
                    (
                        AccountGenerator(counterparties, dependency_key="counterparty"),
                        TransferGenerator(transfers),
                    ),
                ],
            ),
        ],
    )
