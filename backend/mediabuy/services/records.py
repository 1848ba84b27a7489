from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from typing import Callable, Hashable, Iterable, Sequence, TypeVar

from mediabuy.services.windows import DateInterval

KeyT = TypeVar("KeyT", bound=Hashable)

# Network/offer pairs that report under a canonical pair.
CANONICAL_PAIRS: dict[tuple[str, str], tuple[str, str]] = {
    ("Suited", "ACA"): ("ACA", "ACA"),
}


@dataclass(frozen=True)
class Record:
    date: date
    buyer: str
    network: str
    offer: str
    account: str
    spend: float
    revenue: float
    profit: float


@dataclass(frozen=True)
class Batch:
    records: tuple[Record, ...] = ()
    anchor: date | None = None
    generation: int = 0
    source: str = "empty"

    def __len__(self) -> int:
        return len(self.records)


def canonical_pair(network: str, offer: str) -> tuple[str, str]:
    return CANONICAL_PAIRS.get((network, offer), (network, offer))


def normalize_record(record: Record) -> Record:
    network, offer = canonical_pair(record.network, record.offer)
    if (network, offer) == (record.network, record.offer):
        return record
    return replace(record, network=network, offer=offer)


def anchor_date(records: Iterable[Record]) -> date | None:
    return max((record.date for record in records), default=None)


def build_batch(
    records: Iterable[Record],
    generation: int = 0,
    source: str = "database",
) -> Batch:
    normalized = tuple(normalize_record(record) for record in records)
    return Batch(
        records=normalized,
        anchor=anchor_date(normalized),
        generation=generation,
        source=source,
    )


def filter_records(
    records: Iterable[Record],
    predicate: Callable[[Record], bool],
) -> list[Record]:
    return [record for record in records if predicate(record)]


def filter_by_interval(records: Iterable[Record], interval: DateInterval) -> list[Record]:
    return filter_records(records, lambda record: interval.contains(record.date))


def matches(
    record: Record,
    buyer: str | None = None,
    network: str | None = None,
    offer: str | None = None,
    account: str | None = None,
) -> bool:
    record = normalize_record(record)
    if buyer and record.buyer != buyer:
        return False
    if network and record.network != network:
        return False
    if offer and record.offer != offer:
        return False
    if account and record.account != account:
        return False
    return True


def group_by(
    records: Iterable[Record],
    key_fn: Callable[[Record], KeyT],
) -> dict[KeyT, list[Record]]:
    groups: dict[KeyT, list[Record]] = {}
    for record in records:
        groups.setdefault(key_fn(record), []).append(record)
    return groups


def buyer_key(record: Record) -> tuple[str]:
    return (record.buyer,)


def network_key(record: Record) -> tuple[str]:
    return (normalize_record(record).network,)


def offer_key(record: Record) -> tuple[str]:
    return (normalize_record(record).offer,)


def network_offer_key(record: Record) -> tuple[str, str]:
    record = normalize_record(record)
    return (record.network, record.offer)


def buyer_network_offer_key(record: Record) -> tuple[str, str, str]:
    record = normalize_record(record)
    return (record.buyer, record.network, record.offer)


def account_key(record: Record) -> tuple[str, str, str, str]:
    record = normalize_record(record)
    return (record.buyer, record.account, record.network, record.offer)


KEY_FUNCTIONS: dict[str, Callable[[Record], tuple[str, ...]]] = {
    "buyer": buyer_key,
    "network": network_key,
    "offer": offer_key,
    "network_offer": network_offer_key,
    "buyer_offer": buyer_network_offer_key,
    "account": account_key,
}

KEY_FIELDS: dict[str, tuple[str, ...]] = {
    "buyer": ("buyer",),
    "network": ("network",),
    "offer": ("offer",),
    "network_offer": ("network", "offer"),
    "buyer_offer": ("buyer", "network", "offer"),
    "account": ("buyer", "account", "network", "offer"),
}


def format_key(key: Sequence[str]) -> str:
    return " - ".join(part for part in key if part)


@dataclass
class RecordFilters:
    buyer: str | None = None
    network: str | None = None
    offer: str | None = None
    account: str | None = None

    def apply(self, records: Iterable[Record]) -> list[Record]:
        return filter_records(
            records,
            lambda record: matches(
                record,
                buyer=self.buyer,
                network=self.network,
                offer=self.offer,
                account=self.account,
            ),
        )
