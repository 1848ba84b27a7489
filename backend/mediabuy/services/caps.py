from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from mediabuy.models.network_cap import NetworkCap
from mediabuy.services.ingestion import parse_money
from mediabuy.services.records import canonical_pair

logger = logging.getLogger(__name__)

# Literal sentinels used by the payment schedule sheet.
CAP_PAUSED = 0.0
CAP_UNCAPPED = 100000.0


@dataclass(frozen=True)
class CapEntry:
    network: str
    offer: str
    daily_cap: float


def cap_key(network: str, offer: str) -> str:
    network, offer = canonical_pair(network, offer)
    return f"{network}-{offer}"


def parse_cap_rows(rows: Iterable[list[Any]]) -> list[CapEntry]:
    """Read "Network Payment Schedule" rows (network, offer, _, daily cap).

    The first row is a header and is skipped.
    """
    entries: dict[tuple[str, str], CapEntry] = {}
    iterator = iter(rows)
    next(iterator, None)
    for row in iterator:
        if len(row) < 2:
            continue
        network = str(row[0] or "").strip()
        offer = str(row[1] or "").strip()
        if not network or not offer:
            continue
        raw_cap = row[3] if len(row) > 3 else None
        daily_cap = parse_money(raw_cap)
        network, offer = canonical_pair(network, offer)
        entries[(network, offer)] = CapEntry(
            network=network,
            offer=offer,
            daily_cap=daily_cap if daily_cap is not None else 0.0,
        )
    return list(entries.values())


def cap_mapping(entries: Iterable[CapEntry]) -> dict[str, float]:
    return {cap_key(entry.network, entry.offer): entry.daily_cap for entry in entries}


def cap_lookup(caps: dict[str, float], network: str, offer: str) -> float | None:
    return caps.get(cap_key(network, offer))


def cap_status(cap: float | None) -> str:
    if cap is None:
        return "unknown"
    if cap == CAP_PAUSED:
        return "paused"
    if cap == CAP_UNCAPPED:
        return "uncapped"
    return "capped"


def load_caps(db: Session) -> list[CapEntry]:
    return [
        CapEntry(network=row.network, offer=row.offer, daily_cap=row.daily_cap)
        for row in db.scalars(select(NetworkCap).order_by(NetworkCap.id)).all()
    ]


def replace_caps(db: Session, entries: Iterable[CapEntry]) -> int:
    rows = [
        NetworkCap(network=entry.network, offer=entry.offer, daily_cap=entry.daily_cap)
        for entry in entries
    ]
    try:
        db.execute(delete(NetworkCap))
        db.add_all(rows)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("Stored %s network caps", len(rows))
    return len(rows)
