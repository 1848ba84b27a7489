from datetime import date, timedelta

from mediabuy.services.records import Record


def make_record(
    day: date,
    buyer: str = "Alice",
    network: str = "NetA",
    offer: str = "Offer1",
    account: str = "Acc1",
    spend: float = 100.0,
    revenue: float = 150.0,
    profit: float | None = None,
) -> Record:
    return Record(
        date=day,
        buyer=buyer,
        network=network,
        offer=offer,
        account=account,
        spend=spend,
        revenue=revenue,
        profit=revenue - spend if profit is None else profit,
    )


def week_of(anchor: date, days: int = 7) -> list[date]:
    return [anchor - timedelta(days=offset) for offset in range(days - 1, -1, -1)]
