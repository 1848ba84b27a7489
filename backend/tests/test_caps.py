from mediabuy.services.caps import (
    CAP_PAUSED,
    CAP_UNCAPPED,
    CapEntry,
    cap_key,
    cap_lookup,
    cap_mapping,
    cap_status,
    load_caps,
    parse_cap_rows,
    replace_caps,
)


def test_parse_cap_rows_skips_header_and_blank_rows() -> None:
    rows = [
        ["Network", "Offer", "Terms", "Daily Cap"],
        ["NetA", "Offer1", "Net 30", "$2,500"],
        ["Suited", "ACA", "Weekly", "0"],
        ["", "Offer2", "", "100"],
        ["NetB", "Offer3"],
    ]

    entries = parse_cap_rows(rows)

    assert entries == [
        CapEntry(network="NetA", offer="Offer1", daily_cap=2500.0),
        CapEntry(network="ACA", offer="ACA", daily_cap=0.0),
        CapEntry(network="NetB", offer="Offer3", daily_cap=0.0),
    ]


def test_cap_lookup_uses_normalized_key() -> None:
    caps = cap_mapping([CapEntry(network="ACA", offer="ACA", daily_cap=CAP_UNCAPPED)])

    assert cap_key("Suited", "ACA") == "ACA-ACA"
    assert cap_lookup(caps, "Suited", "ACA") == CAP_UNCAPPED
    assert cap_lookup(caps, "NetA", "Offer1") is None


def test_cap_status_labels() -> None:
    assert cap_status(None) == "unknown"
    assert cap_status(CAP_PAUSED) == "paused"
    assert cap_status(CAP_UNCAPPED) == "uncapped"
    assert cap_status(750.0) == "capped"


def test_replace_caps_persists_entries(session_factory) -> None:
    entries = [
        CapEntry(network="NetA", offer="Offer1", daily_cap=2500.0),
        CapEntry(network="NetB", offer="Offer2", daily_cap=0.0),
    ]

    with session_factory() as db:
        replace_caps(db, [CapEntry(network="Old", offer="Gone", daily_cap=1.0)])
        assert replace_caps(db, entries) == 2
        assert load_caps(db) == entries
