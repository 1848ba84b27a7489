from datetime import date, timedelta

from fastapi.testclient import TestClient

from mediabuy.services.batch_store import batch_store

ANCHOR = date(2024, 3, 15)
HEADER = "Date,Media Buyer,Offer,Network,Ad Account,Ad Revenue,Ad Spend,Profit"


def sheet_csv() -> bytes:
    lines = [HEADER]
    for offset in range(6, 0, -1):
        day = (ANCHOR - timedelta(days=offset)).strftime("%m/%d/%Y")
        lines.append(f"{day},Alice,Offer1,NetA,Acc1,3850,3000,850")
        lines.append(f"{day},Bob,ACA,Suited,Acc2,100,150,-50")
    anchor = ANCHOR.strftime("%m/%d/%Y")
    lines.append(f"{anchor},Alice,Offer1,NetA,Acc1,4700,3500,1200")
    lines.append(f"{anchor},Bob,ACA,Suited,Acc2,500,700,-200")
    lines.append("garbage,Bob,ACA,Suited,Acc2,1,1,0")
    return ("\n".join(lines) + "\n").encode("utf-8")


def upload_sheet(client: TestClient) -> dict:
    response = client.post(
        "/api/records/upload",
        files={"file": ("raw-data.csv", sheet_csv(), "text/csv")},
    )
    assert response.status_code == 201
    return response.json()


def test_upload_reports_accepted_and_dropped_rows(client: TestClient) -> None:
    payload = upload_sheet(client)

    assert payload["filename"] == "raw-data.csv"
    assert payload["total_rows"] == 15
    assert payload["accepted_rows"] == 14
    assert payload["dropped"] == {"invalid_date": 1}
    assert payload["anchor_date"] == "2024-03-15"
    assert payload["generation"] == 1


def test_upload_rejects_unsupported_extension(client: TestClient) -> None:
    response = client.post(
        "/api/records/upload",
        files={"file": ("notes.txt", b"hello", "text/plain")},
    )

    assert response.status_code == 400


def test_upload_without_valid_rows_keeps_previous_batch(client: TestClient) -> None:
    upload_sheet(client)

    response = client.post(
        "/api/records/upload",
        files={"file": ("empty.csv", f"{HEADER}\nbad,,,,,,,\n".encode(), "text/csv")},
    )

    assert response.status_code == 400
    assert len(batch_store.current) == 14


def test_refresh_reloads_from_database(client: TestClient) -> None:
    upload_sheet(client)
    batch_store.reset()

    response = client.post("/api/records/refresh")

    assert response.status_code == 200
    payload = response.json()
    assert payload["records"] == 14
    assert payload["anchor_date"] == "2024-03-15"


def test_summary_and_breakdown(client: TestClient) -> None:
    upload_sheet(client)

    summary = client.get("/api/metrics/summary", params={"window": "7d"})
    assert summary.status_code == 200
    data = summary.json()
    assert data["current_period"] == {"from": "2024-03-09", "to": "2024-03-15", "days": 7}
    assert data["current"]["profit"] == 6300.0 - 500.0
    assert data["trends"]["profit"]["label"] == "Positive Signs"

    breakdown = client.get(
        "/api/metrics/breakdown",
        params={"window": "yesterday", "dimension": "network_offer"},
    )
    assert breakdown.status_code == 200
    items = breakdown.json()["items"]
    assert [item["key"] for item in items] == ["NetA - Offer1", "ACA - ACA"]

    bad_dimension = client.get("/api/metrics/breakdown", params={"dimension": "campaign"})
    assert bad_dimension.status_code == 400


def test_window_parameters_are_validated(client: TestClient) -> None:
    upload_sheet(client)

    assert client.get("/api/metrics/summary", params={"window": "fortnight"}).status_code == 400
    assert client.get("/api/metrics/summary", params={"window": "custom"}).status_code == 400

    custom = client.get(
        "/api/metrics/daily",
        params={"window": "custom", "start": "2024-03-13", "buyer": "Alice"},
    )
    assert custom.status_code == 200
    assert [point["profit"] for point in custom.json()["series"]] == [850.0, 850.0, 1200.0]


def test_window_resolution_endpoint(client: TestClient) -> None:
    upload_sheet(client)

    response = client.get("/api/windows/lastMonth")

    assert response.status_code == 200
    assert response.json()["current_period"] == {
        "from": "2024-02-01",
        "to": "2024-02-29",
        "days": 29,
    }


def test_highlights_by_view(client: TestClient) -> None:
    upload_sheet(client)

    response = client.get("/api/highlights", params={"view": "buyer"})

    assert response.status_code == 200
    payload = response.json()
    assert [item["category"] for item in payload["items"]] == [
        "performing",
        "declining-critical",
    ]
    assert payload["items"][0]["subject"] == "Alice - NetA - Offer1"
    assert payload["items"][1]["subject"] == "Bob - ACA - ACA"
    assert payload["counts"]["performing"] == 1

    filtered = client.get("/api/highlights", params={"view": "buyer", "buyer": "Bob"})
    assert [item["category"] for item in filtered.json()["items"]] == ["declining-critical"]

    assert client.get("/api/highlights", params={"view": "campaign"}).status_code == 400


def test_empty_batch_answers_with_null_anchor(client: TestClient) -> None:
    summary = client.get("/api/metrics/summary")
    highlights = client.get("/api/highlights")
    overview = client.get("/api/overview")

    assert summary.status_code == 200
    assert summary.json()["anchor_date"] is None
    assert highlights.json()["items"] == []
    assert overview.json() == {"anchor_date": None, "items": []}


def test_records_listing_and_export(client: TestClient) -> None:
    upload_sheet(client)

    listing = client.get("/api/records", params={"window": "yesterday", "network": "ACA"})
    assert listing.status_code == 200
    assert listing.json()["total"] == 1
    assert listing.json()["items"][0]["network"] == "ACA"

    export = client.get("/api/records/export", params={"window": "yesterday"})
    assert export.status_code == 200
    assert export.headers["content-type"].startswith("text/csv")
    assert "media-buying-2024-03-15-to-2024-03-15.csv" in export.headers["content-disposition"]
    lines = export.text.strip().split("\n")
    assert lines[0] == "Date,Media Buyer,Ad Account,Offer,Network,Spend,Revenue,Profit"
    assert lines[1] == "03/15/2024,Alice,Acc1,Offer1,NetA,3500.00,4700.00,1200.00"


def test_caps_and_overview(client: TestClient) -> None:
    upload_sheet(client)
    caps_csv = b"Network,Offer,Terms,Daily Cap\nNetA,Offer1,Net 30,2500\nSuited,ACA,Weekly,100000\n"

    caps = client.post(
        "/api/caps/upload",
        files={"file": ("caps.csv", caps_csv, "text/csv")},
    )
    assert caps.status_code == 201
    assert [item["status"] for item in caps.json()["items"]] == ["capped", "uncapped"]
    assert client.get("/api/caps").json() == caps.json()

    overview = client.get("/api/overview")
    assert overview.status_code == 200
    rows = overview.json()["items"]
    assert [(row["buyer"], row["cap_status"]) for row in rows] == [
        ("Alice", "capped"),
        ("Bob", "uncapped"),
    ]
    assert rows[0]["daily_cap"] == 2500.0
    assert rows[0]["avg_daily_profit"] == 900.0


def test_trend_comparison_endpoint(client: TestClient) -> None:
    response = client.get("/api/trends", params={"current": 1600, "previous": 1000})

    assert response.status_code == 200
    payload = response.json()
    assert payload["delta"] == 600.0
    assert payload["coarse"]["label"] == "Improving"
    assert payload["tiered"]["label"] == "Growing"
    assert payload["percentage"]["label"] == "60.0%"


def test_upload_drops_non_finite_amounts(client: TestClient) -> None:
    content = (
        f"{HEADER}\n"
        "03/15/2024,Alice,Offer1,NetA,Acc1,NaN,100,0\n"
        "03/15/2024,Bob,Offer1,NetA,Acc2,200,100,100\n"
    ).encode()

    response = client.post(
        "/api/records/upload",
        files={"file": ("raw-data.csv", content, "text/csv")},
    )

    assert response.status_code == 201
    payload = response.json()
    assert payload["accepted_rows"] == 1
    assert payload["dropped"] == {"invalid_amount": 1}
    assert client.get("/api/records", params={"window": "yesterday"}).json()["total"] == 1
