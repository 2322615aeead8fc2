"""
tests/test_api_routes.py

HTTP surface exercised through FastAPI's TestClient.

Repositories and the DB session are swapped for in-memory fakes through
``dependency_overrides``; the lifespan checks never run because the client
is not used as a context manager.
"""

from __future__ import annotations

from datetime import date

import pytest
from fastapi.testclient import TestClient

from app.api.dependencies import get_snapshot_repository, get_spreadsheet_fetcher, get_streamer_repository
from app.connectors.spreadsheet_export import build_export_url
from app.main import app
from app.services.batch_import_service import BatchImportService, get_batch_import_service
from conftest import FakeSession, FakeSnapshotRepository, FakeStreamerRepository, SnapshotStub
from db.session import get_db


class _StaticFetcher:
    def __init__(self, text: str) -> None:
        self.text = text
        self.urls: list[str] = []

    def fetch_text(self, url: str) -> str:
        self.urls.append(build_export_url(url))
        return self.text


@pytest.fixture()
def client(
    streamer_repository: FakeStreamerRepository,
    snapshot_repository: FakeSnapshotRepository,
    fake_session: FakeSession,
):
    service = BatchImportService(
        valid_day_minutes=120,
        max_input_lines=100,
        message_locale="en",
        log_rejections=False,
    )
    app.dependency_overrides[get_db] = lambda: fake_session
    app.dependency_overrides[get_streamer_repository] = lambda: streamer_repository
    app.dependency_overrides[get_snapshot_repository] = lambda: snapshot_repository
    app.dependency_overrides[get_batch_import_service] = lambda: service
    app.dependency_overrides[get_spreadsheet_fetcher] = lambda: _StaticFetcher("Ana,12345\nJub,99999")
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


# ---------------------------------------------------------------------------
# Streamers
# ---------------------------------------------------------------------------


class TestStreamerRoutes:
    def test_list_sorted_by_crystals(self, client: TestClient) -> None:
        body = client.get("/streamers").json()
        assert body["count"] == 2
        assert [s["name"] for s in body["streamers"]] == ["Rô Ramos", "Jub"]
        assert body["streamers"][0]["host_usd"] == pytest.approx(5.0)

    def test_search(self, client: TestClient) -> None:
        body = client.get("/streamers", params={"q": "jub"}).json()
        assert [s["streamer_id"] for s in body["streamers"]] == ["10597690"]

    def test_unknown_sort_field(self, client: TestClient) -> None:
        assert client.get("/streamers", params={"sort": "color"}).status_code == 400

    def test_create_and_conflict(self, client: TestClient, fake_session: FakeSession) -> None:
        created = client.post("/streamers", json={"streamer_id": "12345", "name": "Ana"})
        assert created.status_code == 201
        assert created.json()["luck_gifts"] == 0
        assert fake_session.commits == 1

        conflict = client.post("/streamers", json={"streamer_id": "12345", "name": "Other"})
        assert conflict.status_code == 409
        assert fake_session.rollbacks == 1

    def test_negative_counter_is_rejected(self, client: TestClient) -> None:
        response = client.post("/streamers", json={"streamer_id": "12345", "name": "Ana", "minutes": -1})
        assert response.status_code == 422

    def test_get_update_delete(self, client: TestClient, streamer_repository: FakeStreamerRepository) -> None:
        streamer_uuid = str(streamer_repository.streamers[0].id)
        assert client.get(f"/streamers/{streamer_uuid}").json()["name"] == "Jub"

        updated = client.put(
            f"/streamers/{streamer_uuid}",
            json={"streamer_id": "10597690", "name": "Jubscreuza", "host_crystals": 10},
        )
        assert updated.status_code == 200
        assert updated.json()["name"] == "Jubscreuza"

        assert client.delete(f"/streamers/{streamer_uuid}").status_code == 204
        assert client.get(f"/streamers/{streamer_uuid}").status_code == 404


# ---------------------------------------------------------------------------
# Batch import
# ---------------------------------------------------------------------------


class TestBatchImportRoutes:
    def test_registration_preview_and_commit(
        self, client: TestClient, streamer_repository: FakeStreamerRepository
    ) -> None:
        preview = client.post(
            "/streamers/import/preview",
            json={"text": "Jubscreuza,10597690\nAna,12345\nBia,67890"},
        ).json()
        assert preview["summary"] == {"valid": 2, "invalid": 1, "total": 3}
        assert preview["entries"][0]["error_kind"] == "duplicate_in_existing"
        assert preview["entries"][1]["action"] == "create"

        result = client.post("/streamers/import", json={"entries": preview["entries"]}).json()
        assert result == {"success": 2, "failed": 0, "errors": []}
        assert len(streamer_repository.streamers) == 4

    def test_file_preview(self, client: TestClient) -> None:
        response = client.post(
            "/streamers/import/preview/file",
            files={"file": ("lista.txt", "Nome,ID\nAna,12345".encode("utf-8"), "text/plain")},
        )
        assert response.status_code == 200
        assert response.json()["summary"]["valid"] == 1

    def test_unsupported_file(self, client: TestClient) -> None:
        response = client.post(
            "/streamers/import/preview/file",
            files={"file": ("lista.pdf", b"%PDF", "application/pdf")},
        )
        assert response.status_code == 400

    def test_gift_update_preview_and_commit(
        self, client: TestClient, streamer_repository: FakeStreamerRepository
    ) -> None:
        preview = client.post(
            "/streamers/gift-updates/preview",
            json={
                "text": "10597690 10 1 150\n10597690 20 2 90\n10597690 30 3 200",
                "sub_mode": "duplicate",
            },
        ).json()
        [entry] = preview["entries"]
        assert (entry["minutes"], entry["days_count"], entry["valid_days_count"]) == (440, 3, 2)

        result = client.post(
            "/streamers/gift-updates",
            json={"sub_mode": "duplicate", "entries": preview["entries"]},
        ).json()
        assert result["success"] == 1
        assert streamer_repository.get_by_streamer_id("10597690").effective_days == 2

    def test_unique_commit_ignores_day_counts(
        self, client: TestClient, streamer_repository: FakeStreamerRepository
    ) -> None:
        entry = {
            "streamer_id": "10597690",
            "luck_gifts": 1,
            "exclusive_gifts": 1,
            "minutes": 1,
            "is_valid": True,
            "valid_days_count": 9,
        }
        client.post("/streamers/gift-updates", json={"sub_mode": "unique", "entries": [entry]})
        assert streamer_repository.get_by_streamer_id("10597690").effective_days == 3

    def test_commit_rechecks_entries_flagged_valid(
        self, client: TestClient, streamer_repository: FakeStreamerRepository
    ) -> None:
        forged = {"name": "", "streamer_id": "abc", "is_valid": True}
        result = client.post("/streamers/import", json={"entries": [forged]}).json()
        assert (result["success"], result["failed"]) == (0, 1)
        assert [s.streamer_id for s in streamer_repository.streamers] == ["10597690", "10844565"]

    def test_negative_gift_counters_are_rejected(
        self, client: TestClient, streamer_repository: FakeStreamerRepository
    ) -> None:
        entry = {
            "streamer_id": "10597690",
            "luck_gifts": -100,
            "exclusive_gifts": 0,
            "minutes": 0,
            "is_valid": True,
        }
        response = client.post("/streamers/gift-updates", json={"sub_mode": "unique", "entries": [entry]})
        assert response.status_code == 422
        assert streamer_repository.get_by_streamer_id("10597690").minutes == 1500

    def test_spreadsheet_preview(self, client: TestClient) -> None:
        response = client.post(
            "/streamers/import/spreadsheet",
            json={"url": "https://docs.google.com/spreadsheets/d/abc/edit"},
        )
        assert response.status_code == 200
        assert response.json()["summary"] == {"valid": 1, "invalid": 1, "total": 2}

    def test_spreadsheet_link_outside_allowlist(self, client: TestClient) -> None:
        response = client.post(
            "/streamers/import/spreadsheet",
            json={"url": "http://169.254.169.254/latest/meta-data/"},
        )
        assert response.status_code == 400

    def test_spreadsheet_csv_quoting(self, client: TestClient) -> None:
        app.dependency_overrides[get_spreadsheet_fetcher] = lambda: _StaticFetcher(
            'ID,Sorte,Exclusivos,Minutos\n10597690,"15,000","8,000","1,500"'
        )
        response = client.post(
            "/streamers/import/spreadsheet",
            json={"url": "https://docs.google.com/spreadsheets/d/abc/edit", "mode": "update"},
        )
        [entry] = response.json()["entries"]
        assert entry["is_valid"]
        assert (entry["luck_gifts"], entry["minutes"]) == (15000, 1500)

    def test_oversize_paste(self, client: TestClient) -> None:
        text = "\n".join(f"Ana{i},{10000 + i}" for i in range(101))
        assert client.post("/streamers/import/preview", json={"text": text}).status_code == 400


# ---------------------------------------------------------------------------
# Snapshots, dashboard, export
# ---------------------------------------------------------------------------


class TestSnapshotRoutes:
    def test_create_list_conflict_delete(self, client: TestClient) -> None:
        created = client.post("/snapshots", json={"period_type": "monthly", "period_label": "Março 2025"})
        assert created.status_code == 201
        assert created.json()["streamer_count"] == 2
        assert created.json()["total_crystals"] == 65000

        again = client.post("/snapshots", json={"period_type": "monthly", "period_label": "Março 2025"})
        assert again.status_code == 409

        listed = client.get("/snapshots", params={"period_type": "monthly"}).json()
        assert len(listed["snapshots"]) == 1

        snapshot_id = created.json()["id"]
        assert client.delete(f"/snapshots/{snapshot_id}").status_code == 204
        assert client.delete(f"/snapshots/{snapshot_id}").status_code == 404

    def test_default_label(self, client: TestClient) -> None:
        created = client.post("/snapshots", json={"period_type": "yearly"})
        assert created.status_code == 201
        assert created.json()["period_label"].isdigit()

    def test_invalid_period_type(self, client: TestClient) -> None:
        response = client.post("/snapshots", json={"period_type": "daily", "period_label": "x"})
        assert response.status_code == 400


class TestDashboardRoutes:
    def test_realtime(self, client: TestClient) -> None:
        body = client.get("/dashboard").json()
        assert body["view"] == "realtime"
        assert body["total_crystals"] == 65000
        assert body["streamer_count"] == 2

    def test_month_defaults_to_latest(
        self, client: TestClient, snapshot_repository: FakeSnapshotRepository
    ) -> None:
        snapshot_repository.snapshots.append(
            SnapshotStub(
                period_type="weekly",
                period_label="Semana 1 – Março 2025",
                snapshot_date=date(2025, 3, 7),
                data=[{"streamer_id": "11111", "name": "Ana", "host_crystals": 100}],
                total_host_usd=0.01,
            )
        )
        body = client.get("/dashboard", params={"view": "month"}).json()
        assert body["period"] == "2025-03"
        assert body["total_crystals"] == 100
        assert body["available_months"] == [{"value": "2025-03", "label": "Março 2025"}]

    def test_growth(self, client: TestClient) -> None:
        body = client.get("/dashboard/growth", params={"year": "2025"}).json()
        assert body["year"] == "2025"
        assert len(body["points"]) == 12


class TestExportRoutes:
    def test_compact_text(self, client: TestClient) -> None:
        response = client.get("/export", params={"include_ranking": "false", "include_id": "false"})
        assert response.status_code == 200
        assert response.text.splitlines()[0].startswith("Rô Ramos 0 0 50.000 $5.00")

    def test_csv_download(self, client: TestClient) -> None:
        response = client.get("/export", params={"format": "csv", "sort": "name", "direction": "asc"})
        assert response.headers["content-type"].startswith("text/csv")
        assert "attachment; filename=\"streamers_" in response.headers["content-disposition"]
        assert response.text.splitlines()[1].startswith("1,Jub,10597690")

    def test_json_preview(self, client: TestClient) -> None:
        body = client.get("/export", params={"format": "json", "style": "block"}).json()
        assert body["headers"][0] == "Ranking"
        assert len(body["rows"]) == 2

    def test_unknown_snapshot(self, client: TestClient) -> None:
        response = client.get("/export", params={"snapshot_id": "00000000-0000-0000-0000-000000000000"})
        assert response.status_code == 404
