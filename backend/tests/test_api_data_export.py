"""Tests for CSV/XLSX export and CSV import."""

import csv
import io

from openpyxl import load_workbook


def _create(client, **fields):
    response = client.post("/api/v1/subscriptions/", json=fields)
    assert response.status_code == 201, response.text
    return response.json()


class TestExport:
    def test_csv(self, client):
        _create(client, name="Netflix", price="390", first_bill_date="2024-01-31", category="entertainment")
        response = client.get("/api/v1/data/export/subscriptions")
        assert response.status_code == 200
        rows = list(csv.DictReader(io.StringIO(response.content.decode("utf-8-sig"))))
        assert len(rows) == 1
        assert rows[0]["name"] == "Netflix"
        assert rows[0]["billing_cycle"] == "monthly"
        assert rows[0]["first_bill_date"] == "2024-01-31"
        assert rows[0]["category"] == "entertainment"

    def test_xlsx(self, client):
        _create(client, name="Notion", price="8", billing_cycle="monthly", category="software")
        response = client.get("/api/v1/data/export/subscriptions", params={"format": "xlsx"})
        assert response.status_code == 200
        ws = load_workbook(io.BytesIO(response.content)).active
        rows = list(ws.iter_rows(values_only=True))
        assert rows[0][0] == "name"
        assert rows[1][0] == "Notion"
        assert rows[1][1] == 8.0


class TestImport:
    def test_import_csv(self, client):
        content = (
            "name,price,currency,billing_cycle,first_bill_date,category,active\n"
            "Spotify,149,TWD,monthly,2024-05-02,entertainment,true\n"
            ",10,USD,monthly,2024-05-02,other,true\n"
            "Gym,20,USD,daily,2024-05-02,other,true\n"
            "Backup,60,USD,yearly,2023-09-09,software,no\n"
        )
        response = client.post(
            "/api/v1/data/import/subscriptions",
            files={"file": ("subs.csv", content.encode("utf-8"), "text/csv")},
        )
        assert response.status_code == 200
        result = response.json()
        assert result["total_rows"] == 4
        assert result["imported"] == 2
        assert result["skipped"] == 2
        assert result["errors"][0].startswith("Row 2")
        assert result["errors"][1].startswith("Row 3: billing_cycle")

        subs = {s["name"]: s for s in client.get("/api/v1/subscriptions/").json()}
        assert set(subs) == {"Spotify", "Backup"}
        assert subs["Backup"]["active"] is False
        assert subs["Backup"]["billing_cycle"] == "yearly"

    def test_non_utf8_file_rejected(self, client):
        response = client.post(
            "/api/v1/data/import/subscriptions",
            files={"file": ("subs.csv", "name\nCafé\n".encode("latin-1"), "text/csv")},
        )
        assert response.status_code == 422
        assert "UTF-8" in response.json()["detail"]
        assert client.get("/api/v1/subscriptions/").json() == []
