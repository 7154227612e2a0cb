"""회계 API 통합 테스트 (httpx ASGITransport)"""

from pathlib import Path

import httpx
import pytest
import pytest_asyncio

from core.config.loader import get_settings
from web.app import create_app

RENT = {
    "entryDate": "2024-01-01",
    "description": "Rent",
    "lines": [
        {"accountCode": "1010", "debit": 0, "credit": 1500},
        {"accountCode": "6100", "debit": 1500, "credit": 0},
    ],
}


@pytest_asyncio.fixture
async def client(temp_settings_file: Path) -> httpx.AsyncClient:
    """부트스트랩된 앱에 연결된 클라이언트"""
    app = create_app(get_settings(temp_settings_file), configure_logging=False)

    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            yield client


class TestHealth:
    @pytest.mark.asyncio
    async def test_health(self, client: httpx.AsyncClient) -> None:
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert response.json()["accounting"] is True

    @pytest.mark.asyncio
    async def test_module_status(self, client: httpx.AsyncClient) -> None:
        response = await client.get("/api/accounting/status")

        assert response.json() == {"module": "accounting", "status": "ok"}


class TestChartOfAccounts:
    @pytest.mark.asyncio
    async def test_list(self, client: httpx.AsyncClient) -> None:
        response = await client.get("/api/accounting/chart-of-accounts")

        assert response.status_code == 200
        assert len(response.json()["data"]) == 55

    @pytest.mark.asyncio
    async def test_filter_by_category(self, client: httpx.AsyncClient) -> None:
        response = await client.get(
            "/api/accounting/chart-of-accounts", params={"category": "revenue"}
        )

        assert {a["category"] for a in response.json()["data"]} == {"revenue"}

    @pytest.mark.asyncio
    async def test_invalid_category(self, client: httpx.AsyncClient) -> None:
        response = await client.get(
            "/api/accounting/chart-of-accounts", params={"category": "gadgets"}
        )

        assert response.status_code == 422
        assert response.json()["error"]["kind"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_add_deactivate_delete(self, client: httpx.AsyncClient) -> None:
        created = await client.post(
            "/api/accounting/chart-of-accounts",
            json={"code": "6160", "name": "Parking", "category": "expenses"},
        )
        assert created.status_code == 201
        account_id = created.json()["data"]["id"]

        deactivated = await client.post(
            f"/api/accounting/chart-of-accounts/{account_id}/deactivate"
        )
        assert deactivated.json()["data"]["is_active"] is False

        deleted = await client.delete(f"/api/accounting/chart-of-accounts/{account_id}")
        assert deleted.status_code == 204

        missing = await client.delete(f"/api/accounting/chart-of-accounts/{account_id}")
        assert missing.status_code == 404
        assert missing.json()["error"]["kind"] == "NOT_FOUND"

    @pytest.mark.asyncio
    async def test_delete_referenced_account_conflict(self, client: httpx.AsyncClient) -> None:
        await client.post("/api/accounting/journal-entries", json=RENT)
        accounts = (await client.get("/api/accounting/chart-of-accounts")).json()["data"]
        cash = next(a for a in accounts if a["code"] == "1010")

        response = await client.delete(f"/api/accounting/chart-of-accounts/{cash['id']}")

        assert response.status_code == 409
        assert response.json()["error"]["kind"] == "REFERENTIAL_INTEGRITY"


class TestJournalEntries:
    @pytest.mark.asyncio
    async def test_create_and_read(self, client: httpx.AsyncClient) -> None:
        created = await client.post("/api/accounting/journal-entries", json=RENT)

        assert created.status_code == 201
        entry = created.json()["data"]
        assert entry["entry_date"] == "2024-01-01"
        assert [line["account_code"] for line in entry["lines"]] == ["1010", "6100"]
        assert entry["lines"][1]["debit"] == "1500.00"

        listed = await client.get("/api/accounting/journal-entries", params={"limit": 10})
        assert [e["id"] for e in listed.json()["data"]] == [entry["id"]]

        detail = await client.get(f"/api/accounting/journal-entries/{entry['id']}")
        assert detail.json()["data"] == entry

        lines = await client.get(f"/api/accounting/journal-entries/{entry['id']}/lines")
        assert lines.json()["data"] == entry["lines"]

    @pytest.mark.asyncio
    async def test_snake_case_payload(self, client: httpx.AsyncClient) -> None:
        payload = {
            "entry_date": "2024-02-01",
            "description": "Office supplies",
            "lines": [
                {"account_code": "6200", "debit": "42.50"},
                {"account_code": "1010", "credit": "42.50"},
            ],
        }

        response = await client.post("/api/accounting/journal-entries", json=payload)

        assert response.status_code == 201

    @pytest.mark.asyncio
    async def test_unbalanced_entry(self, client: httpx.AsyncClient) -> None:
        payload = {
            "entryDate": "2024-01-01",
            "description": "Unbalanced",
            "lines": [
                {"accountCode": "6100", "debit": 1000},
                {"accountCode": "1010", "credit": 900},
            ],
        }

        response = await client.post("/api/accounting/journal-entries", json=payload)

        assert response.status_code == 422
        error = response.json()["error"]
        assert error["kind"] == "VALIDATION_ERROR"
        assert error["issues"] == [
            "journal entry must be balanced "
            "(debits: 1000.00, credits: 900.00, difference: 100.00)"
        ]

        listed = await client.get("/api/accounting/journal-entries")
        assert listed.json()["data"] == []

    @pytest.mark.asyncio
    async def test_lists_every_issue(self, client: httpx.AsyncClient) -> None:
        response = await client.post("/api/accounting/journal-entries", json={})

        assert response.status_code == 422
        assert response.json()["error"]["issues"] == [
            "entry_date is required",
            "description is required",
            "lines array is required and must not be empty",
        ]

    @pytest.mark.asyncio
    async def test_malformed_body_uses_error_envelope(self, client: httpx.AsyncClient) -> None:
        """FastAPI 요청 검증 에러도 동일한 에러 형식"""
        response = await client.post(
            "/api/accounting/journal-entries", json={"lines": "not-a-list"}
        )

        assert response.status_code == 422
        assert response.json()["error"]["kind"] == "VALIDATION_ERROR"
        assert response.json()["error"]["issues"]

    @pytest.mark.asyncio
    async def test_unknown_account(self, client: httpx.AsyncClient) -> None:
        payload = {
            "entryDate": "2024-01-01",
            "description": "Ghost",
            "lines": [
                {"accountCode": "0000", "debit": 10},
                {"accountCode": "1010", "credit": 10},
            ],
        }

        response = await client.post("/api/accounting/journal-entries", json=payload)

        assert response.status_code == 404
        assert response.json()["error"]["kind"] == "NOT_FOUND"

    @pytest.mark.asyncio
    async def test_unknown_entry(self, client: httpx.AsyncClient) -> None:
        response = await client.get("/api/accounting/journal-entries/999/lines")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_limit_bounds(self, client: httpx.AsyncClient) -> None:
        response = await client.get("/api/accounting/journal-entries", params={"limit": 0})

        assert response.status_code == 422
        assert response.json()["error"]["kind"] == "VALIDATION_ERROR"


    @pytest.mark.asyncio
    async def test_malformed_line_does_not_hide_other_issues(self, client: httpx.AsyncClient) -> None:
        """객체가 아닌 항목이 있어도 위반 조건 전체를 보고"""
        response = await client.post(
            "/api/accounting/journal-entries",
            json={"lines": [5, {"accountCode": "1010", "debit": 1000, "credit": 0}]},
        )

        assert response.status_code == 422
        assert response.json()["error"]["issues"] == [
            "entry_date is required",
            "description is required",
            "lines[0] must be an object",
            "journal entry must be balanced "
            "(debits: 1000.00, credits: 0.00, difference: 1000.00)",
        ]

    @pytest.mark.asyncio
    async def test_wrongly_typed_fields_reach_entry_validation(self, client: httpx.AsyncClient) -> None:
        payload = {
            "entryDate": ["2024-01-01"],
            "description": "Typed wrong",
            "lines": [
                {"accountCode": "6100", "debit": "abc"},
                {"accountCode": "1010", "credit": True},
            ],
        }

        response = await client.post("/api/accounting/journal-entries", json=payload)

        issues = response.json()["error"]["issues"]
        assert "entry_date must be an ISO date (YYYY-MM-DD)" in issues
        assert "lines[0].debit must be a number" in issues
        assert "lines[1].credit must be a number" in issues

    @pytest.mark.asyncio
    async def test_account_request_validation_uses_error_envelope(self, client: httpx.AsyncClient) -> None:
        response = await client.post("/api/accounting/chart-of-accounts", json={"code": "6160"})

        assert response.status_code == 422
        error = response.json()["error"]
        assert error["kind"] == "VALIDATION_ERROR"
        assert len(error["issues"]) == 2

class TestBalancesAndOverview:
    @pytest.mark.asyncio
    async def test_balances(self, client: httpx.AsyncClient) -> None:
        await client.post("/api/accounting/journal-entries", json=RENT)

        response = await client.get("/api/accounting/balances")

        data = response.json()["data"]
        assert list(data) == ["assets", "liabilities", "equity", "revenue", "expenses"]
        rent = next(row for row in data["expenses"] if row["code"] == "6100")
        assert rent["balance"] == "1500.00"

    @pytest.mark.asyncio
    async def test_overview(self, client: httpx.AsyncClient) -> None:
        await client.post("/api/accounting/journal-entries", json=RENT)

        response = await client.get("/api/accounting/overview")

        assert response.json()["data"] == {
            "total_assets": "-1500.00",
            "total_liabilities": "0.00",
            "total_equity": "0.00",
            "total_revenue": "0.00",
            "total_expenses": "1500.00",
            "net_income": "-1500.00",
        }


class TestModuleDisabled:
    @pytest.mark.asyncio
    async def test_router_not_mounted(self, temp_dir: Path) -> None:
        """modules.accounting: false → /api/accounting 미등록"""
        settings_path = temp_dir / "disabled.yaml"
        settings_path.write_text(
            f'database:\n  path: "{(temp_dir / "off.db").as_posix()}"\nmodules:\n  accounting: false\n',
            encoding="utf-8",
        )
        app = create_app(get_settings(settings_path), configure_logging=False)

        async with app.router.lifespan_context(app):
            transport = httpx.ASGITransport(app=app)
            async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
                assert (await client.get("/api/accounting/status")).status_code == 404
                health = await client.get("/health")
                assert health.json()["accounting"] is False


class TestIdentifierRange:
    """SQLite INTEGER 범위 밖 ID도 에러 형식으로 응답"""

    @pytest.mark.asyncio
    async def test_oversized_account_id_in_line(self, client: httpx.AsyncClient) -> None:
        payload = {
            "entryDate": "2024-01-01",
            "description": "Oversized id",
            "lines": [
                {"accountId": 99999999999999999999, "debit": 10},
                {"accountCode": "1010", "credit": 10},
            ],
        }

        response = await client.post("/api/accounting/journal-entries", json=payload)

        assert response.status_code == 422
        assert response.json()["error"]["issues"] == [
            "lines[0].account_id must be a positive integer"
        ]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method, path",
        [
            ("GET", "/api/accounting/journal-entries/{id}"),
            ("GET", "/api/accounting/journal-entries/{id}/lines"),
            ("POST", "/api/accounting/chart-of-accounts/{id}/deactivate"),
            ("DELETE", "/api/accounting/chart-of-accounts/{id}"),
        ],
    )
    async def test_oversized_path_id(self, client: httpx.AsyncClient, method: str, path: str) -> None:
        response = await client.request(method, path.format(id=2**63))

        assert response.status_code == 422
        assert response.json()["error"]["kind"] == "VALIDATION_ERROR"


class TestOpenApi:
    @pytest.mark.asyncio
    async def test_error_envelope_documented(self, client: httpx.AsyncClient) -> None:
        schema = (await client.get("/openapi.json")).json()

        assert "ErrorResponse" in schema["components"]["schemas"]
        responses = schema["paths"]["/api/accounting/journal-entries"]["post"]["responses"]
        assert responses["422"]["content"]["application/json"]["schema"] == {
            "$ref": "#/components/schemas/ErrorResponse"
        }
