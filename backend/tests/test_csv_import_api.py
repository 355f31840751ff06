"""
backend/tests/test_csv_import_api.py

HTTP-level tests for /api/import: upload checks, role checks and the
camelCase ImportResult body.
"""

from backend.models import Expense

HEADER = "Job ID,Type,Description,Amount,Date,Receipt Reference"


def upload(client, content: bytes, filename: str = "expenses.csv"):
    return client.post(
        "/api/import/expenses",
        files={"file": (filename, content, "text/csv")},
    )


class TestImportEndpoint:

    def test_admin_import_returns_camel_case_result(self, auth_client, test_db, job):
        content = (
            f"{HEADER}\n"
            f"{job.id},Parts,Oil filter,15.99,2025-01-15,REC-001\n"
            "999,Parts,Spark plug,4.50,2025-01-15,\n"
        ).encode("utf-8")

        r = upload(auth_client, content)

        assert r.status_code == 200, r.text
        body = r.json()
        assert body["successCount"] == 1
        assert body["errorCount"] == 1
        assert body["errors"] == [{
            "lineNumber": 3,
            "message": "Job with ID 999 not found",
            "rawData": "999,Parts,Spark plug,4.50,2025-01-15",
        }]
        assert test_db.query(Expense).count() == 1

    def test_all_rows_rejected_is_still_200(self, auth_client, job):
        r = upload(auth_client, f"{HEADER}\n{job.id},Fuel,Gas,5.00,2025-01-15,\n".encode())

        assert r.status_code == 200
        assert r.json()["successCount"] == 0
        assert r.json()["errorCount"] == 1

    def test_parse_error_is_reported_in_body(self, auth_client, job):
        r = upload(auth_client, f"{HEADER}\n{job.id},Parts,Gasket,abc,2025-01-15,\n".encode())

        assert r.status_code == 200
        body = r.json()
        assert body["successCount"] == 0
        assert body["errorCount"] == 0
        assert body["errors"][0]["lineNumber"] == 2
        assert body["errors"][0]["message"].startswith("Error parsing CSV: ")
        assert body["errors"][0]["rawData"] is None

    def test_non_admin_is_forbidden(self, user_client, job):
        r = upload(user_client, f"{HEADER}\n{job.id},Parts,A,1.00,2025-01-15,\n".encode())
        assert r.status_code == 403

    def test_anonymous_is_unauthorized(self, anon_client):
        r = upload(anon_client, f"{HEADER}\n".encode())
        assert r.status_code == 401

    def test_empty_file_rejected(self, auth_client):
        r = upload(auth_client, b"")
        assert r.status_code == 400
        assert r.json()["detail"] == "No file uploaded or file is empty."

    def test_wrong_extension_rejected(self, auth_client, job):
        r = upload(auth_client, f"{HEADER}\n".encode(), filename="expenses.xlsx")
        assert r.status_code == 400
        assert r.json()["detail"] == "Only CSV files are supported."

    def test_extension_check_ignores_case(self, auth_client, job):
        r = upload(auth_client, f"{HEADER}\n".encode(), filename="EXPENSES.CSV")
        assert r.status_code == 200

    def test_oversized_file_rejected(self, auth_client, monkeypatch):
        monkeypatch.setattr("backend.routers.csv_import.MAX_FILE_SIZE", 2 * 1024 * 1024)
        content = f"{HEADER}\n".encode() + b"x" * (2 * 1024 * 1024)

        r = upload(auth_client, content)

        assert r.status_code == 400
        assert r.json()["detail"] == "File size exceeds the maximum allowed size of 2 MB."

    def test_missing_file_field(self, auth_client):
        r = auth_client.post("/api/import/expenses")
        assert r.status_code == 422

    def test_unexpected_failure_is_500(self, auth_client, monkeypatch):
        def boom(source, db):
            raise RuntimeError("database is locked")

        monkeypatch.setattr("backend.routers.csv_import.import_expenses_from_csv", boom)

        r = upload(auth_client, f"{HEADER}\n".encode())

        assert r.status_code == 500
        assert r.json()["detail"] == "An error occurred while importing expenses."


class TestTemplateEndpoint:

    def test_admin_downloads_template(self, auth_client):
        r = auth_client.get("/api/import/expenses/template")

        assert r.status_code == 200
        assert r.headers["content-type"].startswith("text/csv")
        assert "expense_import_template.csv" in r.headers["content-disposition"]
        assert r.text.splitlines()[0] == HEADER

    def test_non_admin_cannot_download_template(self, user_client):
        assert user_client.get("/api/import/expenses/template").status_code == 403
