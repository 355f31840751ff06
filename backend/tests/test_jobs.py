"""
backend/tests/test_jobs.py

API tests for /api/jobs: CRUD, filters, validation, soft delete and the
derived cost figures.
"""

from decimal import Decimal

from backend.models import Job


def job_payload(customer_id, **overrides):
    payload = {
        "customer_id": customer_id,
        "equipment_type": "Chainsaw",
        "equipment_model": "Stihl MS 250",
        "description": "Chain replacement",
        "date_received": "2025-02-01",
    }
    payload.update(overrides)
    return payload


class TestJobCrud:

    def test_create_defaults_to_quote(self, auth_client, customer):
        r = auth_client.post("/api/jobs/", json=job_payload(customer.id))

        assert r.status_code == 201, r.text
        body = r.json()
        assert body["status"] == "Quote"
        assert body["customer_name"] == "Test Customer"
        assert Decimal(body["total_cost"]) == 0
        assert body["profit_margin"] is None

    def test_status_is_normalized(self, auth_client, customer):
        r = auth_client.post("/api/jobs/", json=job_payload(customer.id, status="inprogress"))
        assert r.json()["status"] == "InProgress"

    def test_unknown_customer_is_400(self, auth_client):
        r = auth_client.post("/api/jobs/", json=job_payload(9999))
        assert r.status_code == 400
        assert r.json()["detail"] == "Customer with ID 9999 not found"

    def test_get_update_delete(self, auth_client, test_db, job):
        r = auth_client.get(f"/api/jobs/{job.id}")
        assert r.status_code == 200
        assert r.json()["equipment_model"] == "Honda HRX217"

        r = auth_client.put(
            f"/api/jobs/{job.id}",
            json=job_payload(
                job.customer_id,
                status="Completed",
                date_received="2025-01-10",
                date_completed="2025-01-12",
                estimate_amount="80.00",
                actual_amount="95.50",
            ),
        )
        assert r.status_code == 200, r.text
        assert r.json()["status"] == "Completed"
        assert Decimal(r.json()["actual_amount"]) == Decimal("95.50")

        assert auth_client.delete(f"/api/jobs/{job.id}").status_code == 204
        assert auth_client.get(f"/api/jobs/{job.id}").status_code == 404

        test_db.expire_all()
        assert test_db.query(Job).filter(Job.id == job.id).one().is_deleted is True

    def test_unknown_job_is_404(self, auth_client, customer):
        assert auth_client.get("/api/jobs/9999").status_code == 404
        assert auth_client.put("/api/jobs/9999", json=job_payload(customer.id)).status_code == 404
        assert auth_client.delete("/api/jobs/9999").status_code == 404


class TestJobQueries:

    def test_list_newest_first_and_filters(self, auth_client, customer, job):
        auth_client.post("/api/jobs/", json=job_payload(customer.id, status="Paid"))

        jobs = auth_client.get("/api/jobs/").json()
        assert [j["equipment_type"] for j in jobs] == ["Chainsaw", "Lawn Mower"]

        paid = auth_client.get("/api/jobs/?status=paid").json()
        assert [j["equipment_type"] for j in paid] == ["Chainsaw"]

        found = auth_client.get("/api/jobs/?search=honda").json()
        assert [j["id"] for j in found] == [job.id]

        by_customer_name = auth_client.get("/api/jobs/?search=test cust").json()
        assert len(by_customer_name) == 2

    def test_jobs_for_customer(self, auth_client, customer, job):
        r = auth_client.get(f"/api/jobs/customer/{customer.id}")
        assert [j["id"] for j in r.json()] == [job.id]
        assert auth_client.get("/api/jobs/customer/9999").json() == []


class TestJobValidation:

    def test_completed_before_received(self, auth_client, customer):
        r = auth_client.post(
            "/api/jobs/",
            json=job_payload(customer.id, date_received="2025-02-10", date_completed="2025-02-01"),
        )
        assert r.status_code == 422

    def test_bad_status(self, auth_client, customer):
        r = auth_client.post("/api/jobs/", json=job_payload(customer.id, status="Lost"))
        assert r.status_code == 422

    def test_negative_estimate(self, auth_client, customer):
        r = auth_client.post("/api/jobs/", json=job_payload(customer.id, estimate_amount="-1"))
        assert r.status_code == 422

    def test_missing_equipment(self, auth_client, customer):
        r = auth_client.post("/api/jobs/", json=job_payload(customer.id, equipment_type=""))
        assert r.status_code == 422


class TestDerivedFigures:

    def test_total_cost_and_profit_margin(self, auth_client, job):
        for amount in ("15.99", "45.00"):
            r = auth_client.post(
                f"/api/jobs/{job.id}/expenses/",
                json={"type": "Parts", "description": "Item", "amount": amount, "date": "2025-01-11"},
            )
            assert r.status_code == 201, r.text

        body = auth_client.get(f"/api/jobs/{job.id}").json()
        assert Decimal(body["total_cost"]) == Decimal("60.99")
        assert body["profit_margin"] is None

        payload = job_payload(job.customer_id, date_received="2025-01-10", actual_amount="100.00")
        body = auth_client.put(f"/api/jobs/{job.id}", json=payload).json()
        assert Decimal(body["profit_margin"]) == Decimal("39.01")

    def test_model_properties(self, test_db, job):
        assert job.total_cost == Decimal("0")
        assert job.profit_margin is None
        assert job.customer_name == "Test Customer"
