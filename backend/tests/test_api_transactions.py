"""Tests for transactions API endpoints."""

from capital.cache import transactions_key


class TestTransactionsAPI:
    """Test transactions endpoints."""

    def test_list_transactions_empty(self, client):
        """Should return empty paginated list."""
        response = client.get("/api/v1/transactions")
        assert response.status_code == 200
        data = response.json()
        assert data["items"] == []
        assert data["total"] == 0

    def test_list_transactions_with_data(self, client, sample_transaction):
        """Should return transactions."""
        response = client.get("/api/v1/transactions")
        assert response.status_code == 200
        data = response.json()
        assert len(data["items"]) == 1
        assert data["total"] == 1
        assert data["pages"] == 1

    def test_get_transaction(self, client, sample_transaction):
        """Should return single transaction."""
        response = client.get(f"/api/v1/transactions/{sample_transaction.id}")
        assert response.status_code == 200
        data = response.json()
        assert data["id"] == sample_transaction.id
        assert data["type"] == "Expenses"
        assert float(data["amount"]) == -100.0

    def test_get_missing_transaction(self, client):
        """Should return 404 for an unknown transaction."""
        response = client.get("/api/v1/transactions/missing")
        assert response.status_code == 404

    def test_create_transaction(self, client, sample_account):
        """Should create a transaction with a trimmed description."""
        response = client.post("/api/v1/transactions", json={
            "date": "2024-05-02",
            "amount": 2000,
            "type": "Income",
            "description": "  Paycheck ",
            "account_id": sample_account.id
        })
        assert response.status_code == 201
        data = response.json()
        assert data["description"] == "Paycheck"
        assert data["account_id"] == sample_account.id
        assert data["budget_category_id"] is None

    def test_create_rejects_zero_amount(self, client):
        """Should reject a zero amount."""
        response = client.post("/api/v1/transactions", json={
            "date": "2024-05-02",
            "amount": 0,
            "type": "Income"
        })
        assert response.status_code == 422

    def test_create_rejects_future_date(self, client):
        """Should reject a date far in the future."""
        response = client.post("/api/v1/transactions", json={
            "date": "2999-01-01",
            "amount": 10,
            "type": "Income"
        })
        assert response.status_code == 422

    def test_create_rejects_date_after_today(self, client):
        """Should judge future dates against the injected today, not the system clock."""
        response = client.post("/api/v1/transactions", json={
            "date": "2024-06-16",
            "amount": 10,
            "type": "Income"
        })
        assert response.status_code == 422

        response = client.post("/api/v1/transactions", json={
            "date": "2024-06-15",
            "amount": 10,
            "type": "Income"
        })
        assert response.status_code == 201

    def test_update_rejects_future_date(self, client, sample_transaction):
        """Should refuse to move a transaction past today."""
        response = client.patch(
            f"/api/v1/transactions/{sample_transaction.id}",
            json={"date": "2025-01-10"}
        )
        assert response.status_code == 422

    def test_create_rejects_unknown_type(self, client):
        """Should reject a type other than Income or Expenses."""
        response = client.post("/api/v1/transactions", json={
            "date": "2024-05-02",
            "amount": 10,
            "type": "Transfer"
        })
        assert response.status_code == 422

    def test_create_rejects_foreign_account(self, client):
        """Should return 404 for an account the user does not own."""
        response = client.post("/api/v1/transactions", json={
            "date": "2024-05-02",
            "amount": 10,
            "type": "Income",
            "account_id": "not-mine"
        })
        assert response.status_code == 404
        assert response.json()["detail"] == "Account not found"

    def test_update_transaction(self, client, sample_transaction):
        """Should update the given fields only."""
        response = client.patch(
            f"/api/v1/transactions/{sample_transaction.id}",
            json={"amount": "-120.50", "description": "Groceries"}
        )
        assert response.status_code == 200
        data = response.json()
        assert float(data["amount"]) == -120.5
        assert data["description"] == "Groceries"
        assert data["account_id"] == sample_transaction.account_id

    def test_update_detaches_account(self, client, sample_transaction):
        """Should clear the account reference when given an empty id."""
        response = client.patch(
            f"/api/v1/transactions/{sample_transaction.id}",
            json={"account_id": ""}
        )
        assert response.status_code == 200
        assert response.json()["account_id"] is None

    def test_filter_transactions(self, client, sample_transaction):
        """Should filter by search term, type and date range."""
        assert len(client.get("/api/v1/transactions", params={"search": "Whole"}).json()["items"]) == 1
        assert len(client.get("/api/v1/transactions", params={"search": "xyz"}).json()["items"]) == 0
        assert len(client.get("/api/v1/transactions", params={"type": "Income"}).json()["items"]) == 0
        assert len(client.get("/api/v1/transactions", params={"start_date": "2024-04-01"}).json()["items"]) == 0
        assert len(client.get("/api/v1/transactions", params={
            "account_id": sample_transaction.account_id,
            "end_date": "2024-03-31"
        }).json()["items"]) == 1

    def test_search_treats_wildcards_literally(self, client, sample_transaction):
        """Should match percent and underscore as plain characters."""
        assert client.get("/api/v1/transactions", params={"search": "%"}).json()["total"] == 0
        assert client.get("/api/v1/transactions", params={"search": "_"}).json()["total"] == 0

        client.post("/api/v1/transactions", json={
            "date": "2024-05-02",
            "amount": -5,
            "type": "Expenses",
            "description": "100% juice"
        })
        data = client.get("/api/v1/transactions", params={"search": "0%"}).json()
        assert data["total"] == 1
        assert data["items"][0]["description"] == "100% juice"

    def test_delete_transaction(self, client, sample_transaction):
        """Should delete a transaction once, then return 404."""
        transaction_id = sample_transaction.id
        response = client.delete(f"/api/v1/transactions/{transaction_id}")
        assert response.status_code == 204
        assert client.get("/api/v1/transactions").json()["total"] == 0

        response = client.delete(f"/api/v1/transactions/{transaction_id}")
        assert response.status_code == 404

    def test_bulk_delete(self, client, sample_transaction):
        """Should report how many transactions were deleted."""
        response = client.post("/api/v1/transactions/bulk-delete", json={
            "transaction_ids": [sample_transaction.id, "missing"]
        })
        assert response.status_code == 200
        assert response.json() == {"deleted": 1}

    def test_writes_invalidate_cache(self, client, cache, sample_transaction):
        """Should drop the cached collection after a write."""
        client.get("/api/v1/dashboard/trends", params={"kind": "budgets"})
        assert cache.get(transactions_key("local")) is not None

        client.patch(f"/api/v1/transactions/{sample_transaction.id}", json={"description": "Edited"})
        assert cache.get(transactions_key("local")) is None
