"""
Tests for the HTTP API.
"""


def create_people(client, *names):
    ids = []
    for name in names:
        response = client.post("/api/participants", json={"name": name})
        assert response.status_code == 201
        ids.append(response.json()["id"])
    return ids


def create_trip(client, participant_ids):
    response = client.post(
        "/api/trips",
        json={
            "name": "Jeju",
            "start_date": "2024-05-01",
            "end_date": "2024-05-03",
            "participant_ids": participant_ids
        }
    )
    assert response.status_code == 201
    return response.json()


def add_expense(client, trip_id, **body):
    payload = {"date": "2024-05-01", "item_name": "Expense", **body}
    response = client.post(f"/api/expenses/{trip_id}", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_trip_detail_lists_participants(client):
    alice, bob = create_people(client, "Alice", "Bob")
    trip = create_trip(client, [alice, bob])

    assert trip["currency"] == "KRW"
    assert trip["status"] == "Finished"

    detail = client.get(f"/api/trips/{trip['id']}").json()
    assert [p["name"] for p in detail["participants"]] == ["Alice", "Bob"]


def test_add_participant_to_trip(client):
    alice, bob = create_people(client, "Alice", "Bob")
    trip = create_trip(client, [alice])

    response = client.post(f"/api/trips/{trip['id']}/participants", json={"participant_id": bob})

    assert response.status_code == 201
    names = [p["name"] for p in client.get(f"/api/trips/{trip['id']}/participants").json()]
    assert names == ["Alice", "Bob"]


def test_missing_trip_is_404(client):
    assert client.get("/api/trips/999").status_code == 404
    assert client.get("/api/settlement/999").status_code == 404


def test_settlement_flow(client):
    alice, bob, carol = create_people(client, "Alice", "Bob", "Carol")
    trip_id = create_trip(client, [alice, bob, carol])["id"]
    add_expense(client, trip_id, amount=30000, payer_id=alice, participant_ids=[alice, bob, carol])
    add_expense(client, trip_id, amount=20000, payer_id=bob, participant_ids=[bob, carol])
    add_expense(client, trip_id, amount=15000, payer_id=carol, participant_ids=[alice, bob, carol])

    summary = client.get(f"/api/settlement/{trip_id}").json()

    assert summary["transfers"] == [
        {"from": {"id": carol, "name": "Carol"}, "to": {"id": alice, "name": "Alice"}, "amount": 10000},
        {"from": {"id": bob, "name": "Bob"}, "to": {"id": alice, "name": "Alice"}, "amount": 5000},
    ]
    assert summary["settlement_validation"]["is_valid"] is True

    trigger = client.post(f"/api/settlement/{trip_id}/trigger")
    assert trigger.status_code == 200

    result = client.get(f"/api/settlement/{trip_id}/result").json()
    assert result["id"] == trigger.json()["settlement_id"]
    assert result["calculation_data"]["total_expenses"] == 65000


def test_settlement_result_missing(client):
    alice, = create_people(client, "Alice")
    trip_id = create_trip(client, [alice])["id"]

    assert client.get(f"/api/settlement/{trip_id}/result").status_code == 404


def test_custom_mismatch_strict_and_permissive(client):
    alice, bob = create_people(client, "Alice", "Bob")
    trip_id = create_trip(client, [alice, bob])["id"]
    add_expense(
        client, trip_id,
        amount=100,
        payer_id=alice,
        participant_ids=[alice, bob],
        settlement_type="custom",
        custom_amounts={str(alice): 60, str(bob): 30}
    )

    permissive = client.get(f"/api/settlement/{trip_id}")
    assert permissive.status_code == 200
    assert permissive.json()["settlement_validation"]["is_valid"] is False

    strict = client.get(f"/api/settlement/{trip_id}", params={"strict": True})
    assert strict.status_code == 422
    assert strict.json()["issues"] == [
        "Expense 1 custom amounts sum to 90, expected 100"
    ]


def test_expense_update_and_delete(client):
    alice, bob = create_people(client, "Alice", "Bob")
    trip_id = create_trip(client, [alice, bob])["id"]
    expense = add_expense(client, trip_id, amount=1000, payer_id=alice, participant_ids=[alice])

    response = client.put(f"/api/expenses/{expense['id']}", json={"amount": 2000, "participant_ids": [alice, bob]})
    assert response.status_code == 200
    assert response.json()["amount"] == 2000
    assert [p["participant_id"] for p in response.json()["participants"]] == [alice, bob]

    assert client.delete(f"/api/expenses/{expense['id']}").status_code == 204
    assert client.get(f"/api/expenses/{trip_id}").json() == []


def test_get_single_expense(client):
    alice, bob = create_people(client, "Alice", "Bob")
    trip_id = create_trip(client, [alice, bob])["id"]
    expense = add_expense(client, trip_id, amount=5000, payer_id=bob, participant_ids=[alice, bob])

    response = client.get(f"/api/expenses/item/{expense['id']}")

    assert response.status_code == 200
    assert response.json()["amount"] == 5000
    assert response.json()["date"] == "2024-05-01"
    assert [p["participant_id"] for p in response.json()["participants"]] == [alice, bob]
    assert client.get("/api/expenses/item/999").status_code == 404


def test_expense_list_filters_by_date(client):
    alice, = create_people(client, "Alice")
    trip_id = create_trip(client, [alice])["id"]
    add_expense(client, trip_id, amount=100, payer_id=alice, participant_ids=[alice], item_name="Day 1")
    add_expense(
        client, trip_id,
        amount=100, payer_id=alice, participant_ids=[alice], item_name="Day 2", date="2024-05-02"
    )

    response = client.get(f"/api/expenses/{trip_id}", params={"date": "2024-05-02"})

    assert [e["item_name"] for e in response.json()] == ["Day 2"]


def test_expense_with_outsider_rejected(client):
    alice, dave = create_people(client, "Alice", "Dave")
    trip_id = create_trip(client, [alice])["id"]

    response = client.post(
        f"/api/expenses/{trip_id}",
        json={"date": "2024-05-01", "item_name": "Snacks", "amount": 100,
              "payer_id": alice, "participant_ids": [alice, dave]}
    )

    assert response.status_code == 400


def test_negative_amount_rejected_at_input(client):
    alice, = create_people(client, "Alice")
    trip_id = create_trip(client, [alice])["id"]

    response = client.post(
        f"/api/expenses/{trip_id}",
        json={"date": "2024-05-01", "item_name": "Refund", "amount": -100,
              "payer_id": alice, "participant_ids": [alice]}
    )

    assert response.status_code == 422


def test_shared_dashboard_flow(client):
    alice, bob = create_people(client, "Alice", "Bob")
    trip_id = create_trip(client, [alice, bob])["id"]
    add_expense(client, trip_id, amount=1000, payer_id=alice, participant_ids=[alice, bob])

    created = client.post(f"/api/dashboards/{trip_id}", json={"title": "Jeju", "password": "pw"})
    assert created.status_code == 201
    dashboard = created.json()
    assert dashboard["has_password"] is True
    assert "password_hash" not in dashboard

    share_key = dashboard["share_key"]
    assert client.get(f"/api/dashboards/shared/{share_key}").status_code == 403
    assert client.get(
        f"/api/dashboards/shared/{share_key}", headers={"X-Dashboard-Password": "nope"}
    ).status_code == 403

    view = client.get(f"/api/dashboards/shared/{share_key}", headers={"X-Dashboard-Password": "pw"})
    assert view.status_code == 200
    body = view.json()
    assert body["dashboard"]["view_count"] == 1
    assert {s["participant_name"]: s["total_amount"] for s in body["snapshots"]} == {"Alice": 500, "Bob": 500}

    assert len(client.get(f"/api/dashboards/{trip_id}").json()) == 1

    deactivated = client.post(f"/api/dashboards/shared/{share_key}/deactivate")
    assert deactivated.json()["is_active"] is False
    assert client.get(
        f"/api/dashboards/shared/{share_key}", headers={"X-Dashboard-Password": "pw"}
    ).status_code == 404


def test_trip_update_and_delete(client):
    alice, = create_people(client, "Alice")
    trip_id = create_trip(client, [alice])["id"]

    response = client.put(f"/api/trips/{trip_id}", json={"name": "Busan", "end_date": "2024-05-05"})
    assert response.status_code == 200
    assert response.json()["name"] == "Busan"
    assert response.json()["end_date"] == "2024-05-05"

    backwards = client.put(f"/api/trips/{trip_id}", json={"end_date": "2024-04-01"})
    assert backwards.status_code == 400

    assert client.delete(f"/api/trips/{trip_id}").status_code == 204
    assert client.get(f"/api/trips/{trip_id}").status_code == 404


def test_participant_update_and_delete(client):
    alice, bob = create_people(client, "Alice", "Bob")
    trip_id = create_trip(client, [alice, bob])["id"]
    add_expense(client, trip_id, amount=1000, payer_id=alice, participant_ids=[alice])

    response = client.put(f"/api/participants/{bob}", json={"phone": "010-0000-0000"})
    assert response.status_code == 200
    assert response.json()["phone"] == "010-0000-0000"
    assert client.get(f"/api/participants/{bob}").json()["name"] == "Bob"

    assert client.delete(f"/api/participants/{alice}").status_code == 400
    assert client.delete(f"/api/participants/{bob}").status_code == 204
    assert client.get(f"/api/participants/{bob}").status_code == 404


def test_remove_participant_from_trip(client):
    alice, bob = create_people(client, "Alice", "Bob")
    trip_id = create_trip(client, [alice, bob])["id"]
    add_expense(client, trip_id, amount=1000, payer_id=alice, participant_ids=[alice])

    assert client.delete(f"/api/trips/{trip_id}/participants/{alice}").status_code == 400
    assert client.delete(f"/api/trips/{trip_id}/participants/{bob}").status_code == 204
    assert client.delete(f"/api/trips/{trip_id}/participants/{bob}").status_code == 404

    names = [p["name"] for p in client.get(f"/api/trips/{trip_id}/participants").json()]
    assert names == ["Alice"]


def test_category_crud(client):
    created = client.post("/api/categories", json={"name": "Cafe", "icon": "☕"})
    assert created.status_code == 201
    category_id = created.json()["id"]
    assert created.json()["is_default"] is False

    assert client.post("/api/categories", json={"name": "Cafe", "icon": "☕"}).status_code == 400

    renamed = client.put(f"/api/categories/{category_id}", json={"name": "Coffee"})
    assert renamed.json()["name"] == "Coffee"
    assert [c["name"] for c in client.get("/api/categories").json()] == ["Coffee"]

    alice, = create_people(client, "Alice")
    trip_id = create_trip(client, [alice])["id"]
    expense = add_expense(client, trip_id, amount=4500, payer_id=alice, participant_ids=[alice], category_id=category_id)
    assert expense["category"] == "Coffee"
    assert expense["category_id"] == category_id

    assert client.delete(f"/api/categories/{category_id}").status_code == 204
    assert client.get(f"/api/expenses/item/{expense['id']}").json()["category_id"] is None
