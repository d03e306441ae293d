"""
API tests for rooms, room types, guests and the dashboard
"""
from conftest import GUEST, STANDARD_PRICING, get_room, make_room, set_room_status


def book(client, room, headers, **overrides):
    payload = {
        "guest": dict(GUEST),
        "room_id": str(room["_id"]),
        "check_in_date": "2026-03-10T14:00:00",
        "duration": 24,
        "total_amount": 1200,
    }
    payload.update(overrides)
    response = client.post("/api/bookings/", json=payload, headers=headers)
    assert response.status_code == 201
    return response.json()["data"]


class TestRoomTypesApi:

    def test_list_room_types(self, client, room_type, user_headers):
        response = client.get("/api/room-types/", headers=user_headers)
        assert response.status_code == 200
        data = response.json()["data"]
        assert [rt["name"] for rt in data] == ["Standard"]
        assert data[0]["pricing"]["daily"] == 1200

    def test_create_requires_admin(self, client, db, user_headers):
        payload = {"name": "Deluxe", "base_capacity": 3, "pricing": STANDARD_PRICING}
        response = client.post("/api/room-types/", json=payload, headers=user_headers)
        assert response.status_code == 403

    def test_create_and_duplicate(self, client, db, admin_headers):
        payload = {"name": "Deluxe", "base_capacity": 3, "pricing": STANDARD_PRICING, "penalty": 300}
        response = client.post("/api/room-types/", json=payload, headers=admin_headers)
        assert response.status_code == 201
        assert response.json()["data"]["is_active"] is True

        response = client.post("/api/room-types/", json=payload, headers=admin_headers)
        assert response.status_code == 400

    def test_soft_delete_hides_type(self, client, room_type, admin_headers):
        response = client.delete(f"/api/room-types/{room_type['_id']}", headers=admin_headers)
        assert response.status_code == 200
        response = client.get("/api/room-types/", headers=admin_headers)
        assert response.json()["count"] == 0


class TestRoomsApi:

    def test_create_room(self, client, room_type, admin_headers):
        payload = {"room_number": "501", "room_type_id": str(room_type["_id"]), "floor": 5}
        response = client.post("/api/rooms/", json=payload, headers=admin_headers)
        assert response.status_code == 201
        assert response.json()["data"]["status"] == "Available"

        response = client.post("/api/rooms/", json=payload, headers=admin_headers)
        assert response.status_code == 400
        assert response.json()["error"] == "Room number 501 already exists"

    def test_create_room_unknown_type(self, client, db, admin_headers):
        payload = {"room_number": "501", "room_type_id": "0123456789abcdef01234567", "floor": 5}
        response = client.post("/api/rooms/", json=payload, headers=admin_headers)
        assert response.status_code == 404

    def test_list_rooms_with_current_booking(self, client, room_type, user_headers):
        occupied = make_room(room_type, "101")
        make_room(room_type, "102")
        booking = book(client, occupied, user_headers, booking_status="Checked In")

        response = client.get("/api/rooms/", headers=user_headers)
        rooms = response.json()["data"]
        assert [r["room_number"] for r in rooms] == ["101", "102"]
        assert rooms[0]["current_booking"]["booking_number"] == booking["booking_number"]
        assert "current_booking" not in rooms[1]

    def test_filter_by_status(self, client, room_type, user_headers):
        make_room(room_type, "101")
        make_room(room_type, "102", status="Maintenance")
        response = client.get("/api/rooms/", params={"status": "Maintenance"}, headers=user_headers)
        assert [r["room_number"] for r in response.json()["data"]] == ["102"]

    def test_available_rooms(self, client, room_type, user_headers):
        booked = make_room(room_type, "101")
        free = make_room(room_type, "102")
        make_room(room_type, "103", status="Maintenance")
        book(client, booked, user_headers)

        response = client.get(
            "/api/rooms/available",
            params={"check_in": "2026-03-10T18:00:00", "duration": 8},
            headers=user_headers,
        )
        assert response.status_code == 200
        assert [r["_id"] for r in response.json()["data"]] == [str(free["_id"])]

    def test_available_rooms_excludes_window_conflicts(self, client, room_type, user_headers):
        room = make_room(room_type, "101")
        book(client, room, user_headers)
        # Released by an admin while the booking is still active
        set_room_status(room, "Available")

        response = client.get(
            "/api/rooms/available",
            params={"check_in": "2026-03-10T18:00:00", "check_out": "2026-03-10T21:00:00"},
            headers=user_headers,
        )
        assert response.json()["count"] == 0

        response = client.get(
            "/api/rooms/available",
            params={"check_in": "2026-03-12T18:00:00", "duration": 3},
            headers=user_headers,
        )
        assert response.json()["count"] == 1

    def test_quote(self, client, room, user_headers):
        response = client.get(f"/api/rooms/{room['_id']}/quote", params={"duration": 8}, headers=user_headers)
        assert response.status_code == 200
        assert response.json()["data"]["total_amount"] == 400

    def test_quote_bad_duration(self, client, room, user_headers):
        response = client.get(f"/api/rooms/{room['_id']}/quote", params={"duration": 6}, headers=user_headers)
        assert response.status_code == 400

    def test_get_missing_room(self, client, db, user_headers):
        response = client.get("/api/rooms/0123456789abcdef01234567", headers=user_headers)
        assert response.status_code == 404

    def test_deactivate_room(self, client, room, admin_headers):
        response = client.delete(f"/api/rooms/{room['_id']}", headers=admin_headers)
        assert response.status_code == 200
        assert get_room(room)["is_active"] is False


class TestRoomStatusApi:

    def test_user_releases_room_from_maintenance(self, client, room, user_headers):
        set_room_status(room, "Maintenance")
        response = client.put(f"/api/rooms/{room['_id']}/status", json={"status": "Available"}, headers=user_headers)
        assert response.status_code == 200
        assert response.json()["data"]["status"] == "Available"

    def test_user_cannot_take_room_out_of_service(self, client, room, user_headers):
        response = client.put(f"/api/rooms/{room['_id']}/status", json={"status": "Maintenance"}, headers=user_headers)
        assert response.status_code == 403
        assert response.json()["error"] == "Users can only change room status from Maintenance to Available"
        assert get_room(room)["status"] == "Available"

    def test_user_cannot_release_occupied_room(self, client, room, user_headers):
        set_room_status(room, "Occupied")
        response = client.put(f"/api/rooms/{room['_id']}/status", json={"status": "Available"}, headers=user_headers)
        assert response.status_code == 403

    def test_admin_sets_any_status(self, client, room, admin_headers):
        response = client.put(f"/api/rooms/{room['_id']}/status", json={"status": "Out of Order"}, headers=admin_headers)
        assert response.status_code == 200
        assert get_room(room)["status"] == "Out of Order"

    def test_unknown_status_value(self, client, room, admin_headers):
        response = client.put(f"/api/rooms/{room['_id']}/status", json={"status": "Haunted"}, headers=admin_headers)
        assert response.status_code == 422


class TestGuestsApi:

    def test_search_requires_query(self, client, db, user_headers):
        response = client.get("/api/guests/search", headers=user_headers)
        assert response.status_code == 400
        assert response.json()["error"] == "Please provide search query"

    def test_search(self, client, room, user_headers):
        book(client, room, user_headers)
        for q in ("mar", "SANTOS", "0101", "P1234"):
            response = client.get("/api/guests/search", params={"q": q}, headers=user_headers)
            assert response.json()["count"] == 1, q
        response = client.get("/api/guests/search", params={"q": "P1234.*"}, headers=user_headers)
        assert response.json()["count"] == 0

    def test_crud(self, client, db, user_headers):
        payload = {**GUEST, "notes": "Prefers a high floor"}
        response = client.post("/api/guests/", json=payload, headers=user_headers)
        assert response.status_code == 201
        guest_id = response.json()["data"]["_id"]

        response = client.post("/api/guests/", json=payload, headers=user_headers)
        assert response.status_code == 400

        response = client.put(f"/api/guests/{guest_id}", json={"phone": "555-0199"}, headers=user_headers)
        assert response.json()["data"]["phone"] == "555-0199"

        response = client.get("/api/guests/", headers=user_headers)
        assert response.json()["total"] == 1

        response = client.delete(f"/api/guests/{guest_id}", headers=user_headers)
        assert response.status_code == 200
        response = client.get(f"/api/guests/{guest_id}", headers=user_headers)
        assert response.status_code == 404


class TestDashboardApi:

    def test_stats(self, client, room_type, user_headers):
        booked = make_room(room_type, "101")
        make_room(room_type, "102")
        make_room(room_type, "103", status="Maintenance")
        book(client, booked, user_headers)

        response = client.get("/api/dashboard/stats", headers=user_headers)
        assert response.status_code == 200
        stats = response.json()["data"]
        assert stats["rooms"] == {
            "total": 3,
            "available": 1,
            "occupied": 1,
            "maintenance": 1,
            "occupancy_rate": 33.3,
        }
        assert stats["guests"]["total"] == 1
        assert stats["bookings"]["active"] == 1
        assert len(stats["recent_bookings"]) == 1


class TestHealth:

    def test_root_and_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}
        assert client.get("/").json()["version"] == "1.0.0"
