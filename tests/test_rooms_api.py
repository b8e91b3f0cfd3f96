"""Tests for listing, user and session endpoints"""

from app.models import Room, RoomStatus, User, UserRole, UserStatus

from conftest import auth_headers, make_room, make_user

HOST = "host@nomadhub.io"

NEW_ROOM = {
    "title": "Glass cabin",
    "location": "Tromso, Norway",
    "category": "Arctic",
    "description": "Northern lights from bed",
    "guests": 2,
    "bedrooms": 1,
    "bathrooms": 1,
    "price": "150.00",
}


class TestRooms:

    def test_list_rooms_with_category_filter(self, client, db):
        make_room(db, category="Lake")
        make_room(db, category="Arctic")

        all_rooms = client.get("/rooms").json()
        arctic = client.get("/rooms", params={"category": "Arctic"}).json()
        null_tab = client.get("/rooms", params={"category": "null"}).json()

        assert len(all_rooms) == 2
        assert [r["category"] for r in arctic] == ["Arctic"]
        assert len(null_tab) == 2

    def test_get_room(self, client, db):
        room = make_room(db, title="Yurt")

        response = client.get(f"/room/{room.id}")

        assert response.status_code == 200
        assert response.json()["title"] == "Yurt"
        assert response.json()["status"] == "Available"

    def test_get_missing_room_is_404(self, client):
        assert client.get("/room/nope").status_code == 404

    def test_host_creates_available_room(self, client, db):
        make_user(db, HOST, role=UserRole.HOST)

        response = client.post("/room", json=NEW_ROOM, headers=auth_headers(HOST))

        assert response.status_code == 201
        data = response.json()
        assert data["host_email"] == HOST
        assert data["status"] == RoomStatus.AVAILABLE.value
        assert data["price"] == 150.0

    def test_client_cannot_choose_status(self, client, db):
        make_user(db, HOST, role=UserRole.HOST)

        response = client.post("/room", json={**NEW_ROOM, "status": "Booked"}, headers=auth_headers(HOST))

        assert response.status_code == 201
        assert response.json()["status"] == "Available"

    def test_guest_cannot_create_room(self, client):
        response = client.post("/room", json=NEW_ROOM, headers=auth_headers("guest@nomadhub.io"))

        assert response.status_code == 403

    def test_my_listings(self, client, db):
        make_user(db, HOST, role=UserRole.HOST)
        mine = make_room(db, host_email=HOST)
        make_room(db, host_email="other@nomadhub.io")

        response = client.get("/my-listings", headers=auth_headers(HOST))

        assert [r["id"] for r in response.json()] == [mine.id]

    def test_delete_available_room(self, client, db):
        make_user(db, HOST, role=UserRole.HOST)
        room = make_room(db, host_email=HOST)

        response = client.delete(f"/room/{room.id}", headers=auth_headers(HOST))

        assert response.status_code == 200
        assert db.query(Room).count() == 0

    def test_delete_booked_room_is_409(self, client, db):
        make_user(db, HOST, role=UserRole.HOST)
        room = make_room(db, host_email=HOST, status=RoomStatus.BOOKED)

        response = client.delete(f"/room/{room.id}", headers=auth_headers(HOST))

        assert response.status_code == 409
        assert db.query(Room).count() == 1

    def test_delete_someone_elses_room_is_403(self, client, db):
        make_user(db, HOST, role=UserRole.HOST)
        room = make_room(db, host_email="other@nomadhub.io")

        response = client.delete(f"/room/{room.id}", headers=auth_headers(HOST))

        assert response.status_code == 403

    def test_dashboard_paths(self, client, db):
        make_user(db, HOST, role=UserRole.HOST)

        created = client.post("/add-room", json=NEW_ROOM, headers=auth_headers(HOST))
        room_id = created.json()["id"]
        listed = client.get(f"/my-listings/{HOST}", headers=auth_headers(HOST))
        deleted = client.delete(f"/delete-room/{room_id}", headers=auth_headers(HOST))

        assert created.status_code == 201
        assert [r["id"] for r in listed.json()] == [room_id]
        assert deleted.status_code == 200
        assert db.query(Room).count() == 0

    def test_listings_for_another_host_are_403(self, client, db):
        make_user(db, HOST, role=UserRole.HOST)
        make_room(db, host_email="other@nomadhub.io")

        response = client.get("/my-listings/other@nomadhub.io", headers=auth_headers(HOST))

        assert response.status_code == 403


class TestUsers:

    def test_save_new_user_as_guest(self, client, db):
        response = client.put("/user", json={"email": "new@nomadhub.io", "name": "New"})

        assert response.status_code == 200
        assert response.json()["role"] == "guest"
        assert response.json()["status"] == "Verified"

    def test_existing_user_requests_host(self, client, db):
        make_user(db, "g@nomadhub.io")

        response = client.put("/user", json={"email": "g@nomadhub.io", "status": "Requested"})

        assert response.json()["status"] == "Requested"
        assert response.json()["role"] == "guest"

    def test_existing_user_returned_unchanged(self, client, db):
        make_user(db, "h@nomadhub.io", role=UserRole.HOST)

        response = client.put("/user", json={"email": "h@nomadhub.io", "name": "Renamed"})

        assert response.json()["role"] == "host"
        assert db.query(User).count() == 1

    def test_get_user(self, client, db):
        make_user(db, "g@nomadhub.io")

        assert client.get("/user/g@nomadhub.io").json()["email"] == "g@nomadhub.io"
        assert client.get("/user/missing@nomadhub.io").status_code == 404

    def test_admin_lists_and_promotes_users(self, client, db):
        make_user(db, "admin@nomadhub.io", role=UserRole.ADMIN)
        make_user(db, "g@nomadhub.io")
        headers = auth_headers("admin@nomadhub.io")

        listed = client.get("/users", headers=headers)
        promoted = client.patch(
            "/user/update/g@nomadhub.io",
            json={"role": "host", "status": "Verified"},
            headers=headers,
        )

        assert len(listed.json()) == 2
        assert promoted.status_code == 200
        assert promoted.json()["role"] == "host"
        db.expire_all()
        user = db.query(User).filter(User.email == "g@nomadhub.io").first()
        assert user.role == UserRole.HOST.value
        assert user.status == UserStatus.VERIFIED.value

    def test_non_admin_cannot_list_users(self, client):
        assert client.get("/users", headers=auth_headers("g@nomadhub.io")).status_code == 403


class TestSession:

    def test_jwt_sets_http_only_cookie(self, client):
        response = client.post("/jwt", json={"email": "g@nomadhub.io"})

        assert response.status_code == 200
        assert response.json() == {"success": True}
        set_cookie = response.headers["set-cookie"]
        assert set_cookie.startswith("token=")
        assert "HttpOnly" in set_cookie

    def test_logout_clears_cookie(self, client):
        client.post("/jwt", json={"email": "g@nomadhub.io"})

        response = client.get("/logout")

        assert response.status_code == 200
        assert 'token=""' in response.headers["set-cookie"] or "Max-Age=0" in response.headers["set-cookie"]
