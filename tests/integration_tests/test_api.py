"""HTTP tests for the reservation and payment endpoints."""

from decimal import Decimal

from tests.mocks.catalog import at


def _player_headers(player_id):
    return {"X-User-Id": str(player_id), "X-User-Role": "player"}


def _club_headers(club_id, user_id=900):
    return {"X-User-Id": str(user_id), "X-User-Role": "club", "X-Club-Id": str(club_id)}


def _book_court(client, seeded, player_id, start, end):
    return client.post(
        "/reservations/facility",
        json={"facility_id": seeded.facility_id, "start_time": start.isoformat(), "end_time": end.isoformat()},
        headers=_player_headers(player_id),
    )


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}


class TestReservationEndpoints:
    def test_book_facility(self, client, seeded):
        response = _book_court(client, seeded, seeded.member_id, at(10), at(12))
        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "pending"
        assert Decimal(data["total"]) == Decimal("80.00")
        assert Decimal(data["discount"]) == Decimal("20")
        assert data["membership_applied"] is True

    def test_overlap_returns_409(self, client, seeded):
        assert _book_court(client, seeded, seeded.guest_id, at(10), at(12)).status_code == 201
        response = _book_court(client, seeded, seeded.rival_id, at(11, 59), at(13))
        assert response.status_code == 409
        body = response.json()
        assert body["code"] == "SLOT_TAKEN"
        assert body["category"] == "conflict"
        assert "conflicting_reservation_id" in body["details"]

    def test_invalid_interval_returns_400(self, client, seeded):
        response = _book_court(client, seeded, seeded.guest_id, at(12), at(10))
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_INTERVAL"

    def test_missing_identity_headers(self, client, seeded):
        response = client.post(
            "/reservations/facility",
            json={"facility_id": seeded.facility_id, "start_time": at(10).isoformat(), "end_time": at(11).isoformat()},
        )
        assert response.status_code == 422

    def test_club_role_cannot_book(self, client, seeded):
        response = client.post(
            "/reservations/facility",
            json={"facility_id": seeded.facility_id, "start_time": at(10).isoformat(), "end_time": at(11).isoformat()},
            headers=_club_headers(seeded.club_id),
        )
        assert response.status_code == 403
        assert response.json()["code"] == "ROLE_NOT_ALLOWED"

    def test_unknown_facility_returns_404(self, client, seeded):
        response = client.post(
            "/reservations/facility",
            json={"facility_id": 9999, "start_time": at(10).isoformat(), "end_time": at(11).isoformat()},
            headers=_player_headers(seeded.guest_id),
        )
        assert response.status_code == 404
        assert response.json()["category"] == "not_found"

    def test_personal_coach_outside_availability(self, client, seeded):
        response = client.post(
            "/reservations/coach/personal",
            json={"coach_id": seeded.coach_id, "start_time": at(7).isoformat(), "end_time": at(8).isoformat()},
            headers=_player_headers(seeded.guest_id),
        )
        assert response.status_code == 400
        assert response.json()["code"] == "OUTSIDE_AVAILABILITY"

    def test_class_capacity(self, client, seeded):
        response = client.post(
            "/reservations/coach/class",
            json={"coach_id": seeded.coach_id, "session_id": seeded.almost_full_session_id, "participants": 2},
            headers=_player_headers(seeded.guest_id),
        )
        assert response.status_code == 409
        assert response.json()["code"] == "CAPACITY_EXCEEDED"

    def test_rent_accessory(self, client, seeded):
        response = client.post(
            "/reservations/accessory",
            json={
                "accessory_id": seeded.racket_id,
                "kind": "rent",
                "qty": 2,
                "start_time": at(10).isoformat(),
                "end_time": at(13).isoformat(),
            },
            headers=_player_headers(seeded.guest_id),
        )
        assert response.status_code == 201
        assert Decimal(response.json()["total"]) == Decimal("30.00")

    def test_cancel(self, client, seeded):
        booking_id = _book_court(client, seeded, seeded.guest_id, at(10), at(11)).json()["id"]
        response = client.post(
            f"/reservations/facility/{booking_id}/cancel",
            headers=_player_headers(seeded.guest_id),
        )
        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"

    def test_cancel_someone_elses_booking(self, client, seeded):
        booking_id = _book_court(client, seeded, seeded.guest_id, at(10), at(11)).json()["id"]
        response = client.post(
            f"/reservations/facility/{booking_id}/cancel",
            headers=_player_headers(seeded.rival_id),
        )
        assert response.status_code == 403
        assert response.json()["code"] == "NOT_OWNER"


class TestPaymentEndpoints:
    def test_pay_and_pay_again(self, client, seeded):
        booking_id = _book_court(client, seeded, seeded.member_id, at(10), at(12)).json()["id"]

        response = client.post(
            "/payments/pay",
            json={"item_type": "facility", "item_id": booking_id},
            headers=_player_headers(seeded.member_id),
        )
        assert response.status_code == 200
        data = response.json()
        assert data["item_type"] == "facility"
        assert data["reservation"]["status"] == "paid"
        assert Decimal(data["payment"]["amount"]) == Decimal("80.00")
        assert Decimal(data["payment"]["admin_fee"]) == Decimal("12.00")
        assert Decimal(data["payment"]["club_earning"]) == Decimal("68.00")

        again = client.post(
            "/payments/pay",
            json={"item_type": "facility", "item_id": booking_id},
            headers=_player_headers(seeded.member_id),
        )
        assert again.status_code == 409
        assert again.json()["code"] == "ALREADY_PAID"
        assert again.json()["category"] == "state_conflict"

    def test_cancel_after_payment(self, client, seeded):
        booking_id = _book_court(client, seeded, seeded.guest_id, at(10), at(11)).json()["id"]
        client.post(
            "/payments/pay",
            json={"item_type": "facility", "item_id": booking_id},
            headers=_player_headers(seeded.guest_id),
        )
        response = client.post(
            f"/reservations/facility/{booking_id}/cancel",
            headers=_player_headers(seeded.guest_id),
        )
        assert response.status_code == 409
        assert response.json()["code"] == "CANNOT_CANCEL_PAID"

    def test_return_rental(self, client, seeded):
        order_id = client.post(
            "/reservations/accessory",
            json={
                "accessory_id": seeded.racket_id,
                "kind": "rent",
                "start_time": at(10).isoformat(),
                "end_time": at(11).isoformat(),
            },
            headers=_player_headers(seeded.guest_id),
        ).json()["id"]
        paid = client.post(
            "/payments/pay",
            json={"item_type": "accessory", "item_id": order_id},
            headers=_player_headers(seeded.guest_id),
        )
        assert paid.status_code == 200

        response = client.post(
            f"/reservations/accessory/{order_id}/return",
            headers=_club_headers(seeded.club_id),
        )
        assert response.status_code == 200
        assert response.json()["status"] == "returned"
