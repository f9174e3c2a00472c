import pytest

COMMENT = "Great fade, very clean lines."


@pytest.fixture
def booking_id(client, customer, barber, fade_service, request_payload):
    response = client.post(
        "/api/bookings",
        json=request_payload(style=None, haircut_id=fade_service),
        headers=customer[1],
    )
    assert response.status_code == 201, response.text
    return response.json()["booking_id"]


def _complete(client, barber, booking_id):
    for status in ("confirmed", "completed"):
        response = client.patch(
            f"/api/bookings/{booking_id}/status", json={"status": status}, headers=barber[1]
        )
        assert response.status_code == 200, response.text


def _review(client, headers, booking_id, rating=5, comment=COMMENT):
    return client.post(
        "/api/reviews",
        json={"booking_id": booking_id, "rating": rating, "comment": comment},
        headers=headers,
    )


def test_review_requires_completed_booking(client, customer, barber, booking_id):
    response = _review(client, customer[1], booking_id)
    assert response.status_code == 400

    client.patch(f"/api/bookings/{booking_id}/status", json={"status": "confirmed"}, headers=barber[1])
    assert _review(client, customer[1], booking_id).status_code == 400


def test_one_review_per_booking(client, customer, barber, booking_id):
    _complete(client, barber, booking_id)

    first = _review(client, customer[1], booking_id, rating=4)
    assert first.status_code == 201, first.text
    body = first.json()
    assert body["rating"] == 4
    assert body["barber_id"] == barber[0]["id"]
    assert body["customer_name"] == "Carol"

    second = _review(client, customer[1], booking_id, rating=1)
    assert second.status_code == 409


def test_only_the_booking_customer_can_review(client, register, customer, barber, booking_id):
    _complete(client, barber, booking_id)
    _, stranger_headers = register("eve@example.com")

    assert _review(client, stranger_headers, booking_id).status_code == 403
    assert _review(client, barber[1], booking_id).status_code == 403


def test_review_validation(client, customer, barber, booking_id):
    _complete(client, barber, booking_id)

    assert _review(client, customer[1], booking_id, rating=6).status_code == 422
    assert _review(client, customer[1], booking_id, rating=0).status_code == 422
    assert _review(client, customer[1], booking_id, comment="   short   ").status_code == 422
    assert _review(client, customer[1], "missing-booking").status_code == 404


def test_review_shows_up_for_barber(client, customer, barber, booking_id):
    _complete(client, barber, booking_id)
    review = _review(client, customer[1], booking_id, rating=4).json()

    fetched = client.get(f"/api/reviews/{review['id']}", headers=barber[1])
    assert fetched.status_code == 200
    assert fetched.json()["comment"] == COMMENT
    assert client.get("/api/reviews/nope", headers=barber[1]).status_code == 404

    reviews = client.get(f"/api/barbers/{barber[0]['id']}/reviews")
    assert [r["id"] for r in reviews.json()] == [review["id"]]

    detail = client.get(f"/api/barbers/{barber[0]['id']}").json()
    assert detail["review_stats"] == {
        "total_reviews": 1,
        "average_rating": 4.0,
        "min_rating": 4,
        "max_rating": 4,
    }
