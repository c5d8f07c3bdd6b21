from datetime import datetime

import pytest

from stats import chart_label, sales_summary

BOOKINGS = [
    {"date": "2024-01-05", "price": 100},
    {"date": "2024-02-10", "price": 50},
]


def test_sales_summary():
    assert sales_summary(BOOKINGS) == {
        "totalBookings": 2,
        "totalPrice": 150,
        "chartData": [["Day", "Sales"], ["5/1", 100], ["10/2", 50]],
    }


def test_sales_summary_empty():
    assert sales_summary([]) == {"totalBookings": 0, "totalPrice": 0, "chartData": [["Day", "Sales"]]}


@pytest.mark.parametrize("value,label", [
    ("2024-01-05", "5/1"),
    ("2024-12-31T23:10:00.000Z", "31/12"),
    ("2024-07-04T08:00:00+02:00", "4/7"),
    (datetime(2024, 3, 9, 12, 0), "9/3"),
])
def test_chart_label(value, label):
    assert chart_label(value) == label


def test_admin_stat(login, db):
    db.rooms.insert_many([{"title": "a"}, {"title": "b"}])
    db.bookings.insert_many([dict(b) for b in BOOKINGS])
    client = login("admin@example.com", role="admin")
    r = client.get("/admin-stat")
    assert r.status_code == 200
    assert r.json() == {
        "totalUsers": 1,
        "totalRooms": 2,
        "totalBookings": 2,
        "totalPrice": 150,
        "chartData": [["Day", "Sales"], ["5/1", 100], ["10/2", 50]],
    }


def test_host_stat(login, db):
    db.rooms.insert_many([{"host": {"email": "host@example.com"}}, {"host": {"email": "x@example.com"}}])
    db.bookings.insert_many([
        {"host": {"email": "host@example.com"}, "date": "2024-01-05", "price": 100},
        {"host": {"email": "x@example.com"}, "date": "2024-01-06", "price": 70},
    ])
    client = login("host@example.com", role="host")
    body = client.get("/host-stat").json()
    assert body["totalRooms"] == 1
    assert body["totalBookings"] == 1
    assert body["totalPrice"] == 100
    assert body["chartData"] == [["Day", "Sales"], ["5/1", 100]]
    assert body["hostSince"] == 1700000000000


def test_guest_stat(login, db):
    db.bookings.insert_many([
        {"guest": {"email": "guest@example.com"}, **BOOKINGS[0]},
        {"guest": {"email": "guest@example.com"}, **BOOKINGS[1]},
        {"guest": {"email": "other@example.com"}, "date": "2024-03-01", "price": 999},
    ])
    client = login("guest@example.com")
    body = client.get("/guest-stat").json()
    assert body["totalBookings"] == 2
    assert body["totalPrice"] == 150
    assert body["chartData"] == [["Day", "Sales"], ["5/1", 100], ["10/2", 50]]
    assert body["guestSince"] == 1700000000000


def test_unparseable_dates_are_left_out_of_the_chart():
    summary = sales_summary([{"date": "Fri Jan 05 2024", "price": 10}, *BOOKINGS])
    assert summary["totalBookings"] == 3
    assert summary["totalPrice"] == 160
    assert summary["chartData"] == [["Day", "Sales"], ["5/1", 100], ["10/2", 50]]


def test_admin_stat_with_malformed_booking_date(login, db):
    db.bookings.insert_one({"date": "Fri Jan 05 2024", "price": 10})
    client = login("admin@example.com", role="admin")
    r = client.get("/admin-stat")
    assert r.status_code == 200
    assert r.json()["totalPrice"] == 10
    assert r.json()["chartData"] == [["Day", "Sales"]]
