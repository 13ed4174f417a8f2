"""
Locust Load Test Suite

Run scenarios:
  locust -f locustfile.py --tags concurrency  # Test overbooking
  locust -f locustfile.py --tags throughput   # Test catalog reads and cache
  locust -f locustfile.py --tags edge         # Test bad input
  locust -f locustfile.py                     # All tests

CONTENDED_ACCOMMODATION_ID names the accommodation every concurrency user
books (give it a small room count in the seed data).
"""

import os
import random
from datetime import date, timedelta

from locust import HttpUser, task, between, tag

CONTENDED_ACCOMMODATION_ID = int(os.getenv("CONTENDED_ACCOMMODATION_ID", "1"))

# Filled in as users browse
ACCOMMODATION_IDS = []


def random_guest() -> dict:
    n = random.randint(10000, 99999)
    return {
        "guest_name": f"Load Guest {n}",
        "guest_email": f"load_{n}@test.com",
        "guest_phone": f"98{n}{n}"[:10],
    }


def booking_body(accommodation_id: int, rooms: int = 1, days_ahead: int = 30, nights: int = 2) -> dict:
    check_in = date.today() + timedelta(days=days_ahead)
    return {
        "accommodation_id": accommodation_id,
        **random_guest(),
        "rooms": rooms,
        "adults": 2,
        "check_in": check_in.isoformat(),
        "check_out": (check_in + timedelta(days=nights)).isoformat(),
        "total_amount": 9000,
        "advance_amount": 3000,
    }


class ConcurrencyUser(HttpUser):
    """
    TEST 1: Concurrency - many guests, same dates, few rooms

    Run: locust -f locustfile.py --tags concurrency -u 100 -r 50 --run-time 30s

    After test, verify:
      SELECT SUM(rooms) FROM bookings WHERE accommodation_id = X;
    Should be <= accommodations.rooms for X
    """
    wait_time = between(0, 0.1)

    @tag("concurrency")
    @task
    def book_last_rooms(self):
        """All users fight for the same stay on the same accommodation."""
        with self.client.post(
            "/api/bookings",
            json=booking_body(CONTENDED_ACCOMMODATION_ID),
            name="/api/bookings [contended]",
            catch_response=True,
        ) as resp:
            if resp.status_code == 201:
                resp.success()
            elif resp.status_code == 409:
                resp.success()  # Expected: no rooms left
            else:
                resp.failure(f"Unexpected: {resp.status_code}")


class ThroughputUser(HttpUser):
    """
    TEST 2: Throughput - catalog reads

    Run twice:
      1. With Redis: locust -f locustfile.py --tags throughput -u 100 -r 20 --run-time 60s
      2. Without Redis: REDIS_ENABLED=false, run again

    Compare avg response time and P95 for /api/all and /api/images.
    """
    wait_time = between(0.1, 0.5)

    @tag("throughput", "read")
    @task(10)
    def full_catalog(self):
        self.client.get("/api/all", name="/api/all [cached]")

    @tag("throughput", "read")
    @task(5)
    def image_gallery(self):
        self.client.get("/api/images", name="/api/images [cached]")

    @tag("throughput", "read")
    @task(5)
    def list_accommodations(self):
        resp = self.client.get("/api/accommodations")
        if resp.status_code == 200:
            for accommodation in resp.json():
                if accommodation["id"] not in ACCOMMODATION_IDS:
                    ACCOMMODATION_IDS.append(accommodation["id"])

    @tag("throughput", "read")
    @task(3)
    def accommodation_detail(self):
        if ACCOMMODATION_IDS:
            self.client.get(
                f"/api/accommodations/{random.choice(ACCOMMODATION_IDS)}",
                name="/api/accommodations/{id}",
            )

    @tag("throughput")
    @task(1)
    def health_check(self):
        self.client.get("/api/health")


class EdgeCaseUser(HttpUser):
    """
    TEST 3: Edge cases - Bad input handling

    Run: locust -f locustfile.py --tags edge -u 20 -r 5 --run-time 30s

    System should NOT crash, return proper error codes.
    """
    wait_time = between(0.5, 1.5)

    def _expect(self, resp, allowed):
        if resp.status_code in allowed:
            resp.success()
        else:
            resp.failure(f"Expected {allowed}, got {resp.status_code}")

    @tag("edge")
    @task
    def unknown_accommodation(self):
        with self.client.post(
            "/api/bookings", json=booking_body(999999), catch_response=True
        ) as resp:
            self._expect(resp, [404])

    @tag("edge")
    @task
    def past_check_in(self):
        with self.client.post(
            "/api/bookings",
            json=booking_body(CONTENDED_ACCOMMODATION_ID, days_ahead=-3),
            catch_response=True,
        ) as resp:
            self._expect(resp, [400])

    @tag("edge")
    @task
    def huge_room_count(self):
        with self.client.post(
            "/api/bookings",
            json=booking_body(CONTENDED_ACCOMMODATION_ID, rooms=999999),
            catch_response=True,
        ) as resp:
            self._expect(resp, [409])

    @tag("edge")
    @task
    def malformed_json(self):
        with self.client.post(
            "/api/bookings",
            data="not json at all",
            headers={"Content-Type": "application/json"},
            catch_response=True,
        ) as resp:
            self._expect(resp, [400])

    @tag("edge")
    @task
    def invalid_payment_amount(self):
        with self.client.post(
            "/api/payments/payu",
            json={
                "amount": "-10",
                "firstname": "Load",
                "email": "load@test.com",
                "phone": "9800000000",
                "productinfo": "stay",
                "booking_id": 1,
            },
            catch_response=True,
        ) as resp:
            # 503 when the server has no PayU credentials configured
            self._expect(resp, [400, 503])


class RealisticUser(HttpUser):
    """
    TEST 4: Realistic mixed workload

    Run: locust -f locustfile.py -u 200 -r 20 --run-time 120s

    Mostly browsing, some bookings spread over many dates.
    """
    wait_time = between(1, 3)

    @task(50)
    def browse(self):
        resp = self.client.get("/api/accommodations")
        if resp.status_code == 200:
            for accommodation in resp.json():
                if accommodation["id"] not in ACCOMMODATION_IDS:
                    ACCOMMODATION_IDS.append(accommodation["id"])

    @task(20)
    def view_accommodation(self):
        if ACCOMMODATION_IDS:
            self.client.get(
                f"/api/accommodations/{random.choice(ACCOMMODATION_IDS)}",
                name="/api/accommodations/{id}",
            )

    @task(10)
    def view_extras(self):
        self.client.get(random.choice(["/api/meal-plans", "/api/activities", "/api/faqs"]))

    @task(5)
    def book_stay(self):
        if ACCOMMODATION_IDS:
            self.client.post(
                "/api/bookings",
                json=booking_body(
                    random.choice(ACCOMMODATION_IDS),
                    rooms=random.randint(1, 2),
                    days_ahead=random.randint(1, 120),
                ),
            )
