"""
Locust Load Test Suite

Needs the seeded admin account (python -m deskbook.seed) so the race
scenario can create its target seat.

Run scenarios:
  locust -f locustfile.py --tags concurrency  # Many users, one seat, one day
  locust -f locustfile.py --tags read         # Seat map and listings
  locust -f locustfile.py --tags edge         # Bad input
  locust -f locustfile.py                     # All tests
"""

import random
import string
from datetime import date, timedelta
from locust import HttpUser, task, between, tag, events

ADMIN_EMAIL = "admin@company.com"
ADMIN_PASSWORD = "admin123"
PASSWORD = "loadtest123"

# Shared state
RACE_SEAT_ID = None
RACE_DATE = (date.today() + timedelta(days=random.randint(30, 300))).isoformat()
SEAT_IDS = []


def random_email():
    return f"load_{random.randint(10000, 99999)}_{random.randint(0, 9999)}@test.com"


def random_name():
    return "Load " + "".join(random.choices(string.ascii_lowercase, k=8))


def sign_up(client) -> dict:
    """Register a fresh USER account and return its auth headers."""
    email = random_email()
    client.post("/api/v1/auth/register", json={
        "name": random_name(),
        "email": email,
        "password": PASSWORD,
    })
    resp = client.post("/api/v1/auth/login", json={"email": email, "password": PASSWORD})
    if resp.status_code != 200:
        return {}
    return {"Authorization": f"Bearer {resp.json()['data']['access_token']}"}


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    print("\n" + "=" * 60)
    print(f"SETUP: all concurrency users will race for one seat on {RACE_DATE}")
    print("=" * 60)


class ConcurrencyUser(HttpUser):
    """
    TEST 1: Double booking - every user books the same seat for the same day

    Run: locust -f locustfile.py --tags concurrency -u 100 -r 50 --run-time 30s

    After test, verify:
      SELECT COUNT(*) FROM reservations
      WHERE seat_id = X AND date = 'RACE_DATE' AND status = 'ACTIVE';
    Should be exactly 1
    """
    wait_time = between(0, 0.1)

    def on_start(self):
        self.headers = sign_up(self.client)

        if RACE_SEAT_ID:
            return
        resp = self.client.post("/api/v1/auth/login", json={
            "email": ADMIN_EMAIL,
            "password": ADMIN_PASSWORD,
        })
        if resp.status_code != 200:
            return
        admin = {"Authorization": f"Bearer {resp.json()['data']['access_token']}"}
        resp = self.client.post(
            "/api/v1/seats/",
            json={
                "seat_number": f"LOAD-{random.randint(1000, 9999)}",
                "location": "Load Test Floor",
                "has_monitor": True,
            },
            headers=admin,
        )
        if resp.status_code == 201:
            globals()["RACE_SEAT_ID"] = resp.json()["data"]["id"]
            print(f"\n✓ Created race seat {RACE_SEAT_ID}\n")

    @tag("concurrency")
    @task
    def book_contested_seat(self):
        if not RACE_SEAT_ID or not self.headers:
            return

        with self.client.post(
            "/api/v1/reservations/",
            json={"seat_id": RACE_SEAT_ID, "date": RACE_DATE},
            headers=self.headers,
            catch_response=True,
        ) as resp:
            if resp.status_code in (201, 409):
                resp.success()  # one winner, everyone else conflicts
            else:
                resp.failure(f"Unexpected: {resp.status_code}")


class ReadUser(HttpUser):
    """
    TEST 2: Read path - seat map and own reservations

    Run: locust -f locustfile.py --tags read -u 100 -r 20 --run-time 60s

    Every read runs the expiry sweep first, so this also measures its cost.
    """
    wait_time = between(0.1, 0.5)

    def on_start(self):
        self.headers = sign_up(self.client)

    @tag("read")
    @task(10)
    def seat_map(self):
        day = date.today() + timedelta(days=random.randint(0, 14))
        resp = self.client.get(f"/api/v1/seats/?date={day.isoformat()}", name="/api/v1/seats/?date")
        if resp.status_code == 200:
            for seat in resp.json()["data"]:
                if seat["id"] not in SEAT_IDS:
                    SEAT_IDS.append(seat["id"])

    @tag("read")
    @task(3)
    def seat_detail(self):
        if SEAT_IDS:
            self.client.get(f"/api/v1/seats/{random.choice(SEAT_IDS)}", name="/api/v1/seats/{id}")

    @tag("read")
    @task(3)
    def my_reservations(self):
        if self.headers:
            self.client.get("/api/v1/reservations/", headers=self.headers)

    @tag("read")
    @task(1)
    def health_check(self):
        self.client.get("/health")


class EdgeCaseUser(HttpUser):
    """
    TEST 3: Edge cases - Bad input handling

    Run: locust -f locustfile.py --tags edge -u 20 -r 5 --run-time 30s

    System should NOT crash, return proper error codes.
    """
    wait_time = between(0.5, 1.5)

    def on_start(self):
        self.headers = sign_up(self.client)

    def _expect(self, method, url, codes, **kwargs):
        with self.client.request(method, url, catch_response=True, **kwargs) as resp:
            if resp.status_code in codes:
                resp.success()
            else:
                resp.failure(f"Expected {codes}, got {resp.status_code}")

    @tag("edge")
    @task
    def unknown_seat(self):
        self._expect("POST", "/api/v1/reservations/", (404,),
                     json={"seat_id": 999999, "date": RACE_DATE}, headers=self.headers)

    @tag("edge")
    @task
    def past_date(self):
        if not SEAT_IDS:
            return
        past = (date.today() - timedelta(days=3)).isoformat()
        self._expect("POST", "/api/v1/reservations/", (400, 409),
                     json={"seat_id": random.choice(SEAT_IDS), "date": past}, headers=self.headers)

    @tag("edge")
    @task
    def bad_time_window(self):
        self._expect("POST", "/api/v1/reservations/", (400,),
                     json={"seat_id": 1, "date": RACE_DATE, "start_time": "17:00", "end_time": "09:00"},
                     headers=self.headers)

    @tag("edge")
    @task
    def malformed_json(self):
        self._expect("POST", "/api/v1/reservations/", (400,),
                     data="not json at all",
                     headers={**self.headers, "Content-Type": "application/json"})

    @tag("edge")
    @task
    def missing_auth(self):
        self._expect("POST", "/api/v1/reservations/", (401,),
                     json={"seat_id": 1, "date": RACE_DATE})

    @tag("edge")
    @task
    def admin_only(self):
        self._expect("GET", "/api/v1/admin/stats", (403,), headers=self.headers)


class RealisticUser(HttpUser):
    """
    TEST 4: Realistic mixed workload

    Run: locust -f locustfile.py -u 200 -r 20 --run-time 120s

    Mostly browsing the seat map, some booking, occasional cancelling.
    """
    wait_time = between(1, 3)

    def on_start(self):
        self.headers = sign_up(self.client)
        self.reservation_ids = []

    @task(50)
    def browse_seats(self):
        resp = self.client.get("/api/v1/seats/?available=true")
        if resp.status_code == 200:
            for seat in resp.json()["data"]:
                if seat["id"] not in SEAT_IDS:
                    SEAT_IDS.append(seat["id"])

    @task(10)
    def book_seat(self):
        if not SEAT_IDS or not self.headers:
            return
        day = date.today() + timedelta(days=random.randint(0, 30))
        resp = self.client.post(
            "/api/v1/reservations/",
            json={"seat_id": random.choice(SEAT_IDS), "date": day.isoformat()},
            headers=self.headers,
        )
        if resp.status_code == 201:
            self.reservation_ids.append(resp.json()["data"]["id"])

    @task(3)
    def cancel_booking(self):
        if self.reservation_ids:
            reservation_id = self.reservation_ids.pop()
            self.client.delete(
                f"/api/v1/reservations/{reservation_id}",
                headers=self.headers,
                name="/api/v1/reservations/{id}",
            )
