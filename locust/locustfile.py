"""
Locust Load Test Suite

Run scenarios:
  locust -f locustfile.py --tags concurrency  # Oversell check on the confirm endpoint
  locust -f locustfile.py --tags throughput   # Event listing cache
  locust -f locustfile.py --tags edge         # Bad input
  locust -f locustfile.py                     # All tests
"""

import random
import string
from datetime import date, timedelta

from locust import HttpUser, between, events, tag, task

# Shared state
EVENT_IDS = []
CONCURRENCY_EVENT_ID = None
CONCURRENCY_TICKETS = 10


def random_email():
    suffix = "".join(random.choices(string.ascii_lowercase, k=8))
    return f"load_{suffix}@loadtest.io"


def register(client):
    """Register a throwaway account; returns bearer headers or {}."""
    resp = client.post("/api/v1/auth/register", json={
        "email": random_email(),
        "password": "loadtest123",
    })
    if resp.status_code == 201:
        return {"Authorization": f"Bearer {resp.json()['token']}"}
    return {}


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    print("\n" + "=" * 60)
    print(f"SETUP: concurrency event gets {CONCURRENCY_TICKETS} tickets")
    print("=" * 60)


class ConcurrencyUser(HttpUser):
    """
    TEST 1: Concurrency - 100 users -> 10 tickets

    Run: locust -f locustfile.py --tags concurrency -u 100 -r 50 --run-time 30s

    After test, verify:
      SELECT tickets FROM events WHERE id = X;          -- 0, never negative
      SELECT SUM(quantity) FROM bookings WHERE event_id = X;  -- exactly 10
    """
    wait_time = between(0, 0.1)

    def on_start(self):
        self.headers = register(self.client)

        if not CONCURRENCY_EVENT_ID:
            resp = self.client.post("/api/v1/admin/events", json={
                "name": f"Concurrency Test {random.randint(1, 10**6)}",
                "date": (date.today() + timedelta(days=30)).isoformat(),
                "tickets": CONCURRENCY_TICKETS,
            })
            if resp.status_code == 201:
                globals()["CONCURRENCY_EVENT_ID"] = resp.json()["event"]["id"]
                print(f"\nCreated event {CONCURRENCY_EVENT_ID} with {CONCURRENCY_TICKETS} tickets\n")

    @tag("concurrency")
    @task
    def confirm_last_tickets(self):
        """All users fight for the same 10 tickets."""
        if not CONCURRENCY_EVENT_ID or not self.headers:
            return

        with self.client.post(
            "/api/v1/bookings/confirm",
            json={"eventId": CONCURRENCY_EVENT_ID, "tickets": 1},
            headers=self.headers,
            catch_response=True,
        ) as resp:
            if resp.status_code == 200:
                resp.success()
            elif resp.status_code == 400 and resp.json().get("kind") == "InsufficientInventory":
                resp.success()  # Expected: sold out
            else:
                resp.failure(f"Unexpected: {resp.status_code}")


class ThroughputUser(HttpUser):
    """
    TEST 2: Throughput - Cache effectiveness

    Run twice:
      1. With Redis: locust -f locustfile.py --tags throughput -u 100 -r 20 --run-time 60s
      2. Without Redis: REDIS_ENABLED=false, run again
    """
    wait_time = between(0.1, 0.5)

    @tag("throughput", "read")
    @task(10)
    def list_events_cached(self):
        resp = self.client.get("/api/v1/events", name="/api/v1/events [cached]")
        if resp.status_code == 200:
            for event in resp.json().get("events", []):
                if event["id"] not in EVENT_IDS:
                    EVENT_IDS.append(event["id"])

    @tag("throughput", "read")
    @task(3)
    def get_event_detail(self):
        if EVENT_IDS:
            self.client.get(f"/api/v1/events/{random.choice(EVENT_IDS)}", name="/api/v1/events/{id}")

    @tag("throughput")
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
        self.headers = register(self.client)

    def _expect(self, payload, codes, headers=None):
        with self.client.post(
            "/api/v1/bookings/confirm",
            json=payload,
            headers=self.headers if headers is None else headers,
            catch_response=True,
        ) as resp:
            if resp.status_code in codes:
                resp.success()
            else:
                resp.failure(f"Expected {codes}, got {resp.status_code}")

    @tag("edge")
    @task
    def unknown_event(self):
        self._expect({"eventId": 999999, "tickets": 1}, [404])

    @tag("edge")
    @task
    def negative_tickets(self):
        self._expect({"eventId": 1, "tickets": -5}, [400])

    @tag("edge")
    @task
    def zero_tickets(self):
        self._expect({"eventId": 1, "tickets": 0}, [400])

    @tag("edge")
    @task
    def huge_request(self):
        self._expect({"eventId": 1, "tickets": 999999}, [400, 404])

    @tag("edge")
    @task
    def non_numeric_event(self):
        self._expect({"eventId": "abc", "tickets": 1}, [400])

    @tag("edge")
    @task
    def malformed_json(self):
        with self.client.post(
            "/api/v1/bookings/confirm",
            data="not json at all",
            headers=self.headers,
            catch_response=True,
        ) as resp:
            if resp.status_code in [400, 422]:
                resp.success()
            else:
                resp.failure(f"Expected 400/422, got {resp.status_code}")

    @tag("edge")
    @task
    def missing_auth(self):
        self._expect({"eventId": 1, "tickets": 1}, [401], headers={})


class RealisticUser(HttpUser):
    """
    TEST 4: Realistic mixed workload

    Run: locust -f locustfile.py -u 200 -r 20 --run-time 120s

    Mostly browsing, some chat parsing, occasional bookings.
    """
    wait_time = between(1, 3)

    def on_start(self):
        self.headers = register(self.client)

    @task(50)
    def browse_events(self):
        resp = self.client.get("/api/v1/events")
        if resp.status_code == 200:
            for event in resp.json().get("events", []):
                if event["id"] not in EVENT_IDS:
                    EVENT_IDS.append(event["id"])

    @task(20)
    def view_event(self):
        if EVENT_IDS:
            self.client.get(f"/api/v1/events/{random.choice(EVENT_IDS)}", name="/api/v1/events/{id}")

    @task(10)
    def chat_then_book(self):
        """Parse a chat message, then confirm what it prepared."""
        resp = self.client.post("/api/v1/llm/parse", json={"text": "show events"})
        if resp.status_code != 200 or not self.headers:
            return
        listed = resp.json().get("events") or []
        if not listed:
            return

        target = random.choice(listed)
        resp = self.client.post("/api/v1/llm/parse", json={
            "text": f"book {random.randint(1, 3)} tickets for {target['name']}",
        })
        parsed = resp.json() if resp.status_code == 200 else {}
        if parsed.get("needsConfirmation"):
            self.client.post(
                "/api/v1/bookings/confirm",
                json={"eventId": parsed["eventId"], "tickets": parsed["tickets"]},
                headers=self.headers,
            )

    @task(5)
    def purchase_one(self):
        if EVENT_IDS and self.headers:
            self.client.post(
                f"/api/v1/events/{random.choice(EVENT_IDS)}/purchase",
                headers=self.headers,
                name="/api/v1/events/{id}/purchase",
            )
