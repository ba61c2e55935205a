"""
Locust Load Test Suite for the seat inventory service

Start the service first:
  INVENTORY_ROWS=10 INVENTORY_COLS=20 uvicorn seatbooking.inventory.app:app --port 8080

Run scenarios:
  locust -f locustfile.py --host http://localhost:8080 --tags contention  # Many patrons, one seat
  locust -f locustfile.py --host http://localhost:8080 --tags throughput  # Layout reads
  locust -f locustfile.py --host http://localhost:8080 --tags edge        # Bad input
  locust -f locustfile.py --host http://localhost:8080                    # All tests
"""

import random
import string

from locust import HttpUser, between, events, tag, task

CONTESTED_SEAT = "A1"
SEAT_CODES = []


def random_email():
    return f"load_{random.randint(10000, 99999)}@x.com"


def random_username():
    return "u_" + "".join(random.choices(string.ascii_lowercase, k=8))


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    print("\n" + "=" * 60)
    print(f"Contention scenario targets seat {CONTESTED_SEAT}")
    print("=" * 60)


class ContentionUser(HttpUser):
    """
    TEST 1: Contention - every user fights for the same seat

    Run: locust -f locustfile.py --tags contention -u 100 -r 50 --run-time 30s

    After test, verify:
      GET /seats/a1 shows exactly one ticket, and the locust stats show
      at most one 201 for POST /book [contested].
    """
    wait_time = between(0, 0.1)

    @tag("contention")
    @task
    def book_contested_seat(self):
        with self.client.post("/book",
            json={"seatCode": CONTESTED_SEAT, "username": random_username(), "email": random_email()},
            name="/book [contested]",
            catch_response=True
        ) as resp:
            if resp.status_code in (201, 409):
                resp.success()  # 409 expected: already taken
            else:
                resp.failure(f"Unexpected: {resp.status_code}")


class ThroughputUser(HttpUser):
    """
    TEST 2: Throughput - layout snapshots are fetched on every page load
    and after every booking, so they dominate read traffic.

    Run: locust -f locustfile.py --tags throughput -u 100 -r 20 --run-time 60s
    """
    wait_time = between(0.1, 0.5)

    @tag("throughput", "read")
    @task(10)
    def get_layout(self):
        resp = self.client.get("/layout")
        if resp.status_code == 200 and not SEAT_CODES:
            SEAT_CODES.extend(key.upper() for key in resp.json()["seats"])

    @tag("throughput", "read")
    @task(3)
    def get_seat(self):
        if SEAT_CODES:
            self.client.get(f"/seats/{random.choice(SEAT_CODES)}", name="/seats/{code}")


class EdgeCaseUser(HttpUser):
    """
    TEST 3: Edge cases - Bad input handling

    Run: locust -f locustfile.py --tags edge -u 20 -r 5 --run-time 30s

    Service should NOT crash, return proper error codes.
    """
    wait_time = between(0.5, 1.5)

    def _expect(self, resp, codes):
        if resp.status_code in codes:
            resp.success()
        else:
            resp.failure(f"Expected {codes}, got {resp.status_code}")

    @tag("edge")
    @task
    def unknown_seat(self):
        with self.client.post("/book",
            json={"seatCode": "ZZ999", "username": random_username(), "email": random_email()},
            name="/book [unknown seat]",
            catch_response=True
        ) as resp:
            self._expect(resp, (404,))

    @tag("edge")
    @task
    def invalid_email(self):
        with self.client.post("/book",
            json={"seatCode": "A2", "username": random_username(), "email": "not-an-email"},
            name="/book [invalid email]",
            catch_response=True
        ) as resp:
            self._expect(resp, (422,))

    @tag("edge")
    @task
    def malformed_json(self):
        with self.client.post("/book",
            data="not json at all",
            name="/book [malformed]",
            catch_response=True
        ) as resp:
            self._expect(resp, (400, 422))

    @tag("edge")
    @task
    def cancel_unknown_ticket(self):
        with self.client.delete("/book/TICKET-00000000-000000-XXXXX",
            name="/book/{ticket} [unknown]",
            catch_response=True
        ) as resp:
            self._expect(resp, (404,))


class RealisticUser(HttpUser):
    """
    TEST 4: Realistic patron behaviour

    Run: locust -f locustfile.py -u 200 -r 20 --run-time 120s

    Load the layout, book a random free seat, reload, sometimes cancel.
    """
    wait_time = between(1, 3)

    def on_start(self):
        self.tickets = []

    @task(10)
    def browse(self):
        self.client.get("/layout")

    @task(4)
    def book_free_seat(self):
        resp = self.client.get("/layout")
        if resp.status_code != 200:
            return
        free = [key for key, value in resp.json()["seats"].items() if value == "available"]
        if not free:
            return
        with self.client.post("/book",
            json={"seatCode": random.choice(free).upper(), "username": random_username(), "email": random_email()},
            name="/book",
            catch_response=True
        ) as book:
            if book.status_code == 201:
                self.tickets.append(book.json()["ticket"])
                book.success()
            elif book.status_code == 409:
                book.success()  # lost a race with another user
            else:
                book.failure(f"Unexpected: {book.status_code}")
        self.client.get("/layout")

    @task(1)
    def cancel_ticket(self):
        if self.tickets:
            ticket = self.tickets.pop(random.randrange(len(self.tickets)))
            self.client.delete(f"/book/{ticket}", name="/book/{ticket}")
