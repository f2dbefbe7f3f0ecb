"""Load test: a class of students answering the same votes at once.

Usage:
    LOCUST_HOST=http://127.0.0.1:8000 locust -f locustfile.py
"""
from locust import HttpUser, task, between, events
import itertools
import os
import random
import requests

EXPECTED_VOTERS = int(os.getenv("LOCUST_EXPECTED_VOTERS", "1000"))
ADMIN_CODE = "1234"

# Filled in by on_test_start: [{"id": ..., "vote_type": ..., "options": [...]}]
VOTES = []
_attendance_numbers = itertools.count(1)


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    base_url = os.getenv("LOCUST_HOST") or environment.host

    print("Seeding test votes...")
    definitions = [
        {"title": "Load test yes/no", "vote_type": "yes_no"},
        {
            "title": "Load test choice",
            "vote_type": "multiple_choice",
            "options": ["A", "B", "C", "D"],
            "allow_multiple_selections": True,
        },
        {"title": "Load test free text", "vote_type": "free_text", "visibility_setting": "anonymous"},
    ]
    for definition in definitions:
        response = requests.post(
            f"{base_url}/api/v1/votes",
            json={"admin_password": ADMIN_CODE, "total_expected_voters": EXPECTED_VOTERS, **definition},
        )
        if response.status_code != 200:
            raise RuntimeError(f"Failed to create vote in test setup: {response.status_code} {response.text}")
        VOTES.append(response.json()["vote"])


class StudentUser(HttpUser):
    wait_time = between(1, 2)

    def on_start(self):
        self.attendance_number = next(_attendance_numbers)
        self.client.get("/api/v1/votes", name="GET /api/v1/votes")

    def _answer(self, vote):
        if vote["vote_type"] == "yes_no":
            return random.choice(["yes", "no"])
        if vote["vote_type"] == "multiple_choice":
            ids = [option["id"] for option in vote["options"]]
            return random.sample(ids, k=random.randint(1, len(ids)))
        return random.choice(["楽しかった", "難しかった", "もっと時間がほしい"])

    @task
    def submit_and_request_reset(self):
        if not VOTES or self.attendance_number > EXPECTED_VOTERS:
            return

        vote = random.choice(VOTES)
        with self.client.post(
            f"/api/v1/votes/{vote['id']}/submissions",
            json={"attendance_number": self.attendance_number, "value": self._answer(vote)},
            name="POST /api/v1/votes/<vote_id>/submissions",
            catch_response=True
        ) as response:
            # Already voted is expected after the first round
            if response.status_code in (200, 400):
                response.success()
            else:
                response.failure(f"Submission failed for vote {vote['id']}  {response.text}")
                return

        self.client.get(
            f"/api/v1/votes/{vote['id']}/results",
            name="GET /api/v1/votes/<vote_id>/results",
        )


class OrganizerUser(HttpUser):
    wait_time = between(2, 3)
    weight = 1

    def on_start(self):
        self.logged_in = set()

    @task
    def watch_admin_panel(self):
        if not VOTES:
            return
        vote = random.choice(VOTES)
        if vote["id"] not in self.logged_in:
            self.client.cookies.clear()
            self.logged_in = set()
            response = self.client.post(
                f"/api/v1/votes/{vote['id']}/admin/login",
                json={"password": ADMIN_CODE},
                name="POST /api/v1/votes/<vote_id>/admin/login",
            )
            if response.status_code != 200:
                return
            self.logged_in.add(vote["id"])

        self.client.get(f"/api/v1/votes/{vote['id']}/admin", name="GET /api/v1/votes/<vote_id>/admin")
