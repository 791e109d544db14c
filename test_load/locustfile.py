from locust import HttpUser, task, between
import random

class LoadTest(HttpUser):
    wait_time = between(1, 2)

    @task(3)
    def get_explore(self):
        offset = random.randint(0, 10) * 20
        limit = random.choice([10, 20, 50])

        self.client.get(
            "/api/posts/explore",
            params={"limit": limit, "offset": offset},
            headers={"accept": "application/json"},
            name="/api/posts/explore"
        )

    @task(1)
    def search_users(self):
        query = random.choice(["a", "an", "jo", "li"])
        self.client.get(
            f"/api/users/search/{query}",
            headers={"accept": "application/json"},
            name="/api/users/search/[query]"
        )
