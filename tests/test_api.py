import os
import sys
import unittest
import uuid
from fastapi.testclient import TestClient
import yaml

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from rest_api import GymAPI


class APITestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.db_path = "test_workout.db"
        self.yaml_path = "test_settings.yaml"
        if os.path.exists(self.db_path):
            os.remove(self.db_path)
        if os.path.exists(self.yaml_path):
            os.remove(self.yaml_path)
        self.api = GymAPI(db_path=self.db_path, yaml_path=self.yaml_path)
        self.client = TestClient(self.api.app)

    def tearDown(self) -> None:
        if os.path.exists(self.db_path):
            os.remove(self.db_path)
        if os.path.exists(self.yaml_path):
            os.remove(self.yaml_path)

    def _log(self, weight: float = 100) -> str:
        self.client.post(
            "/draft", params={"workout_type": "Upper", "exercises": ["Bench Press", "Dips"]}
        )
        self.client.post("/draft/exercises/0/sets", params={"weight": weight, "reps": 5})
        return self.client.post("/draft/finish").json()["id"]

    def test_health_and_types(self) -> None:
        self.assertEqual(self.client.get("/health").json(), {"status": "ok"})
        self.assertEqual(
            self.client.get("/workout_types").json(),
            ["Upper", "Lower", "Push", "Pull", "Legs"],
        )

    def test_full_workflow(self) -> None:
        response = self.client.get(
            "/exercises/available",
            params={"workout_type": "Pull", "exclude": ["Rows", "Pull ups"]},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json(),
            ["Preacher Curl", "Hammer Curl", "Forearm Curls", "Reverse Curls"],
        )

        response = self.client.post(
            "/draft", params={"workout_type": "Pull", "exercises": ["Rows", "Pull ups"]}
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["state"], "active")
        self.assertEqual(
            [ex["name"] for ex in response.json()["exercises"]], ["Rows", "Pull ups"]
        )

        response = self.client.post("/draft/exercises", params={"name": "Shrugs"})
        self.assertEqual(response.json(), {"status": "added"})
        response = self.client.post("/draft/exercises", params={"name": "Rows"})
        self.assertEqual(response.json(), {"status": "unchanged"})

        response = self.client.post(
            "/draft/exercises/0/sets", params={"weight": 90, "reps": 10}
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"weight": 90.0, "reps": 10})
        self.client.post("/draft/exercises/2/sets", params={"weight": 60, "reps": 12})

        response = self.client.get("/draft/exercises/0/quick_weights")
        self.assertEqual(response.json()[0], 70.0)
        self.assertEqual(response.json()[-1], 110.0)

        response = self.client.post("/draft/finish", params={"save": True})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "saved")
        workout_id = response.json()["id"]
        self.assertEqual(self.client.get("/draft").status_code, 404)

        response = self.client.get("/workouts")
        self.assertEqual(len(response.json()), 1)
        summary = response.json()[0]
        self.assertEqual(summary["id"], workout_id)
        self.assertEqual(summary["type"], "Pull")
        self.assertEqual(summary["exercises"], 2)
        self.assertEqual(summary["total_sets"], 2)
        self.assertEqual(summary["max_weight"], 90.0)

        detail = self.client.get(f"/workouts/{workout_id}").json()
        self.assertEqual([ex["name"] for ex in detail["exercises"]], ["Rows", "Shrugs"])

        api2 = GymAPI(db_path=self.db_path, yaml_path=self.yaml_path)
        self.assertEqual(len(api2.tracker.list_sessions()), 1)

    def test_draft_names_keep_separator_characters(self) -> None:
        self.client.post(
            "/custom_exercises", params={"workout_type": "Push", "name": "Press | Incline"}
        )
        response = self.client.post(
            "/draft",
            params={"workout_type": "Push", "exercises": ["Press | Incline", "Dips"]},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            [ex["name"] for ex in response.json()["exercises"]],
            ["Press | Incline", "Dips"],
        )

    def test_discard_and_empty_save(self) -> None:
        self.client.post("/draft", params={"workout_type": "Legs", "exercises": "Squats"})
        response = self.client.post("/draft/finish", params={"save": True})
        self.assertEqual(response.json(), {"status": "discarded", "id": None})
        self.client.post("/draft", params={"workout_type": "Legs", "exercises": "Squats"})
        self.client.post("/draft/exercises/0/sets", params={"weight": 200, "reps": 5})
        response = self.client.post("/draft/finish", params={"save": False})
        self.assertEqual(response.json()["status"], "discarded")
        self.assertEqual(self.client.get("/workouts").json(), [])

    def test_error_codes(self) -> None:
        response = self.client.post(
            "/draft", params={"workout_type": "Cardio", "exercises": "Run"}
        )
        self.assertEqual(response.status_code, 400)
        response = self.client.post(
            "/draft", params={"workout_type": "Upper", "exercises": [" "]}
        )
        self.assertEqual(response.status_code, 409)
        self.assertEqual(self.client.post("/draft/finish").status_code, 409)

        self.client.post("/draft", params={"workout_type": "Upper", "exercises": "Dips"})
        response = self.client.post(
            "/draft", params={"workout_type": "Push", "exercises": "Dips"}
        )
        self.assertEqual(response.status_code, 409)
        response = self.client.post(
            "/draft/exercises/0/sets", params={"weight": -5, "reps": 5}
        )
        self.assertEqual(response.status_code, 400)
        response = self.client.post(
            "/draft/exercises/0/sets", params={"weight": 10.25, "reps": 5}
        )
        self.assertEqual(response.status_code, 400)
        response = self.client.post(
            "/draft/exercises/0/sets", params={"weight": 10, "reps": 0}
        )
        self.assertEqual(response.status_code, 400)
        response = self.client.post(
            "/draft/exercises/4/sets", params={"weight": 10, "reps": 5}
        )
        self.assertEqual(response.status_code, 404)
        self.assertEqual(self.client.get("/draft").json()["exercises"][0]["sets"], [])

        self.assertEqual(self.client.get(f"/workouts/{uuid.uuid4()}").status_code, 404)
        self.assertEqual(self.client.get("/workouts/abc").status_code, 404)
        self.assertEqual(self.client.delete("/workouts/abc").status_code, 404)
        self.assertEqual(self.client.get("/edit").status_code, 404)

    def test_delete_keeps_order(self) -> None:
        first = self._log(100)
        second = self._log(110)
        third = self._log(120)
        response = self.client.delete(f"/workouts/{second}")
        self.assertEqual(response.json(), {"status": "deleted"})
        ids = [w["id"] for w in self.client.get("/workouts").json()]
        self.assertEqual(ids, [first, third])
        newest = self.client.get("/workouts", params={"newest_first": True}).json()
        self.assertEqual(len(newest), 2)
        self.assertEqual(len(self.client.get("/workouts/recent").json()), 2)

    def test_edit_flow(self) -> None:
        workout_id = self._log(100)
        original = self.client.get(f"/workouts/{workout_id}").json()

        response = self.client.post(f"/workouts/{workout_id}/edit")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["id"], workout_id)

        response = self.client.put(
            "/edit/exercises/0/sets/0", params={"weight": 105, "reps": 5}
        )
        self.assertEqual(response.json(), {"weight": 105.0, "reps": 5})
        self.client.post("/edit/exercises", params={"name": "Dips"})
        self.client.post("/edit/exercises/1/sets", params={"weight": 0, "reps": 12})
        self.client.post("/edit/exercises/1/sets", params={"weight": 10, "reps": 8})
        self.client.delete("/edit/exercises/1/sets/0")
        self.assertEqual(
            self.client.put(
                "/edit/exercises/0/sets/9", params={"weight": 105, "reps": 5}
            ).status_code,
            404,
        )

        response = self.client.post("/edit/save")
        self.assertEqual(response.status_code, 200)
        saved = response.json()
        self.assertEqual(saved["id"], workout_id)
        self.assertEqual(saved["date"], original["date"])
        self.assertEqual(saved["type"], "Upper")
        self.assertEqual(saved["exercises"][0]["sets"], [{"weight": 105.0, "reps": 5}])
        self.assertEqual(saved["exercises"][1]["sets"], [{"weight": 10.0, "reps": 8}])
        self.assertEqual(self.client.get("/edit").status_code, 404)

    def test_edit_cancel_and_empty_save(self) -> None:
        workout_id = self._log(100)
        self.client.post(f"/workouts/{workout_id}/edit")
        self.client.delete("/edit/exercises/0")
        self.assertEqual(self.client.post("/edit/save").status_code, 400)
        self.assertEqual(self.client.post("/edit/cancel").json(), {"status": "cancelled"})
        detail = self.client.get(f"/workouts/{workout_id}").json()
        self.assertEqual(detail["exercises"][0]["sets"], [{"weight": 100.0, "reps": 5}])

    def test_custom_exercises(self) -> None:
        response = self.client.post(
            "/custom_exercises", params={"workout_type": "Push", "name": " Cable Crossover "}
        )
        self.assertEqual(response.json(), {"status": "added"})
        response = self.client.post(
            "/custom_exercises", params={"workout_type": "Push", "name": "Dips"}
        )
        self.assertEqual(response.json(), {"status": "unchanged"})
        self.assertEqual(
            self.client.get("/custom_exercises").json(), {"Push": ["Cable Crossover"]}
        )
        names = self.client.get(
            "/exercises/available", params={"workout_type": "Push"}
        ).json()
        self.assertEqual(names[-1], "Cable Crossover")

        response = self.client.delete("/custom_exercises/Push/Cable Crossover")
        self.assertEqual(response.json(), {"status": "deleted"})
        response = self.client.delete("/custom_exercises/Push/Cable Crossover")
        self.assertEqual(response.status_code, 404)
        response = self.client.delete("/custom_exercises/Cardio/Run")
        self.assertEqual(response.status_code, 400)

    def test_stats(self) -> None:
        self._log(100)
        self._log(120)
        overview = self.client.get("/stats/overview").json()
        self.assertEqual(overview["workouts"], 2)
        self.assertEqual(overview["total_sets"], 2)
        self.assertEqual(overview["max_weight"], 120.0)
        self.assertEqual(self.client.get("/stats/exercises").json(), ["Bench Press"])
        progression = self.client.get(
            "/stats/progression", params={"exercise": "Bench Press"}
        ).json()
        self.assertEqual([p["weight"] for p in progression["points"]], [100.0, 120.0])
        self.assertEqual(progression["label"], "+20")

    def test_settings_file_applies(self) -> None:
        with open(self.yaml_path, "w", encoding="utf-8") as f:
            yaml.safe_dump({"quick_add_range": 5, "quick_add_step": 5}, f)
        api = GymAPI(db_path=self.db_path, yaml_path=self.yaml_path)
        client = TestClient(api.app)
        client.post("/draft", params={"workout_type": "Upper", "exercises": "Dips"})
        client.post("/draft/exercises/0/sets", params={"weight": 50, "reps": 5})
        self.assertEqual(
            client.get("/draft/exercises/0/quick_weights").json(), [45.0, 50.0, 55.0]
        )


if __name__ == "__main__":
    unittest.main()
