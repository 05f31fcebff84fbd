import unittest

from fastapi.testclient import TestClient

from main import app


class TestAPI(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def optimize(self, **overrides):
        payload = {
            "stock": {"length": 6.0, "kerfWidth": 3.0, "maxCount": 10},
            "requirements": [{"length": 1.5, "quantity": 5}, {"length": 2.2, "quantity": 3}],
            "jobName": "Corrimão",
        }
        payload.update(overrides)
        return self.client.post("/optimize", json=payload)

    def test_health(self):
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "healthy")

    def test_optimize(self):
        response = self.optimize()
        self.assertEqual(response.status_code, 200)

        data = response.json()
        self.assertTrue(data["success"])
        self.assertEqual(data["jobName"], "Corrimão")
        self.assertEqual(data["metrics"]["stockUsed"], 3)
        self.assertEqual(data["metrics"]["stockTotal"], 10)
        self.assertEqual(data["unplacedCount"], 0)
        self.assertEqual([p["barIndex"] for p in data["patterns"]], [1, 2, 3])
        self.assertIs(data["patterns"][0]["segments"][-1]["isWaste"], True)

    def test_optimize_reports_unplaced(self):
        response = self.optimize(
            stock={"length": 5.0, "kerfWidth": 0, "maxCount": 1},
            requirements=[{"length": 3, "quantity": 2}],
        )
        data = response.json()

        self.assertEqual(response.status_code, 200)
        self.assertEqual(data["unplacedCount"], 1)
        self.assertAlmostEqual(data["metrics"]["efficiency"], 60.0)

    def test_optimize_rejects_invalid_input(self):
        response = self.optimize(requirements=[{"length": 0.001, "quantity": 1}])
        self.assertEqual(response.status_code, 422)

        response = self.optimize(requirements=[{"length": 1, "quantity": 0}])
        self.assertEqual(response.status_code, 422)

    def test_metrics_without_patterns(self):
        response = self.client.post("/metrics", json={
            "stock": {"length": 6.0, "kerfWidth": 3.0, "maxCount": 10},
            "patterns": [],
        })
        data = response.json()

        self.assertEqual(response.status_code, 200)
        self.assertEqual(data["efficiency"], 0.0)
        self.assertFalse(data["hasPatterns"])

    def test_metrics_from_existing_patterns(self):
        patterns = self.optimize().json()["patterns"]
        response = self.client.post("/metrics", json={
            "stock": {"length": 6.0, "kerfWidth": 3.0, "maxCount": 10},
            "patterns": patterns,
        })

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["stockUsed"], 3)

    def test_records_encode_waste_as_integer(self):
        patterns = self.optimize().json()["patterns"]
        response = self.client.post("/records", json={"jobId": 7, "patterns": patterns})
        data = response.json()

        self.assertEqual(response.status_code, 200)
        self.assertEqual([r["jobId"] for r in data["patterns"]], [7, 7, 7])
        self.assertEqual(sorted({r["isWaste"] for r in data["segments"]}), [0, 1])

    def test_generate_report(self):
        report = self.optimize().json()
        response = self.client.post("/report/generate?format=txt", json=report)

        self.assertEqual(response.status_code, 200)
        self.assertIn("Barras Utilizadas: 3 de 10", response.json()["results"]["txt"])

    def test_generate_report_all_formats(self):
        report = self.optimize().json()
        response = self.client.post("/report/generate", json=report)
        results = response.json()["results"]

        self.assertEqual(set(results), {"txt", "csv", "json", "html"})
        self.assertEqual(set(results["csv"]), {"report_padroes", "report_segmentos"})

    def test_generate_report_unknown_format(self):
        report = self.optimize().json()
        response = self.client.post("/report/generate?format=pdf", json=report)
        self.assertEqual(response.status_code, 400)

    def test_example_is_valid_request(self):
        example = self.client.get("/examples").json()
        response = self.client.post("/optimize", json=example)
        self.assertEqual(response.status_code, 200)


if __name__ == '__main__':
    unittest.main()
