import tempfile
import unittest
from pathlib import Path
from unittest import mock

from fastapi.testclient import TestClient

from dndcalc.config import WebConfig
from dndcalc.web import server
from dndcalc.web.app import create_app


class TestWebApi(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        app = create_app(config_path=Path(self._tmp.name) / "config.json")
        self.client = TestClient(app)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_health(self) -> None:
        r = self.client.get("/api/health")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json(), {"ok": True})

    def test_calculate(self) -> None:
        r = self.client.post("/api/calculate", json={"request": "3 д8 + 1", "seed": 4})
        self.assertEqual(r.status_code, 200)
        data = r.json()
        self.assertTrue(data["ok"])
        self.assertEqual(data["normalized"], "3d8+1")
        self.assertEqual(data["result"]["min"], 4)
        self.assertEqual(data["result"]["max"], 25)
        self.assertEqual(data["result"]["average"], 14.5)

    def test_request_is_read_from_json_body(self) -> None:
        # Query parameters are ignored; without a JSON body the call is rejected.
        r = self.client.post("/api/calculate", params={"req": "3d8", "request": "3d8"})
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json()["detail"], "body must be JSON")

    def test_seeded_calls_repeat(self) -> None:
        body = {"request": "5d20", "seed": 11}
        a = self.client.post("/api/calculate", json=body).json()
        b = self.client.post("/api/calculate", json=body).json()
        self.assertEqual(a["result"]["generated"], b["result"]["generated"])

    def test_string_seed(self) -> None:
        a = self.client.post("/api/calculate", json={"request": "5d20", "seed": "7"}).json()
        b = self.client.post("/api/calculate", json={"request": "5d20", "seed": 7}).json()
        self.assertEqual(a["result"]["generated"], b["result"]["generated"])

    def test_long_formula(self) -> None:
        r = self.client.post("/api/calculate", json={"request": "+".join(["1"] * 3000)})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["result"]["max"], 3000)

    def test_formula_error(self) -> None:
        r = self.client.post("/api/calculate", json={"request": "+3"})
        self.assertEqual(r.status_code, 400)
        data = r.json()
        self.assertFalse(data["ok"])
        self.assertEqual(data["kind"], "unary_operator")
        self.assertEqual(data["fragment"], "+")

    def test_bad_body(self) -> None:
        self.assertEqual(self.client.post("/api/calculate", json={"request": 5}).status_code, 400)
        self.assertEqual(self.client.post("/api/calculate", json=[1]).status_code, 400)

    def test_bad_seed(self) -> None:
        for seed in ("x", True, False, 1.5, 2.0, [3], {"n": 1}):
            r = self.client.post("/api/calculate", json={"request": "d6", "seed": seed})
            self.assertEqual(r.status_code, 400, seed)
            self.assertEqual(r.json()["detail"], "seed must be int")


class TestServe(unittest.TestCase):
    def test_runs_uvicorn_with_web_config(self) -> None:
        web = WebConfig(host="127.0.0.1", port=9123, open_browser=False)
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch("uvicorn.run") as run, mock.patch.object(
                server.threading, "Timer"
            ) as timer:
                code = server.serve(web, config_path=Path(tmp) / "config.json", log_level="WARNING")
        self.assertEqual(code, 0)
        timer.assert_not_called()
        run.assert_called_once()
        _, kwargs = run.call_args
        self.assertEqual(kwargs["host"], "127.0.0.1")
        self.assertEqual(kwargs["port"], 9123)
        self.assertEqual(kwargs["log_level"], "warning")

    def test_schedules_browser_open(self) -> None:
        web = WebConfig(host="localhost", port=8080, open_browser=True)
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch("uvicorn.run"), mock.patch.object(server.threading, "Timer") as timer:
                server.serve(web, config_path=Path(tmp) / "config.json")
        timer.assert_called_once_with(
            server.BROWSER_DELAY_S, server.webbrowser.open, args=("http://localhost:8080/docs",)
        )
        timer.return_value.start.assert_called_once()


if __name__ == "__main__":
    unittest.main()
