import dataclasses
import json
import sys
import unittest
from pathlib import Path
from unittest.mock import patch

from fastapi.testclient import TestClient

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from ats_optimizer.ai.types import AIProviderError  # noqa: E402
from ats_optimizer.core.config import settings  # noqa: E402
from ats_optimizer.core.rate_limit import limiter  # noqa: E402
from ats_optimizer.main import app  # noqa: E402

FIXTURE = Path(__file__).resolve().parent / "fixtures" / "analysis_result.json"


class FakeClient:
    provider = "fake"
    model = "fake-model"

    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error

    async def generate_json(self, messages, *, response_schema=None):
        if self.error is not None:
            raise self.error
        return self.reply


def _parse_sse(body: str) -> list[tuple[str, dict]]:
    events = []
    for block in body.strip().split("\n\n"):
        lines = block.splitlines()
        name = lines[0].removeprefix("event: ")
        data = json.loads(lines[1].removeprefix("data: "))
        events.append((name, data))
    return events


class ScanApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls._limiter_enabled = limiter.enabled
        limiter.enabled = False
        cls.client = TestClient(app)
        cls.payload = {
            "job_description": "Backend engineer with Python, SQL, Docker and Java. Strong communication.",
            "resume_text": "Jane Doe\nSQL and Docker on AWS. Led a team of five.",
            "language": "en",
        }

    @classmethod
    def tearDownClass(cls):
        limiter.enabled = cls._limiter_enabled

    def _patch_client(self, client):
        return patch("ats_optimizer.services.analysis_service.get_ai_client", return_value=client)

    def test_health(self):
        response = self.client.get("/v1/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "healthy"})

    def test_scan_contract_shape(self):
        with self._patch_client(FakeClient(reply=FIXTURE.read_text(encoding="utf-8"))):
            response = self.client.post("/v1/scan", json=self.payload)
        self.assertEqual(response.status_code, 200)
        body = response.json()

        self.assertEqual(body["original_score"], 58)
        self.assertEqual(body["optimized_score"], 89)
        self.assertEqual(body["original_color"], "red")
        self.assertEqual(body["optimized_color"], "yellow")
        self.assertEqual(body["section_ratios"]["hard_skills"], 0.5)
        self.assertEqual(body["optimized_section_ratios"]["searchability"], 1.0)
        self.assertEqual(
            [(s["id"], s["issues"]) for s in body["sections"]],
            [("searchability", 1), ("hard-skills", 2), ("soft-skills", 1), ("recruiter-tips", 1)],
        )
        self.assertIn("hardSkills", body["report"])
        self.assertEqual(body["report"]["hardSkills"]["skills"][0]["resumeCount"], -1)
        self.assertEqual(body["original_resume"], self.payload["resume_text"])
        joined = "".join(segment["text"] for segment in body["highlighted_resume"])
        self.assertEqual(joined, body["optimized_resume"])
        self.assertIn("generated_at", body)

    def test_scan_requires_both_texts(self):
        payload = dict(self.payload)
        payload["resume_text"] = "   \n"
        response = self.client.post("/v1/scan", json=payload)
        self.assertEqual(response.status_code, 422)
        self.assertIn("Please provide both a resume and a job description.", response.text)

    def test_scan_rejects_unknown_language(self):
        payload = dict(self.payload)
        payload["language"] = "de"
        response = self.client.post("/v1/scan", json=payload)
        self.assertEqual(response.status_code, 422)

    def test_invalid_model_output_returns_502(self):
        with self._patch_client(FakeClient(reply="not json at all")):
            response = self.client.post("/v1/scan", json=self.payload)
        self.assertEqual(response.status_code, 502)
        self.assertIn("invalid analysis structure", response.json()["detail"])

    def test_bad_credentials_return_503(self):
        with self._patch_client(FakeClient(error=AIProviderError("API_KEY_INVALID", auth_failed=True))):
            response = self.client.post("/v1/scan", json=self.payload)
        self.assertEqual(response.status_code, 503)
        self.assertIn("Invalid API Key provided.", response.json()["detail"])

    def test_shared_api_key_is_enforced(self):
        protected = dataclasses.replace(settings, api_key="secret-key")
        payload = dict(self.payload)
        payload["language"] = "pt"
        with patch("ats_optimizer.core.security.settings", protected):
            response = self.client.post("/v1/scan", json=payload)
            self.assertEqual(response.status_code, 401)
            self.assertIn("chave de API", response.json()["detail"])

            with self._patch_client(FakeClient(reply=FIXTURE.read_text(encoding="utf-8"))):
                response = self.client.post("/v1/scan", json=payload, headers={"X-API-Key": "secret-key"})
            self.assertEqual(response.status_code, 200)

    def test_scan_stream_emits_progress_then_result(self):
        with self._patch_client(FakeClient(reply=FIXTURE.read_text(encoding="utf-8"))):
            response = self.client.post("/v1/scan/stream", json=self.payload)
        self.assertEqual(response.status_code, 200)
        events = _parse_sse(response.text)
        names = [name for name, _ in events]
        self.assertEqual(names[0], "connected")
        self.assertEqual(names[-1], "result")
        progress = [data["progress"] for name, data in events if name == "progress"]
        self.assertEqual(progress, [5, 15, 90, 100])
        self.assertEqual(events[-1][1]["optimized_score"], 89)

    def test_scan_stream_reports_errors(self):
        with self._patch_client(FakeClient(error=AIProviderError("boom"))):
            response = self.client.post("/v1/scan/stream", json=self.payload)
        events = _parse_sse(response.text)
        self.assertEqual(events[-1][0], "error")
        self.assertEqual(events[-1][1]["status"], 503)

    def test_score_endpoint_without_model_call(self):
        fixture = json.loads(FIXTURE.read_text(encoding="utf-8"))
        response = self.client.post(
            "/v1/score",
            json={"report": fixture["report"], "optimized_resume": fixture["optimizedResume"]},
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["original_score"], 58)
        self.assertEqual(body["optimized_score"], 89)
        highlighted = [s["text"] for s in body["highlighted_resume"] if s["highlighted"]]
        self.assertEqual(highlighted, ["Python", "SQL", "Docker", "communication"])


class RateLimitTests(unittest.TestCase):
    def test_scan_rate_limit_returns_429(self):
        if not settings.rate_limit_enabled:
            self.skipTest("rate limiting disabled by environment")
        client = TestClient(app)
        payload = {"job_description": "Python developer", "resume_text": "Python, SQL", "language": "en"}
        previous = limiter.enabled
        limiter.enabled = True
        limiter.reset()
        try:
            status_codes = []
            reply = FakeClient(reply=FIXTURE.read_text(encoding="utf-8"))
            with patch("ats_optimizer.services.analysis_service.get_ai_client", return_value=reply):
                for _ in range(25):
                    status_codes.append(client.post("/v1/scan", json=payload).status_code)
        finally:
            limiter.reset()
            limiter.enabled = previous
        self.assertIn(200, status_codes)
        self.assertIn(429, status_codes)


if __name__ == "__main__":
    unittest.main()
