import pytest
from fastapi.testclient import TestClient
from unittest.mock import patch

from resumematch.models.models import JobProfile, StructuredProfile


@pytest.fixture
def test_app():
    from resumematch.main import app
    return app


@pytest.fixture
def client(test_app):
    return TestClient(test_app)


def dump(model):
    return model.model_dump(mode="json")


class TestServiceEndpoints:
    """Root and health"""

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_health(self, client):
        response = client.get("/health")
        data = response.json()

        assert response.status_code == 200
        assert data["status"] == "healthy"
        assert data["vocabulary_version"]
        assert "X-Request-ID" in response.headers
        assert "X-Processing-Time" in response.headers


class TestParseEndpoint:
    """POST /api/parse"""

    def test_parse_resume(self, client, sample_text):
        response = client.post("/api/parse", json={"raw_text": sample_text, "resume_id": "cv-42"})
        data = response.json()

        assert response.status_code == 200
        assert data["id"] == "cv-42"
        assert data["personal_info"]["name"] == "John Smith"
        assert len(data["experience"]) == 2
        assert data["raw_text"] == sample_text

    def test_blank_text_rejected(self, client):
        response = client.post("/api/parse", json={"raw_text": "   "})
        data = response.json()

        assert response.status_code == 400
        assert data["success"] is False
        assert data["error"]["error_code"] == "VALIDATION_ERROR"
        assert data["request_id"] == response.headers["X-Request-ID"]

    def test_missing_field(self, client):
        response = client.post("/api/parse", json={})
        assert response.status_code == 422


class TestMatchEndpoints:
    """POST /api/match/*"""

    def test_score(self, client, python_resume, backend_job):
        response = client.post("/api/match/score", json={"resume": dump(python_resume), "job": dump(backend_job)})
        data = response.json()

        assert response.status_code == 200
        assert data["overall_score"] == 40
        assert data["breakdown"] == {"semantic": 0, "skills": 50, "experience": 100, "keywords": 50}
        assert data["embedding_missing"] is True
        assert data["missing_skills"] == ["docker"]

    @patch("resumematch.services.pipeline.ollama_embed", return_value=[0.3, 0.4])
    def test_score_with_embeddings(self, mock_embed, client, python_resume, backend_job):
        response = client.post("/api/match/score", json={
            "resume": dump(python_resume),
            "job": dump(backend_job),
            "generate_embeddings": True,
        })
        data = response.json()

        assert response.status_code == 200
        assert data["breakdown"]["semantic"] == 100
        assert data["embedding_missing"] is False
        assert data["overall_score"] == 80
        assert mock_embed.call_count == 2

    @patch("resumematch.services.pipeline.ollama_embed", side_effect=RuntimeError("provider down"))
    def test_score_survives_provider_failure(self, mock_embed, client, python_resume, backend_job):
        response = client.post("/api/match/score", json={
            "resume": dump(python_resume),
            "job": dump(backend_job),
            "generate_embeddings": True,
        })
        assert response.status_code == 200
        assert response.json()["embedding_missing"] is True

    def test_match_jobs(self, client, python_resume, backend_job):
        cloud_job = JobProfile(
            id="j-2",
            title="Cloud Developer",
            description="Python on AWS",
            skills=["python", "aws"],
            experience_level="mid",
        )
        response = client.post("/api/match/jobs", json={
            "resume": dump(python_resume),
            "jobs": [dump(backend_job), dump(cloud_job)],
            "min_score": 0,
        })
        data = response.json()

        assert response.status_code == 200
        assert data["total_considered"] == 2
        assert [m["job_id"] for m in data["matches"]] == ["j-2", "j-1"]
        assert data["summary"]["top_score"] == data["matches"][0]["overall_score"]

    def test_match_candidates(self, client, python_resume, backend_job):
        weak = StructuredProfile(id="r-2", raw_text="Gardener")
        response = client.post("/api/match/candidates", json={
            "job": dump(backend_job),
            "resumes": [dump(weak), dump(python_resume)],
            "min_score": 0,
            "limit": 1,
        })
        data = response.json()

        assert response.status_code == 200
        assert [m["resume_id"] for m in data["matches"]] == ["r-1"]
        assert data["above_threshold"] == 2

    def test_invalid_min_score(self, client, python_resume):
        response = client.post("/api/match/jobs", json={"resume": dump(python_resume), "min_score": 150})
        assert response.status_code == 422


class TestAnalysisEndpoints:
    """POST /api/ats and /api/suggestions"""

    def test_ats(self, client, sample_profile):
        response = client.post("/api/ats", json={
            "profile": dump(sample_profile),
            "file_metadata": {"mime_type": "application/pdf", "file_size": 250000},
        })
        data = response.json()

        assert response.status_code == 200
        assert 0 <= data["score"] <= 100
        assert set(data["factors"]) == {"formatting", "keywords", "structure", "readability"}
        assert data["factors"]["structure"]["score"] == 100

    def test_ats_without_metadata(self, client, sample_profile):
        response = client.post("/api/ats", json={"profile": dump(sample_profile)})
        assert response.status_code == 200

    def test_suggestions(self, client):
        profile = StructuredProfile(raw_text="word " * 150)
        response = client.post("/api/suggestions", json={"profile": dump(profile)})
        data = response.json()

        assert response.status_code == 200
        assert data[0]["priority"] == "critical"
        assert data[0]["category"] == "contact-info"
        assert any(s["category"] == "length" for s in data)
