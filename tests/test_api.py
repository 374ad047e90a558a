import json
from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient

from app.core.app import app
from app.core.config import settings
from app.core.errors import CatalogConfigurationError
from app.services.redis_service import redis_service
from tests.factories import COLABA, MUMBAI, MUMBAI_NEXT_DOOR, OTHER_USER_ID


def _experience_body(**overrides) -> dict:
    body = {
        "title": "Sunset walk",
        "type": "SOCIAL",
        "city": "Mumbai",
        "experienceDate": (date.today() + timedelta(days=7)).isoformat(),
        "maxCapacity": 10,
    }
    body.update(overrides)
    return body


class TestHealth:
    def test_root(self, client):
        assert client.get("/").status_code == 200

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "redis": "ok"}


class TestQuestions:
    def test_list_categories(self, client):
        response = client.get("/v1/questions")
        assert response.status_code == 200
        categories = response.json()
        assert categories[0]["id"] == "background"
        assert categories[0]["weight"] == 4.0
        assert categories[0]["questions"][0]["categoryId"] == "background"

    def test_single_category(self, client):
        response = client.get("/v1/questions/substances")
        assert response.status_code == 200
        assert {q["type"] for q in response.json()["questions"]} == {"RATING"}

    def test_unknown_category(self, client):
        response = client.get("/v1/questions/nope")
        assert response.status_code == 404
        assert response.json()["success"] is False
        assert response.json()["error"] == "NOT_FOUND"


class TestProfileEndpoints:
    def test_requires_user_header(self, client):
        response = client.get("/v1/user/profile")
        assert response.status_code == 401
        assert response.json()["error"] == "UNAUTHORIZED"

    def test_create_and_fetch(self, client, auth_headers):
        response = client.post("/v1/user/profile", json={"city": "Mumbai", "zipCode": "400001"}, headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["zipCode"] == "400001"

        fetched = client.get("/v1/user/profile", headers=auth_headers).json()
        assert fetched["city"] == "Mumbai"
        assert fetched["status"] == "ACTIVE"
        assert fetched["overallProfileCompletionPercentage"] == 0.0

    def test_profile_not_found(self, client, auth_headers):
        response = client.get("/v1/user/profile", headers=auth_headers)
        assert response.status_code == 404

    def test_out_of_range_latitude(self, client, auth_headers):
        response = client.post("/v1/user/profile", json={"latitude": 120, "longitude": 0}, headers=auth_headers)
        assert response.status_code == 422

    def test_delete_and_reactivate(self, client, auth_headers):
        client.post("/v1/user/profile", json={"city": "Mumbai"}, headers=auth_headers)

        deleted = client.patch("/v1/user/profile/delete", headers=auth_headers)
        assert deleted.status_code == 200
        assert deleted.json()["previousStatus"] == "ACTIVE"
        assert client.get("/v1/user/profile", headers=auth_headers).status_code == 404

        reactivated = client.patch("/v1/user/profile/reactivate", headers=auth_headers)
        assert reactivated.json()["status"] == "ACTIVE"
        assert client.get("/v1/user/profile", headers=auth_headers).status_code == 200

    def test_view_other_profile(self, client, auth_headers):
        client.post("/v1/user/profile", json={"city": "Pune"}, headers={"X-User-Id": OTHER_USER_ID})
        response = client.get(f"/v1/user/profile/{OTHER_USER_ID}", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["city"] == "Pune"


class TestQuestionnaireEndpoints:
    def test_partial_submissions_merge(self, client, auth_headers):
        client.post("/v1/user/questionnaire", json={"answers": {"home_town": "Mumbai"}}, headers=auth_headers)
        response = client.post(
            "/v1/user/questionnaire", json={"answers": {"sibling_order": "Older"}}, headers=auth_headers
        )
        assert response.status_code == 200

        answers = client.get("/v1/user/questionnaire", headers=auth_headers).json()["answers"]
        assert answers == {"home_town": "Mumbai", "sibling_order": "Older"}

    def test_progress(self, client, auth_headers):
        client.post(
            "/v1/user/questionnaire",
            json={"answers": {"home_town": "Mumbai", "sibling_order": "Older", "fluent_languages": ["Hindi"]}},
            headers=auth_headers,
        )
        progress = client.get("/v1/user/questionnaire/progress", headers=auth_headers).json()
        background = next(c for c in progress["categories"] if c["categoryId"] == "background")
        assert background["percentage"] == 60.0
        assert background["answeredCount"] == 3

    def test_unknown_question_rejected(self, client, auth_headers):
        response = client.post(
            "/v1/user/questionnaire", json={"answers": {"favourite_colour": "Blue"}}, headers=auth_headers
        )
        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "error": "UNKNOWN_QUESTION",
            "message": "Unknown question: favourite_colour",
        }

    def test_wrong_shape_rejected(self, client, auth_headers):
        response = client.post(
            "/v1/user/questionnaire", json={"answers": {"fluent_languages": "Hindi"}}, headers=auth_headers
        )
        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_ANSWER_SHAPE"

    def test_unanswered_questions_are_null(self, client, auth_headers):
        response = client.post(
            "/v1/user/questionnaire", json={"answers": {"home_town": "Mumbai"}}, headers=auth_headers
        )
        background = response.json()["questionnaireByCategory"][0]
        answers = {q["id"]: q["answer"] for q in background["questions"]}
        assert answers["home_town"] == "Mumbai"
        assert answers["sibling_order"] is None

    def test_category_with_answers(self, client, auth_headers):
        client.post("/v1/user/questionnaire", json={"answers": {"psychedelics": "3"}}, headers=auth_headers)
        response = client.get("/v1/user/questionnaire/category/substances", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["answers"] == {"psychedelics": "3"}


class TestExperienceEndpoints:
    def test_create_get_update_delete(self, client, auth_headers):
        created = client.post("/v1/experience", json=_experience_body(), headers=auth_headers)
        assert created.status_code == 201
        experience_id = created.json()["experienceId"]

        assert client.get(f"/v1/experience/{experience_id}").json()["title"] == "Sunset walk"

        forbidden = client.patch(
            f"/v1/experience/{experience_id}", json={"title": "Hijacked"}, headers={"X-User-Id": OTHER_USER_ID}
        )
        assert forbidden.status_code == 403

        updated = client.patch(f"/v1/experience/{experience_id}", json={"status": "PUBLISHED"}, headers=auth_headers)
        assert updated.json()["status"] == "PUBLISHED"

        assert client.delete(f"/v1/experience/{experience_id}", headers=auth_headers).status_code == 200
        assert client.get(f"/v1/experience/{experience_id}").status_code == 404

    def test_past_date_rejected(self, client, auth_headers):
        body = _experience_body(experienceDate=(date.today() - timedelta(days=1)).isoformat())
        response = client.post("/v1/experience", json=body, headers=auth_headers)
        assert response.status_code == 400

    def test_invalid_coordinate(self, client, auth_headers):
        body = _experience_body(latitude=95.0, longitude=0.0)
        response = client.post("/v1/experience", json=body, headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_COORDINATE"

    def test_list_by_city(self, client, auth_headers):
        client.post("/v1/experience", json=_experience_body(city="Mumbai"), headers=auth_headers)
        client.post("/v1/experience", json=_experience_body(city="Pune"), headers=auth_headers)
        response = client.get("/v1/experiences/all", params={"city": "Pune"})
        assert [e["city"] for e in response.json()] == ["Pune"]
        assert len(client.get("/v1/experiences/all").json()) == 2

    def test_nearby_with_explicit_point(self, client, auth_headers):
        for point in (MUMBAI, MUMBAI_NEXT_DOOR, COLABA):
            client.post(
                "/v1/experience",
                json=_experience_body(latitude=point[0], longitude=point[1]),
                headers=auth_headers,
            )
        response = client.get(
            "/v1/experiences/nearby",
            params={"lat": MUMBAI[0], "lon": MUMBAI[1], "radiusKm": 5},
            headers=auth_headers,
        )
        assert response.status_code == 200
        distances = [e["distanceKm"] for e in response.json()]
        assert len(distances) == 2
        assert distances == sorted(distances)

    def test_nearby_falls_back_to_profile_location(self, client, auth_headers):
        client.post("/v1/user/profile", json={"latitude": MUMBAI[0], "longitude": MUMBAI[1]}, headers=auth_headers)
        client.post(
            "/v1/experience",
            json=_experience_body(latitude=MUMBAI_NEXT_DOOR[0], longitude=MUMBAI_NEXT_DOOR[1]),
            headers=auth_headers,
        )
        response = client.get("/v1/experiences/nearby", headers=auth_headers)
        assert response.status_code == 200
        assert len(response.json()) == 1

    def test_nearby_without_any_location(self, client, auth_headers):
        response = client.get("/v1/experiences/nearby", headers=auth_headers)
        assert response.status_code == 400

    def test_nearby_needs_both_coordinates(self, client, auth_headers):
        response = client.get("/v1/experiences/nearby", params={"lat": MUMBAI[0]}, headers=auth_headers)
        assert response.status_code == 400

    def test_nearby_rejects_non_positive_radius(self, client, auth_headers):
        response = client.get(
            "/v1/experiences/nearby",
            params={"lat": MUMBAI[0], "lon": MUMBAI[1], "radiusKm": 0},
            headers=auth_headers,
        )
        assert response.status_code == 422

    def test_interest(self, client, auth_headers):
        experience_id = client.post("/v1/experience", json=_experience_body(), headers=auth_headers).json()[
            "experienceId"
        ]
        other = {"X-User-Id": OTHER_USER_ID}

        marked = client.put(f"/v1/experiences/{experience_id}/interest", headers=other)
        assert marked.json() == {"experienceId": experience_id, "interested": True}
        listed = client.get("/v1/user/interested-experiences", headers=other).json()
        assert [e["experienceId"] for e in listed] == [experience_id]

        client.put(f"/v1/experiences/{experience_id}/interest", json={"interested": False}, headers=other)
        assert client.get("/v1/user/interested-experiences", headers=other).json() == []

    def test_interest_in_missing_experience(self, client, auth_headers):
        response = client.put("/v1/experiences/missing/interest", headers=auth_headers)
        assert response.status_code == 404


class TestStartup:
    def test_invalid_catalog_prevents_startup(self, monkeypatch, tmp_path, fake_redis):
        path = tmp_path / "catalog.json"
        path.write_text(
            json.dumps(
                [
                    {
                        "id": "one",
                        "name": "One",
                        "questions": [{"id": "a", "title": "A", "type": "TEXT", "categoryId": "ghost"}],
                    }
                ]
            ),
            encoding="utf-8",
        )
        monkeypatch.setattr(settings, "CATALOG_PATH", str(path))
        redis_service.use_client(fake_redis)

        with pytest.raises(CatalogConfigurationError):
            with TestClient(app):
                pass
