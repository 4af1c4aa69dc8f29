"""Tests for model-backed recommendations, tips and their fallbacks."""
import json

import pytest
from langchain_core.language_models import FakeListLLM
from langchain_core.runnables import RunnableLambda

from smartwatt.ai.advisor import EnergyAdvisor
from smartwatt.ai.parsing import AIResponseError, parse_recommendations, parse_tips, strip_code_fences
from smartwatt.application.services.recommendation_service import MAX_RECOMMENDATIONS
from smartwatt.interfaces.deps import get_energy_advisor
from tests.conftest import create_catalog_device, register_admin, register_user

AI_REPLY = {
    "deviceRecommendations": [
        {
            "deviceId": None,
            "deviceName": "Lamp",
            "recommendedWattage": 40,
            "reasonForRecommendation": "Cheap to run",
            "estimatedMonthlyCost": 6.53,
            "estimatedSavings": 2,
        }
    ],
    "energySavingTips": [{"tip": "Switch it off", "potentialSavings": "5%", "relevantDevices": ["Lamp"]}],
}


def _use_llm(client, llm):
    client.app.dependency_overrides[get_energy_advisor] = lambda: EnergyAdvisor(llm)


def _failing_llm():
    def boom(_):
        raise TimeoutError("model timed out")
    return RunnableLambda(boom)


@pytest.fixture
def catalog(client):
    admin = register_admin(client)
    headers = admin["headers"]
    return [
        create_catalog_device(client, headers, name="Fridge", watts_options="[100, 150]", all_day=True),
        create_catalog_device(client, headers, name="Lamp", watts_options="[40, 60]", all_day=False),
        create_catalog_device(client, headers, name="Fan", watts_options="[50]", all_day=False),
        create_catalog_device(client, headers, name="Router", watts_options="[10]", all_day=True),
        create_catalog_device(client, headers, name="Heater", watts_options="[3000]", all_day=True),
    ]


class TestReplyParsing:

    def test_fenced_reply_matches_plain(self):
        plain = json.dumps(AI_REPLY)
        fenced = f"Here you go:\n```json\n{plain}\n```"
        assert parse_recommendations(fenced) == parse_recommendations(plain)

    def test_strip_code_fences_without_fence(self):
        assert strip_code_fences('  {"a": 1} ') == '{"a": 1}'

    def test_not_json_raises(self):
        with pytest.raises(AIResponseError):
            parse_recommendations("not json")

    def test_missing_recommendations_list_raises(self):
        with pytest.raises(AIResponseError):
            parse_recommendations('{"energySavingTips": []}')

    def test_missing_tips_default_to_empty(self):
        parsed = parse_recommendations('{"deviceRecommendations": []}')
        assert parsed["energySavingTips"] == []

    def test_tips_must_be_a_list(self):
        with pytest.raises(AIResponseError):
            parse_tips('{"tip": "x"}')


class TestAIRecommendations:

    def test_fallback_without_advisor(self, client, catalog):
        user = register_user(client, budget=500)
        resp = client.get("/api/ai/recommendations", headers=user["headers"])
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["source"] == "fallback"
        assert len(data["recommendations"]) == MAX_RECOMMENDATIONS
        assert "Heater" not in [r["deviceName"] for r in data["recommendations"]]
        assert len(data["energySavingTips"]) == 3
        assert data["budget"]["remaining"] == 500

    def test_ai_reply_is_enriched(self, client, catalog):
        lamp = catalog[1]
        reply = dict(AI_REPLY)
        reply["deviceRecommendations"] = [{**AI_REPLY["deviceRecommendations"][0], "deviceId": lamp["id"]}]
        _use_llm(client, FakeListLLM(responses=[f"```json\n{json.dumps(reply)}\n```"]))

        user = register_user(client, budget=500)
        data = client.get("/api/ai/recommendations", headers=user["headers"]).json()["data"]
        assert data["source"] == "ai"
        rec = data["recommendations"][0]
        assert rec["deviceName"] == "Lamp"
        assert rec["deviceImage"] == lamp["img"]
        assert rec["wattsOptions"] == [40, 60]
        assert rec["deviceWorkAllDay"] is False
        assert data["energySavingTips"][0]["tip"] == "Switch it off"

    def test_unknown_device_id_is_not_enriched(self, client, catalog):
        reply = dict(AI_REPLY)
        reply["deviceRecommendations"] = [{**AI_REPLY["deviceRecommendations"][0], "deviceId": 999}]
        _use_llm(client, FakeListLLM(responses=[json.dumps(reply)]))

        user = register_user(client, budget=500)
        rec = client.get("/api/ai/recommendations", headers=user["headers"]).json()["data"]["recommendations"][0]
        assert rec["deviceImage"] is None
        assert rec["wattsOptions"] == []

    def test_fallback_on_unparseable_reply(self, client, catalog):
        _use_llm(client, FakeListLLM(responses=["not json"]))
        user = register_user(client, budget=500)
        resp = client.get("/api/ai/recommendations", headers=user["headers"])
        assert resp.status_code == 200
        assert resp.json()["data"]["source"] == "fallback"

    def test_fallback_when_model_raises(self, client, catalog):
        _use_llm(client, _failing_llm())
        user = register_user(client, budget=500)
        resp = client.get("/api/ai/recommendations", headers=user["headers"])
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["source"] == "fallback"
        assert len(data["recommendations"]) <= MAX_RECOMMENDATIONS

    def test_fallback_with_no_budget_left(self, client, catalog):
        user = register_user(client, budget=0)
        data = client.get("/api/ai/recommendations", headers=user["headers"]).json()["data"]
        assert data["recommendations"] == []
        assert data["source"] == "fallback"

    def test_requires_token(self, client):
        assert client.get("/api/ai/recommendations").status_code == 401


class TestDeviceTips:

    def test_fallback_tips(self, client, catalog):
        user = register_user(client)
        resp = client.get(f"/api/ai/tips/{catalog[0]['id']}", headers=user["headers"])
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["source"] == "fallback"
        assert data["device"]["name"] == "Fridge"
        assert len(data["tips"]) == 5
        assert all("Fridge" in t["tip"] for t in data["tips"])

    def test_ai_tips(self, client, catalog):
        tips = [{"tip": "Keep the door closed", "potentialSavings": "5%"}]
        _use_llm(client, FakeListLLM(responses=[json.dumps(tips)]))
        user = register_user(client)
        data = client.get(f"/api/ai/tips/{catalog[0]['id']}", headers=user["headers"]).json()["data"]
        assert data["source"] == "ai"
        assert data["tips"] == tips

    def test_tips_fallback_when_model_raises(self, client, catalog):
        _use_llm(client, _failing_llm())
        user = register_user(client)
        data = client.get(f"/api/ai/tips/{catalog[1]['id']}", headers=user["headers"]).json()["data"]
        assert data["source"] == "fallback"
        assert len(data["tips"]) == 5

    def test_missing_device_is_404(self, client, catalog):
        user = register_user(client)
        assert client.get("/api/ai/tips/999", headers=user["headers"]).status_code == 404
