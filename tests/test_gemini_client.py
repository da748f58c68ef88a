import json
import sys
import types

import pytest

from eduanim.errors import GenerationError
from eduanim.gemini_client import GeminiClient
from eduanim.script import DEMO_SCRIPT, RESPONSE_SCHEMA, generate_script


class FakeResponse:
    def __init__(self, text):
        self.text = text


class FakeGenAI(types.ModuleType):
    """Stands in for google.generativeai; replies are served per model name."""

    def __init__(self, replies):
        super().__init__("google.generativeai")
        self.replies = replies
        self.calls = []
        self.configured = None

    def configure(self, api_key=None):
        self.configured = api_key

    def GenerativeModel(self, model_name, system_instruction=None):
        genai = self

        class Model:
            def generate_content(self, contents, generation_config=None):
                genai.calls.append((model_name, system_instruction, contents, generation_config))
                reply = genai.replies[model_name]
                if isinstance(reply, Exception):
                    raise reply
                return FakeResponse(reply)

        return Model()


@pytest.fixture
def fake_genai(monkeypatch):
    def install(**replies):
        genai = FakeGenAI(replies)
        google = types.ModuleType("google")
        google.generativeai = genai
        monkeypatch.setitem(sys.modules, "google", google)
        monkeypatch.setitem(sys.modules, "google.generativeai", genai)
        return genai

    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    return install


def test_missing_api_key(fake_genai):
    fake_genai()
    with pytest.raises(RuntimeError, match="GOOGLE_API_KEY"):
        GeminiClient()


def test_api_key_from_environment(fake_genai, monkeypatch):
    genai = fake_genai()
    monkeypatch.setenv("GOOGLE_API_KEY", "env-key")
    GeminiClient()
    assert genai.configured == "env-key"


def test_generate_json_requests_schema_constrained_json(fake_genai):
    genai = fake_genai(**{"gemini-2.5-flash": json.dumps(DEMO_SCRIPT)})
    client = GeminiClient(api_key="k")
    script = generate_script(client, "Trade routes")
    assert script.title == "Offline Demo"
    assert len(genai.calls) == 1
    model_name, system_instruction, contents, config = genai.calls[0]
    assert model_name == "gemini-2.5-flash"
    assert system_instruction
    assert "Trade routes" in contents[0]
    assert config == {"response_mime_type": "application/json", "response_schema": RESPONSE_SCHEMA}


@pytest.mark.parametrize(
    "reply, message",
    [
        ("", "No response from AI"),
        ("   ", "No response from AI"),
        ("{bad", "Failed to generate animation"),
        (ConnectionError("quota exceeded"), "quota exceeded"),
    ],
)
def test_failed_reply_is_one_generation_error(fake_genai, reply, message):
    genai = fake_genai(**{"gemini-2.5-flash": reply})
    client = GeminiClient(api_key="k")
    with pytest.raises(GenerationError, match=message):
        generate_script(client, "Volcanoes")
    assert len(genai.calls) == 1


def test_fallback_model_is_tried_when_configured(fake_genai):
    genai = fake_genai(primary="", backup=json.dumps(DEMO_SCRIPT))
    client = GeminiClient(api_key="k", model_name="primary", fallback_model_name="backup")
    script = generate_script(client, "Volcanoes")
    assert script.title == "Offline Demo"
    assert [call[0] for call in genai.calls] == ["primary", "backup"]


def test_both_models_failing_reports_both_errors(fake_genai):
    genai = fake_genai(primary="", backup=ValueError("overloaded"))
    client = GeminiClient(api_key="k", model_name="primary", fallback_model_name="backup")
    with pytest.raises(GenerationError) as excinfo:
        generate_script(client, "Volcanoes")
    assert "No response from AI" in str(excinfo.value)
    assert "Fallback error: overloaded" in str(excinfo.value)
    assert len(genai.calls) == 2
