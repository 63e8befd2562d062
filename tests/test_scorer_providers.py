import json
import unittest
from types import SimpleNamespace
from unittest.mock import patch

import httpx
from openai import APIConnectionError, APIStatusError, RateLimitError

from app.ai.config import AIConfig
from app.ai.factory import get_scorer_transport
from app.ai.providers.gemini_provider import GeminiScorerTransport
from app.ai.providers.openai_provider import OpenAIScorerTransport
from app.ai.types import ScorerError

_OPENAI_URL = "https://api.openai.com/v1/chat/completions"


def _gemini(handler):
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return GeminiScorerTransport(model="gemini-1.5-pro", api_key="test-key", client=client)


def _openai(create):
    client = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))
    return OpenAIScorerTransport(model="gpt-4o-mini", client=client)


def _status_response(code):
    return httpx.Response(code, request=httpx.Request("POST", _OPENAI_URL))


class GeminiTransportTests(unittest.TestCase):
    def test_posts_prompt_and_reads_first_candidate(self):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["key"] = request.headers["x-goog-api-key"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(
                200,
                json={"candidates": [{"content": {"parts": [{"text": '{"matchPercentage": 64}'}]}}]},
            )

        reply = _gemini(handler).complete("score this")
        self.assertEqual(reply, '{"matchPercentage": 64}')
        self.assertTrue(seen["url"].endswith("/models/gemini-1.5-pro:generateContent"))
        self.assertEqual(seen["key"], "test-key")
        self.assertEqual(seen["body"], {"contents": [{"parts": [{"text": "score this"}]}]})

    def test_rate_limit_status_is_flagged(self):
        transport = _gemini(lambda request: httpx.Response(429, text="quota"))
        with self.assertRaises(ScorerError) as ctx:
            transport.complete("prompt")
        self.assertEqual(ctx.exception.http_status, 429)
        self.assertTrue(ctx.exception.is_rate_limited)

    def test_server_error_is_not_rate_limited(self):
        transport = _gemini(lambda request: httpx.Response(503, text="unavailable"))
        with self.assertRaises(ScorerError) as ctx:
            transport.complete("prompt")
        self.assertEqual(ctx.exception.http_status, 503)
        self.assertFalse(ctx.exception.is_rate_limited)

    def test_unexpected_payload_becomes_empty_object(self):
        transport = _gemini(lambda request: httpx.Response(200, json={"candidates": []}))
        self.assertEqual(transport.complete("prompt"), "{}")

    def test_network_error_is_wrapped(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with self.assertRaises(ScorerError) as ctx:
            _gemini(handler).complete("prompt")
        self.assertIsNone(ctx.exception.http_status)


class OpenAITransportTests(unittest.TestCase):
    def test_returns_message_content(self):
        def create(**kwargs):
            self.assertEqual(kwargs["messages"], [{"role": "user", "content": "prompt"}])
            message = SimpleNamespace(content='{"matchPercentage": 71}')
            return SimpleNamespace(choices=[SimpleNamespace(message=message)])

        self.assertEqual(_openai(create).complete("prompt"), '{"matchPercentage": 71}')

    def test_rate_limit_maps_to_429(self):
        def create(**kwargs):
            raise RateLimitError("slow down", response=_status_response(429), body=None)

        with self.assertRaises(ScorerError) as ctx:
            _openai(create).complete("prompt")
        self.assertEqual(ctx.exception.http_status, 429)

    def test_status_errors_keep_their_code(self):
        def create(**kwargs):
            raise APIStatusError("bad gateway", response=_status_response(502), body=None)

        with self.assertRaises(ScorerError) as ctx:
            _openai(create).complete("prompt")
        self.assertEqual(ctx.exception.http_status, 502)

    def test_connection_errors_have_no_status(self):
        def create(**kwargs):
            raise APIConnectionError(request=httpx.Request("POST", _OPENAI_URL))

        with self.assertRaises(ScorerError) as ctx:
            _openai(create).complete("prompt")
        self.assertIsNone(ctx.exception.http_status)


class ScorerFactoryTests(unittest.TestCase):
    def _config(self, provider, api_key):
        return AIConfig(provider=provider, model="m", api_key=api_key, timeout_s=5.0)

    def test_missing_or_placeholder_key_disables_ai_scoring(self):
        for key in (None, "", "your_gemini_key"):
            with self.subTest(key=key), patch("app.ai.factory.load_ai_config", return_value=self._config("gemini", key)):
                self.assertIsNone(get_scorer_transport())

    def test_provider_selection(self):
        with patch("app.ai.factory.load_ai_config", return_value=self._config("gemini", "g-key")):
            self.assertIsInstance(get_scorer_transport(), GeminiScorerTransport)
        with patch("app.ai.factory.load_ai_config", return_value=self._config("openai", "sk-test")):
            self.assertIsInstance(get_scorer_transport(), OpenAIScorerTransport)


if __name__ == "__main__":
    unittest.main()
