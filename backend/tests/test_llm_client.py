import json
import unittest
from unittest.mock import patch

import httpx

from copydesk.llm_client import LLMClient, LLMError
from copydesk.settings import settings


class _Recorder:
	def __init__(self, responder):
		self.requests = []
		self._responder = responder

	def __call__(self, request: httpx.Request) -> httpx.Response:
		self.requests.append(request)
		return self._responder(request)


class LLMClientTests(unittest.IsolatedAsyncioTestCase):
	def setUp(self):
		patcher = patch.object(settings, "openrouter_api_key", None)
		patcher.start()
		self.addCleanup(patcher.stop)

	async def _client(self, responder, **kwargs):
		recorder = _Recorder(responder)
		client = LLMClient(transport=httpx.MockTransport(recorder), **kwargs)
		self.addAsyncCleanup(client.aclose)
		return client, recorder

	async def test_openai_chat_payload(self):
		client, recorder = await self._client(
			lambda r: httpx.Response(200, json={"choices": [{"message": {"content": '{"hint": "x"}'}}]}),
			api_key="sk-test",
			provider="openai",
			base_url="https://llm.test/v1/chat/completions",
		)
		text = await client.complete("sys", "usr", model="gpt-4o", temperature=0.3)
		self.assertEqual(text, '{"hint": "x"}')
		request = recorder.requests[0]
		self.assertEqual(request.headers["authorization"], "Bearer sk-test")
		body = json.loads(request.content)
		self.assertEqual(body["model"], "gpt-4o")
		self.assertEqual(body["messages"][0], {"role": "system", "content": "sys"})
		self.assertEqual(body["messages"][1], {"role": "user", "content": "usr"})
		self.assertEqual(body["response_format"], {"type": "json_object"})
		self.assertEqual(body["temperature"], 0.3)

	async def test_gemini_payload(self):
		client, recorder = await self._client(
			lambda r: httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": "ok"}]}}]}),
			api_key="g-key",
			provider="ai_studio",
			model="gemini-2.5-flash",
		)
		self.assertEqual(await client.complete("sys", "usr", json_mode=False), "ok")
		request = recorder.requests[0]
		self.assertIn("gemini-2.5-flash:generateContent", str(request.url))
		self.assertEqual(request.url.params["key"], "g-key")
		body = json.loads(request.content)
		self.assertEqual(body["systemInstruction"], {"parts": [{"text": "sys"}]})
		self.assertNotIn("generationConfig", body)

	async def test_http_error_raises_llm_error(self):
		client, _ = await self._client(
			lambda r: httpx.Response(503, text="overloaded"),
			api_key="sk-test",
			provider="openai",
		)
		with self.assertRaises(LLMError):
			await client.complete("sys", "usr")

	async def test_empty_content_raises_llm_error(self):
		client, _ = await self._client(
			lambda r: httpx.Response(200, json={"choices": [{"message": {"content": "  "}}]}),
			api_key="sk-test",
			provider="openai",
		)
		with self.assertRaisesRegex(LLMError, "Empty response"):
			await client.complete("sys", "usr")

	async def test_fallback_used_when_configured(self):
		def responder(request):
			if "openrouter" in str(request.url):
				return httpx.Response(200, json={"choices": [{"message": {"content": "from fallback"}}]})
			return httpx.Response(500, text="boom")

		with patch.object(settings, "openrouter_api_key", "or-key"):
			client, recorder = await self._client(responder, api_key="sk-test", provider="openai")
			self.assertEqual(await client.complete("sys", "usr"), "from fallback")
		self.assertEqual(len(recorder.requests), 2)
		self.assertEqual(recorder.requests[1].headers["authorization"], "Bearer or-key")

	async def test_missing_key_fails_on_first_call(self):
		with patch.object(settings, "openai_api_key", None):
			client = LLMClient(provider="openai")
			self.addAsyncCleanup(client.aclose)
			with self.assertRaisesRegex(LLMError, "not configured"):
				await client.complete("sys", "usr")


if __name__ == "__main__":
	unittest.main()
