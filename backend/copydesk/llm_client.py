from __future__ import annotations
import logging
import httpx
from typing import Any, AsyncIterator, Dict, Optional
from .settings import settings

logger = logging.getLogger(__name__)


class LLMError(RuntimeError):
	"""Raised when the upstream model call fails or returns nothing usable."""


class LLMClient:
	"""Chat-style client: one system prompt, one user prompt, text back.

	Speaks either the OpenAI chat completions wire format or Gemini's
	generateContent, depending on ``settings.llm_provider``. When an OpenRouter
	key is configured, a failed primary call is replayed once against
	OpenRouter; otherwise failures surface as :class:`LLMError`.
	"""

	def __init__(
		self,
		api_key: Optional[str] = None,
		*,
		provider: Optional[str] = None,
		base_url: Optional[str] = None,
		model: Optional[str] = None,
		transport: Optional[httpx.AsyncBaseTransport] = None,
	) -> None:
		self.provider = provider or settings.llm_provider
		if self.provider == "openai":
			self.api_key = api_key or settings.openai_api_key
		else:
			self.api_key = api_key or settings.gemini_api_key
		self.model = model or settings.llm_model
		self._base_url = base_url
		self._transport = transport
		# HTTP clients and the key check wait for the first call
		self._client: Optional[httpx.AsyncClient] = None
		self._fallback_client: Optional[httpx.AsyncClient] = None
		self._fallback_enabled = bool(settings.openrouter_api_key)
		self._openrouter_api_key = settings.openrouter_api_key
		self._openrouter_model = settings.openrouter_model
		self._openrouter_base_url = settings.openrouter_base_url
		self._openrouter_headers = {
			"Authorization": f"Bearer {self._openrouter_api_key}" if self._openrouter_api_key else "",
			"Content-Type": "application/json",
			"HTTP-Referer": settings.openrouter_referer,
			"X-Title": settings.openrouter_title,
		}

	def _open(self) -> httpx.AsyncClient:
		if not self.api_key:
			raise LLMError(f"API key for LLM provider '{self.provider}' is not configured")
		if self._client is None:
			timeout = settings.llm_timeout_seconds or None
			self._client = httpx.AsyncClient(timeout=timeout, transport=self._transport)
			if self._fallback_enabled:
				self._fallback_client = httpx.AsyncClient(timeout=timeout, transport=self._transport)
		return self._client

	def _gemini_url(self, model: str) -> str:
		if self._base_url:
			return self._base_url
		if self.provider == "vertex":
			region = settings.vertex_region
			project = settings.vertex_project or "placeholder-project"
			return f"https://{region}-aiplatform.googleapis.com/v1/projects/{project}/locations/{region}/publishers/google/models/{model}:generateContent"
		return f"https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

	async def complete(
		self,
		system: str,
		user: str,
		*,
		model: Optional[str] = None,
		json_mode: bool = True,
		temperature: Optional[float] = None,
	) -> str:
		client = self._open()
		model_name = model or self.model
		try:
			if self.provider == "openai":
				text = await self._post_chat(
					client,
					self._base_url or settings.openai_base_url,
					{"Authorization": f"Bearer {self.api_key}", "Content-Type": "application/json"},
					model_name,
					system,
					user,
					json_mode=json_mode,
					temperature=temperature,
				)
			else:
				text = await self._post_gemini(model_name, system, user, json_mode=json_mode, temperature=temperature)
		except LLMError as primary_error:
			if not self._fallback_enabled:
				raise
			return await self._fallback_complete(system, user, primary_error, json_mode=json_mode, temperature=temperature)
		return text

	async def _post_chat(
		self,
		client: httpx.AsyncClient,
		url: str,
		headers: Dict[str, str],
		model: str,
		system: str,
		user: str,
		*,
		json_mode: bool,
		temperature: Optional[float],
	) -> str:
		payload: Dict[str, Any] = {
			"model": model,
			"messages": [
				{"role": "system", "content": system},
				{"role": "user", "content": user},
			],
		}
		if json_mode:
			payload["response_format"] = {"type": "json_object"}
		if temperature is not None:
			payload["temperature"] = temperature
		data = await self._post(client, url, headers=headers, json=payload)
		try:
			content = data["choices"][0]["message"]["content"]
		except (KeyError, IndexError, TypeError):
			raise LLMError("Invalid response from LLM API")
		return self._require_text(content)

	async def _post_gemini(
		self,
		model: str,
		system: str,
		user: str,
		*,
		json_mode: bool,
		temperature: Optional[float],
	) -> str:
		params: Dict[str, Any] = {}
		headers: Dict[str, str] = {}
		# AI Studio takes the key as a query param, Vertex Express as a header
		if self.provider == "vertex":
			headers["x-goog-api-key"] = self.api_key
		else:
			params["key"] = self.api_key
		generation_config: Dict[str, Any] = {}
		if json_mode:
			generation_config["responseMimeType"] = "application/json"
		if temperature is not None:
			generation_config["temperature"] = temperature
		payload: Dict[str, Any] = {
			"systemInstruction": {"parts": [{"text": system}]},
			"contents": [{"role": "user", "parts": [{"text": user}]}],
		}
		if generation_config:
			payload["generationConfig"] = generation_config
		data = await self._post(self._client, self._gemini_url(model), params=params, headers=headers, json=payload)
		try:
			content = data["candidates"][0]["content"]["parts"][0]["text"]
		except (KeyError, IndexError, TypeError):
			raise LLMError("Invalid response from LLM API")
		return self._require_text(content)

	async def _post(self, client: httpx.AsyncClient, url: str, **kwargs: Any) -> Any:
		try:
			r = await client.post(url, **kwargs)
			r.raise_for_status()
		except httpx.HTTPStatusError as http_err:
			logger.error("LLM call failed with status %s: %s", http_err.response.status_code, http_err.response.text[:500])
			raise LLMError(f"LLM API returned status {http_err.response.status_code}") from http_err
		except httpx.RequestError as net_err:
			logger.error("LLM call failed: %s", net_err)
			raise LLMError(f"LLM API request failed: {net_err}") from net_err
		try:
			return r.json()
		except ValueError as err:
			raise LLMError(f"Unexpected LLM response: {r.text[:500]}") from err

	@staticmethod
	def _require_text(content: Any) -> str:
		if not isinstance(content, str) or not content.strip():
			raise LLMError("Empty response from LLM API")
		return content

	async def aclose(self) -> None:
		if self._client is not None:
			await self._client.aclose()
		if self._fallback_client is not None:
			await self._fallback_client.aclose()

	async def _fallback_complete(
		self,
		system: str,
		user: str,
		primary_error: LLMError,
		*,
		json_mode: bool,
		temperature: Optional[float],
	) -> str:
		if not self._fallback_client or not self._openrouter_api_key:
			raise primary_error
		logger.warning("Primary LLM call failed (%s); trying OpenRouter", primary_error)
		headers = {k: v for k, v in self._openrouter_headers.items() if v}
		try:
			return await self._post_chat(
				self._fallback_client,
				self._openrouter_base_url,
				headers,
				self._openrouter_model,
				system,
				user,
				json_mode=json_mode,
				temperature=temperature,
			)
		except LLMError as fallback_err:
			raise LLMError(
				f"LLM primary call failed ({primary_error}); fallback via OpenRouter also failed"
			) from fallback_err


async def get_llm_client() -> AsyncIterator[LLMClient]:
	client = LLMClient()
	try:
		yield client
	finally:
		await client.aclose()
