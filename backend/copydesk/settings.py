from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class Settings(BaseSettings):
	# Provider can be "openai" (any OpenAI-compatible chat completions API),
	# "ai_studio" (Generative Language API) or "vertex" (Vertex AI Express)
	llm_provider: str = Field(default="openai", validation_alias="LLM_PROVIDER")
	# Default model; a per-task model set to an empty value falls back to it
	llm_model: str = Field(default="gpt-4o-mini", validation_alias="LLM_MODEL")
	summary_model: str | None = Field(default="gpt-4o-mini", validation_alias="SUMMARY_MODEL")
	article_model: str | None = Field(default="gpt-4o", validation_alias="ARTICLE_MODEL")
	eval_model: str | None = Field(default="gpt-4o-mini", validation_alias="EVAL_MODEL")
	# 0 disables the timeout entirely
	llm_timeout_seconds: float = Field(default=120, validation_alias="LLM_TIMEOUT_SECONDS")

	# OpenAI configuration
	openai_api_key: str | None = Field(default=None, validation_alias="OPENAI_API_KEY")
	openai_base_url: str = Field(default="https://api.openai.com/v1/chat/completions", validation_alias="OPENAI_BASE_URL")

	# Gemini configuration
	gemini_api_key: str | None = Field(default=None, validation_alias="GEMINI_API_KEY")
	vertex_region: str = Field(default="us-central1", validation_alias="GEMINI_VERTEX_REGION")
	vertex_project: str | None = Field(default=None, validation_alias="GEMINI_VERTEX_PROJECT")

	# OpenRouter fallback configuration (optional, off unless a key is set)
	openrouter_api_key: str | None = Field(default=None, validation_alias="OPENROUTER_API_KEY")
	openrouter_model: str = Field(default="openai/gpt-4o-mini", validation_alias="OPENROUTER_MODEL")
	openrouter_base_url: str = Field(default="https://openrouter.ai/api/v1/chat/completions", validation_alias="OPENROUTER_BASE_URL")
	openrouter_referer: str = Field(default="https://localhost", validation_alias="OPENROUTER_HTTP_REFERER")
	openrouter_title: str = Field(default="Copy Desk", validation_alias="OPENROUTER_TITLE")

	# HTTP surface
	api_prefix: str = Field(default="/api", validation_alias="API_PREFIX")
	cors_origins: str = Field(default="*", validation_alias="CORS_ORIGINS")
	log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

	# pydantic-settings v2 style config
	model_config = SettingsConfigDict(env_file=".env", extra="ignore")

	@property
	def api_key(self) -> str | None:
		if self.llm_provider == "openai":
			return self.openai_api_key
		return self.gemini_api_key

	def cors_origin_list(self) -> list[str]:
		return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

settings = Settings()
