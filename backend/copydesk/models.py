from __future__ import annotations
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _utcnow() -> datetime:
	return datetime.now(timezone.utc)


class ErrorRecord(BaseModel):
	model_config = ConfigDict(extra="ignore")

	id: str = ""
	error_type: str = ""
	category: str = ""
	rule_description: str = ""
	original_text: str = ""
	suggested_correction: str = ""
	explanation: str = ""
	# -1/-1 marks a record whose text could not be placed without overlap
	start_char: int = -1
	end_char: int = -1

	@field_validator(
		"id", "error_type", "category", "rule_description",
		"original_text", "suggested_correction", "explanation",
		mode="before",
	)
	@classmethod
	def _coerce_text(cls, v: Any) -> str:
		if v is None:
			return ""
		return v if isinstance(v, str) else str(v)

	@classmethod
	def from_llm(cls, raw: Dict[str, Any], position: int) -> "ErrorRecord":
		record = cls.model_validate({k: v for k, v in raw.items() if k not in ("start_char", "end_char")})
		if not record.id:
			record = record.model_copy(update={"id": f"e{position}"})
		return record

	@property
	def located(self) -> bool:
		return self.start_char >= 0

	def answer_key_entry(self) -> Dict[str, Any]:
		return self.model_dump(exclude={"start_char", "end_char"})

	def hint_entry(self) -> Dict[str, Any]:
		return self.model_dump(include={"id", "error_type", "category", "rule_description"})


class StyleGuide(BaseModel):
	id: str
	name: str
	raw_text: str
	rules_summary: str
	created_at: datetime = Field(default_factory=_utcnow)


class Game(BaseModel):
	id: str
	style_guide_id: str
	mode: Literal["generate", "analyze"] = "generate"
	article: str
	errors: List[ErrorRecord]
	created_at: datetime = Field(default_factory=_utcnow)

	def answer_key(self) -> List[Dict[str, Any]]:
		return [e.answer_key_entry() for e in self.errors]

	def hint_metadata(self) -> List[Dict[str, Any]]:
		return [e.hint_entry() for e in self.errors]


class Score(BaseModel):
	foundErrors: int
	totalErrors: int
	percentage: int

