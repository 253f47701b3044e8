from __future__ import annotations
import json
import re
from dataclasses import dataclass
from typing import Any, Dict, Literal, Optional


DecodeStatus = Literal["success", "fallback", "failure"]

_CODE_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```")


@dataclass(frozen=True)
class Decoded:
	"""Outcome of decoding one model reply.

	``success``: ``data`` holds the parsed JSON object.
	``fallback``: the reply was non-empty text but not a JSON object; ``raw``
	still carries it for callers that can use prose.
	``failure``: the reply was empty.
	"""

	status: DecodeStatus
	raw: str
	data: Optional[Dict[str, Any]] = None

	@property
	def ok(self) -> bool:
		return self.status == "success"


def _try_object(candidate: str) -> Optional[Dict[str, Any]]:
	try:
		value = json.loads(candidate)
	except ValueError:
		return None
	return value if isinstance(value, dict) else None


def decode_llm_json(text: Optional[str]) -> Decoded:
	raw = (text or "").strip()
	if not raw:
		return Decoded(status="failure", raw="")
	data = _try_object(raw)
	if data is not None:
		return Decoded(status="success", raw=raw, data=data)
	code_block = _CODE_BLOCK.search(raw)
	if code_block:
		data = _try_object(code_block.group(1))
		if data is not None:
			return Decoded(status="success", raw=raw, data=data)
	first = raw.find("{")
	last = raw.rfind("}")
	if first != -1 and last > first:
		data = _try_object(raw[first : last + 1])
		if data is not None:
			return Decoded(status="success", raw=raw, data=data)
	return Decoded(status="fallback", raw=raw)
