from __future__ import annotations
import json
import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ..decoding import Decoded, decode_llm_json
from ..llm_client import LLMClient, LLMError, get_llm_client
from ..prompts import style_summary_prompts
from ..settings import settings
from ..stores import StyleGuideStore, get_style_guides

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/style-guides", tags=["style_guides"])

_SUMMARY_KEYS = ("summary", "rules", "content")


class CreateStyleGuideRequest(BaseModel):
	name: Optional[str] = None
	text: Optional[str] = None


class StyleGuideSummaryResponse(BaseModel):
	styleGuideId: str
	rulesSummary: str


class StyleGuideResponse(StyleGuideSummaryResponse):
	name: str


def extract_rules_summary(decoded: Decoded) -> str:
	"""Pick the summary out of a model reply, tolerating the shapes models drift into."""
	if decoded.status == "failure":
		raise HTTPException(status_code=500, detail="Empty response from LLM API")
	if decoded.status == "fallback":
		logger.warning("Style guide summary was not JSON; using raw text")
		return decoded.raw
	value: Any = None
	for key in _SUMMARY_KEYS:
		value = decoded.data.get(key)
		if value:
			break
	if not value:
		return decoded.raw
	return value if isinstance(value, str) else json.dumps(value)


@router.post("", response_model=StyleGuideSummaryResponse)
async def create_style_guide(
	req: CreateStyleGuideRequest,
	client: LLMClient = Depends(get_llm_client),
	guides: StyleGuideStore = Depends(get_style_guides),
):
	name = req.name or ""
	text = req.text or ""
	if not name.strip() or not text.strip():
		raise HTTPException(status_code=400, detail="Name and text are required")
	system, user = style_summary_prompts(text)
	try:
		raw = await client.complete(system, user, model=settings.summary_model, temperature=0.3)
	except LLMError as e:
		raise HTTPException(status_code=500, detail=str(e))
	rules_summary = extract_rules_summary(decode_llm_json(raw))
	guide = guides.add(name=name, raw_text=text, rules_summary=rules_summary)
	logger.info("Stored style guide %s (%s)", guide.id, guide.name)
	return StyleGuideSummaryResponse(styleGuideId=guide.id, rulesSummary=guide.rules_summary)


@router.get("/{style_guide_id}", response_model=StyleGuideResponse)
def get_style_guide(style_guide_id: str, guides: StyleGuideStore = Depends(get_style_guides)):
	guide = guides.get(style_guide_id)
	if guide is None:
		raise HTTPException(status_code=404, detail="Style guide not found")
	return StyleGuideResponse(styleGuideId=guide.id, name=guide.name, rulesSummary=guide.rules_summary)
