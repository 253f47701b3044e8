from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ..decoding import decode_llm_json
from ..llm_client import LLMClient, LLMError, get_llm_client
from ..models import Game, Score
from ..prompts import FALLBACK_HINT, evaluation_prompts, hint_prompts
from ..settings import settings
from ..stores import GameStore, StyleGuideStore, get_games, get_style_guides

logger = logging.getLogger(__name__)

router = APIRouter(tags=["games"])


class SubmitEditsRequest(BaseModel):
	gameId: Optional[str] = None
	editedArticle: Optional[str] = None


class HintRequest(BaseModel):
	gameId: Optional[str] = None


class HintResponse(BaseModel):
	hint: str


def percentage(found: int, total: int) -> int:
	if total <= 0:
		return 0
	# integer round-half-up of found / total * 100
	return (found * 200 + total) // (2 * total)


def reconcile_score(evaluation: Dict[str, Any]) -> Dict[str, Any]:
	"""Recount the score from the per-error verdicts.

	The model's own tally is kept only when all three fields agree with the
	recount; otherwise every field is replaced.
	"""
	per_error: List[Any] = evaluation["perError"]
	found = sum(1 for v in per_error if isinstance(v, dict) and v.get("fixed") is True)
	total = len(per_error)
	recount = Score(foundErrors=found, totalErrors=total, percentage=percentage(found, total))
	reported = evaluation.get("score")
	if not isinstance(reported, dict) or any(reported.get(k) != v for k, v in recount.model_dump().items()):
		logger.warning(
			"Score mismatch detected. Reported: %s, recount: %s",
			reported.get("foundErrors") if isinstance(reported, dict) else None,
			found,
		)
		return {**evaluation, "score": recount.model_dump()}
	return evaluation


def _rules_summary(game: Game, guides: StyleGuideStore) -> str:
	# The guide reference is not enforced; a missing guide just means no rules
	guide = guides.get(game.style_guide_id)
	return guide.rules_summary if guide else ""


@router.post("/submit-edits")
async def submit_edits(
	req: SubmitEditsRequest,
	client: LLMClient = Depends(get_llm_client),
	guides: StyleGuideStore = Depends(get_style_guides),
	games: GameStore = Depends(get_games),
):
	if not req.gameId or not req.editedArticle:
		raise HTTPException(status_code=400, detail="gameId and editedArticle are required")
	game = games.get(req.gameId)
	if game is None:
		raise HTTPException(status_code=404, detail="Game not found")
	system, user = evaluation_prompts(_rules_summary(game, guides), game.article, game.answer_key(), req.editedArticle)
	try:
		raw = await client.complete(system, user, model=settings.eval_model, temperature=0.3)
	except LLMError as e:
		raise HTTPException(status_code=500, detail=str(e))
	decoded = decode_llm_json(raw)
	if not decoded.ok:
		logger.error("Evaluation response was not JSON: %s", decoded.raw[:500])
		raise HTTPException(status_code=500, detail="Failed to parse evaluation data from LLM response")
	if not isinstance(decoded.data.get("perError"), list):
		raise HTTPException(status_code=500, detail="Invalid evaluation format from LLM")
	evaluation = reconcile_score(decoded.data)
	logger.info("Scored game %s: %s", game.id, evaluation["score"])
	return {
		"score": evaluation["score"],
		"perError": evaluation["perError"],
		"overallFeedback": str(evaluation.get("overallFeedback") or ""),
	}


@router.post("/hint", response_model=HintResponse)
async def hint(
	req: HintRequest,
	client: LLMClient = Depends(get_llm_client),
	guides: StyleGuideStore = Depends(get_style_guides),
	games: GameStore = Depends(get_games),
):
	game = games.get(req.gameId)
	if game is None:
		raise HTTPException(status_code=400, detail="Invalid gameId")
	system, user = hint_prompts(_rules_summary(game, guides), game.article, game.hint_metadata())
	try:
		raw = await client.complete(system, user, model=settings.eval_model, temperature=0.7)
	except LLMError as e:
		raise HTTPException(status_code=500, detail=str(e))
	decoded = decode_llm_json(raw)
	value = decoded.data.get("hint") if decoded.ok else None
	if not isinstance(value, str) or not value.strip():
		logger.warning("Hint response unusable (%s); using fallback", decoded.status)
		return HintResponse(hint=FALLBACK_HINT)
	return HintResponse(hint=value.strip())
