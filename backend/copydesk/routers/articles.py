from __future__ import annotations
import logging
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ValidationError

from ..annotator import attach_offsets
from ..decoding import decode_llm_json
from ..llm_client import LLMClient, LLMError, get_llm_client
from ..models import ErrorRecord, Game, StyleGuide
from ..prompts import analyze_article_prompts, generate_article_prompts
from ..settings import settings
from ..stores import GameStore, StyleGuideStore, get_games, get_style_guides

logger = logging.getLogger(__name__)

router = APIRouter(tags=["articles"])


LENGTH_WORDS: Dict[str, int] = {"short": 300, "medium": 600, "long": 900}
DEFAULT_WORDS = 600
MAX_WORDS = 1000


class GenerateArticleRequest(BaseModel):
	styleGuideId: Optional[str] = None
	length: str = "medium"
	wordCount: Optional[int] = None
	difficulty: str = "medium"
	numErrors: int = 10
	subject: str = "General news"
	tone: str = "AP-style news article"
	# When present the article is analyzed instead of generated
	article: Optional[str] = None


class AnalyzeArticleRequest(BaseModel):
	styleGuideId: Optional[str] = None
	article: Optional[str] = None


class GameResponse(BaseModel):
	gameId: str
	article: str
	errors: List[ErrorRecord]


def target_word_count(length: Optional[str], word_count: Optional[int] = None) -> int:
	if word_count and word_count > 0:
		target = word_count
	else:
		target = LENGTH_WORDS.get((length or "").lower(), DEFAULT_WORDS)
	return min(target, MAX_WORDS)


def parse_article_payload(raw: str, source_article: Optional[str] = None) -> tuple[str, List[ErrorRecord]]:
	decoded = decode_llm_json(raw)
	if not decoded.ok:
		logger.error("Article response was not JSON: %s", decoded.raw[:500])
		raise HTTPException(status_code=500, detail="Failed to parse article data from LLM response")
	# An analyzed article is kept verbatim; the model's echo of it is ignored
	article = source_article if source_article is not None else decoded.data.get("article")
	errors = decoded.data.get("errors")
	if not isinstance(article, str) or not article.strip() or not isinstance(errors, list):
		raise HTTPException(status_code=500, detail="Invalid response format from LLM")
	records: List[ErrorRecord] = []
	for position, item in enumerate(errors, start=1):
		if not isinstance(item, dict):
			raise HTTPException(status_code=500, detail="Invalid response format from LLM")
		try:
			records.append(ErrorRecord.from_llm(item, position))
		except ValidationError:
			raise HTTPException(status_code=500, detail="Invalid response format from LLM")
	return article, records


async def _create_game(
	client: LLMClient,
	games: GameStore,
	*,
	style_guide_id: str,
	mode: str,
	system: str,
	user: str,
	temperature: float,
	source_article: Optional[str] = None,
) -> GameResponse:
	try:
		raw = await client.complete(system, user, model=settings.article_model, temperature=temperature)
	except LLMError as e:
		raise HTTPException(status_code=500, detail=str(e))
	article, records = parse_article_payload(raw, source_article)
	located = attach_offsets(article, records)
	game = games.add(Game(id=games.new_id(), style_guide_id=style_guide_id, mode=mode, article=article, errors=located))
	missing = sum(1 for e in located if not e.located)
	logger.info("Created %s game %s with %d errors (%d unlocatable)", mode, game.id, len(located), missing)
	return GameResponse(gameId=game.id, article=game.article, errors=game.errors)


async def _analyze(guide: StyleGuide, article: str, client: LLMClient, games: GameStore) -> GameResponse:
	system, user = analyze_article_prompts(guide.rules_summary, article)
	return await _create_game(
		client, games, style_guide_id=guide.id, mode="analyze", system=system, user=user, temperature=0.3,
		source_article=article,
	)


@router.post("/generate-article", response_model=GameResponse)
async def generate_article(
	req: GenerateArticleRequest,
	client: LLMClient = Depends(get_llm_client),
	guides: StyleGuideStore = Depends(get_style_guides),
	games: GameStore = Depends(get_games),
):
	guide = guides.get(req.styleGuideId)
	if guide is None:
		raise HTTPException(status_code=400, detail="Invalid styleGuideId")
	if req.article and req.article.strip():
		return await _analyze(guide, req.article, client, games)
	system, user = generate_article_prompts(
		guide.rules_summary,
		target_words=target_word_count(req.length, req.wordCount),
		subject=req.subject,
		tone=req.tone,
		difficulty=req.difficulty,
		num_errors=req.numErrors,
	)
	return await _create_game(
		client, games, style_guide_id=guide.id, mode="generate", system=system, user=user, temperature=0.8
	)


@router.post("/analyze-article", response_model=GameResponse)
async def analyze_article(
	req: AnalyzeArticleRequest,
	client: LLMClient = Depends(get_llm_client),
	guides: StyleGuideStore = Depends(get_style_guides),
	games: GameStore = Depends(get_games),
):
	guide = guides.get(req.styleGuideId)
	if guide is None:
		raise HTTPException(status_code=400, detail="Invalid styleGuideId")
	if not req.article or not req.article.strip():
		raise HTTPException(status_code=400, detail="article is required")
	return await _analyze(guide, req.article, client, games)
