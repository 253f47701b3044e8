from __future__ import annotations
import uuid
from typing import Dict, Generic, Optional, TypeVar

from fastapi import Request

from .models import Game, StyleGuide


T = TypeVar("T")


class _MemoryStore(Generic[T]):
	# Process-lifetime only; nothing survives a restart
	def __init__(self) -> None:
		self._items: Dict[str, T] = {}

	@staticmethod
	def new_id() -> str:
		return str(uuid.uuid4())

	def get(self, key: Optional[str]) -> Optional[T]:
		if not key:
			return None
		return self._items.get(key)

	def __contains__(self, key: object) -> bool:
		return key in self._items

	def __len__(self) -> int:
		return len(self._items)


class StyleGuideStore(_MemoryStore[StyleGuide]):
	def add(self, name: str, raw_text: str, rules_summary: str) -> StyleGuide:
		guide = StyleGuide(id=self.new_id(), name=name, raw_text=raw_text, rules_summary=rules_summary)
		self._items[guide.id] = guide
		return guide


class GameStore(_MemoryStore[Game]):
	def add(self, game: Game) -> Game:
		self._items[game.id] = game
		return game


def get_style_guides(request: Request) -> StyleGuideStore:
	return request.app.state.style_guides


def get_games(request: Request) -> GameStore:
	return request.app.state.games
