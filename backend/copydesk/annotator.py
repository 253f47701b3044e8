"""Attach character spans to error records.

Errors are placed greedily in input order: each one takes the leftmost
occurrence of its ``original_text`` that does not overlap a span already
claimed by an earlier error. Records that cannot be placed get the
``(-1, -1)`` sentinel and claim nothing.
"""
from __future__ import annotations
import logging
from typing import Iterable, List, Sequence, Tuple

from .models import ErrorRecord

logger = logging.getLogger(__name__)

UNLOCATABLE: Tuple[int, int] = (-1, -1)


def _overlaps(start: int, end: int, claimed: Sequence[Tuple[int, int]]) -> bool:
	for c_start, c_end in claimed:
		if c_start <= start < c_end:
			return True
		if c_start < end <= c_end:
			return True
		if start <= c_start and end >= c_end:
			return True
	return False


def find_span(article: str, needle: str, claimed: Sequence[Tuple[int, int]]) -> Tuple[int, int]:
	if not needle:
		# An empty needle matches everywhere; treat it as unplaceable
		return UNLOCATABLE
	pos = 0
	while True:
		index = article.find(needle, pos)
		if index == -1:
			return UNLOCATABLE
		end = index + len(needle)
		if not _overlaps(index, end, claimed):
			return index, end
		pos = index + 1


def attach_offsets(article: str, errors: Iterable[ErrorRecord]) -> List[ErrorRecord]:
	claimed: List[Tuple[int, int]] = []
	located: List[ErrorRecord] = []
	for error in errors:
		start, end = find_span(article, error.original_text, claimed)
		if (start, end) == UNLOCATABLE:
			logger.warning("Could not locate text for error %s: %r", error.id, error.original_text)
		else:
			claimed.append((start, end))
		located.append(error.model_copy(update={"start_char": start, "end_char": end}))
	return located
