import unittest

from copydesk.annotator import UNLOCATABLE, attach_offsets, find_span
from copydesk.models import ErrorRecord


def _err(text, id_="e"):
	return ErrorRecord(id=id_, original_text=text)


def _spans(records):
	return [(r.start_char, r.end_char) for r in records]


class AttachOffsetsTests(unittest.TestCase):
	def test_single_occurrence_is_bounded_exactly(self):
		article = "The mayor said on Tuesday that taxes would rise."
		[located] = attach_offsets(article, [_err("on Tuesday")])
		self.assertEqual(article[located.start_char:located.end_char], "on Tuesday")
		self.assertEqual((located.start_char, located.end_char), (15, 25))

	def test_missing_text_is_unlocatable(self):
		[located] = attach_offsets("Nothing to see here.", [_err("elsewhere")])
		self.assertEqual((located.start_char, located.end_char), UNLOCATABLE)
		self.assertFalse(located.located)

	def test_duplicates_claim_occurrences_in_input_order(self):
		article = "its a dog and its a cat"
		located = attach_offsets(article, [_err("its", "a"), _err("its", "b")])
		self.assertEqual(_spans(located), [(0, 3), (14, 17)])

	def test_second_duplicate_unlocatable_with_single_occurrence(self):
		article = "its a dog"
		located = attach_offsets(article, [_err("its", "a"), _err("its", "b")])
		self.assertEqual(_spans(located), [(0, 3), (-1, -1)])

	def test_unlocatable_record_claims_nothing(self):
		article = "alpha beta"
		located = attach_offsets(article, [_err("gamma"), _err("alpha")])
		self.assertEqual(_spans(located), [(-1, -1), (0, 5)])

	def test_skips_occurrences_overlapping_an_earlier_claim(self):
		article = "New York, New York"
		located = attach_offsets(article, [_err("New York,"), _err("New")])
		self.assertEqual(_spans(located), [(0, 9), (10, 13)])

	def test_candidate_containing_a_claim_is_rejected(self):
		article = "a big red barn"
		located = attach_offsets(article, [_err("red"), _err("big red barn")])
		self.assertEqual(_spans(located), [(6, 9), (-1, -1)])

	def test_empty_text_is_unlocatable(self):
		located = attach_offsets("some text", [_err("")])
		self.assertEqual(_spans(located), [(-1, -1)])

	def test_located_spans_never_overlap(self):
		article = "the cat sat on the mat with the hat on the cat"
		texts = ["the cat", "cat", "the", "at", "the mat", "on the", "hat", "t", "the cat"]
		located = attach_offsets(article, [_err(t, str(i)) for i, t in enumerate(texts)])
		spans = sorted(s for s in _spans(located) if s != UNLOCATABLE)
		for (s1, e1), (s2, e2) in zip(spans, spans[1:]):
			self.assertLessEqual(e1, s2)
		for record in located:
			if record.located:
				self.assertEqual(article[record.start_char:record.end_char], record.original_text)

	def test_inputs_are_not_mutated(self):
		original = _err("cat")
		attach_offsets("cat", [original])
		self.assertEqual((original.start_char, original.end_char), (-1, -1))


class FindSpanTests(unittest.TestCase):
	def test_adjacent_claim_does_not_count_as_overlap(self):
		self.assertEqual(find_span("abab", "ab", [(0, 2)]), (2, 4))

	def test_search_exhausts_string(self):
		self.assertEqual(find_span("aaa", "aa", [(0, 2), (1, 3)]), UNLOCATABLE)


if __name__ == "__main__":
	unittest.main()
