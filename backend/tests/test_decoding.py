import unittest

from copydesk.decoding import decode_llm_json


class DecodeLLMJsonTests(unittest.TestCase):
	def test_plain_json_object(self):
		decoded = decode_llm_json('{"summary": "Use serial commas."}')
		self.assertEqual(decoded.status, "success")
		self.assertEqual(decoded.data, {"summary": "Use serial commas."})

	def test_fenced_json(self):
		decoded = decode_llm_json('Here you go:\n```json\n{"hint": "Check dates."}\n```')
		self.assertTrue(decoded.ok)
		self.assertEqual(decoded.data["hint"], "Check dates.")

	def test_object_embedded_in_prose(self):
		decoded = decode_llm_json('Sure! {"hint": "Look at titles."} Good luck.')
		self.assertEqual(decoded.data, {"hint": "Look at titles."})

	def test_prose_falls_back(self):
		decoded = decode_llm_json("- Spell out numbers under 10.\n- Use AP date style.")
		self.assertEqual(decoded.status, "fallback")
		self.assertIsNone(decoded.data)
		self.assertTrue(decoded.raw.startswith("- Spell out"))

	def test_json_array_is_not_an_object(self):
		self.assertEqual(decode_llm_json("[1, 2, 3]").status, "fallback")

	def test_empty_reply_fails(self):
		self.assertEqual(decode_llm_json("   ").status, "failure")
		self.assertEqual(decode_llm_json(None).status, "failure")


if __name__ == "__main__":
	unittest.main()
