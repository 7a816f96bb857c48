import unittest

from metagame.exceptions import ArchetypeConfigError, MetagameError, TournamentDataError


class TestExceptions(unittest.TestCase):
    def test_str_includes_code(self):
        self.assertEqual(str(MetagameError("boom")), "[METAGAME_ERR] boom")

    def test_str_includes_details(self):
        error = TournamentDataError("Invalid JSON", path="data/1.json")
        self.assertEqual(error.details, {"path": "data/1.json"})
        self.assertIn("Details:", str(error))

    def test_archetype_errors(self):
        error = ArchetypeConfigError("Invalid", errors=["a", "b"])
        self.assertEqual(error.errors, ["a", "b"])
        self.assertEqual(error.details["errors"], ["a", "b"])
        self.assertIsInstance(error, MetagameError)


if __name__ == "__main__":
    unittest.main()
