import unittest

from metagame.analyzer.attribution import agreement_rate, build_attribution_matrix
from factories import make_decklist, make_tournament, result


class TestAttributionMatrix(unittest.TestCase):
    def setUp(self):
        self.tournament = make_tournament(1, decklists={
            "d1": make_decklist("p1", reported="Burn"),
            "d2": make_decklist("p2", reported="Burn"),
            "d3": make_decklist("p3", reported="Boros Burn"),
            "d4": make_decklist("p4", reported="  "),
            "d5": make_decklist("p5", reported=None),
            "d6": make_decklist("p6", reported=" Control "),
        })
        self.results = {1: [
            result("d1", "Burn"),
            result("d2", "Burn"),
            result("d3", "Burn", "knn", 0.8),
            result("d4", "Control"),
            result("d5", "Unknown", "unknown", 0.1),
            result("d6", "Control"),
        ]}

    def test_axes_sorted_by_count(self):
        matrix = build_attribution_matrix([self.tournament], self.results)
        self.assertEqual(matrix.classified_archetypes, ["Burn", "Control", "Unknown"])
        self.assertEqual(matrix.reported_archetypes, ["Burn", "No Report", "Boros Burn", "Control"])

    def test_counts(self):
        matrix = build_attribution_matrix([self.tournament], self.results)
        self.assertEqual(matrix.cells, [
            [2, 0, 1, 0],
            [0, 1, 0, 1],
            [0, 1, 0, 0],
        ])
        self.assertEqual(matrix.row_totals, [3, 2, 1])
        self.assertEqual(matrix.col_totals, [2, 2, 1, 1])
        self.assertEqual(matrix.grand_total, 6)
        self.assertEqual(matrix.max_count, 2)
        self.assertEqual(sum(matrix.row_totals), sum(matrix.col_totals))

    def test_blank_report_is_no_report(self):
        matrix = build_attribution_matrix([self.tournament], self.results)
        self.assertIn("No Report", matrix.reported_archetypes)
        self.assertNotIn("  ", matrix.reported_archetypes)

    def test_unknown_decklist_ids_ignored(self):
        results = {1: self.results[1] + [result("missing", "Burn")]}
        matrix = build_attribution_matrix([self.tournament], results)
        self.assertEqual(matrix.grand_total, 6)

    def test_no_data(self):
        self.assertIsNone(build_attribution_matrix([], {}))
        self.assertIsNone(build_attribution_matrix([self.tournament], {}))
        self.assertIsNone(build_attribution_matrix([self.tournament], {2: self.results[1]}))

    def test_agreement_rate(self):
        matrix = build_attribution_matrix([self.tournament], self.results)
        # d1, d2 (Burn) and d6 (Control) agree
        self.assertAlmostEqual(agreement_rate(matrix), 3 / 6)
        self.assertEqual(agreement_rate(None), 0.0)


if __name__ == "__main__":
    unittest.main()
