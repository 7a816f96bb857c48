import math
import unittest

from metagame.analyzer.tfidf import build_corpus, to_dense, vectorize
from factories import cards


class TestBuildCorpus(unittest.TestCase):
    def test_vocabulary_first_seen_order(self):
        corpus = build_corpus([
            cards(("Lightning Bolt", 4), ("Mountain", 20)),
            cards(("Counterspell", 4), ("Mountain", 10)),
        ])
        self.assertEqual(corpus.vocabulary, {"Lightning Bolt": 0, "Mountain": 1, "Counterspell": 2})
        self.assertEqual(corpus.document_count, 2)

    def test_idf_zero_for_card_in_every_document(self):
        corpus = build_corpus([
            cards(("Mountain", 20), ("Lightning Bolt", 4)),
            cards(("Mountain", 18)),
        ])
        self.assertEqual(corpus.idf[corpus.vocabulary["Mountain"]], 0.0)

    def test_idf_for_rare_card(self):
        corpus = build_corpus([
            cards(("A", 1)),
            cards(("B", 1)),
            cards(("B", 1)),
            cards(("B", 1)),
        ])
        self.assertAlmostEqual(corpus.idf[corpus.vocabulary["A"]], math.log(4))
        self.assertAlmostEqual(corpus.idf[corpus.vocabulary["B"]], math.log(4 / 3))

    def test_empty_input(self):
        corpus = build_corpus([])
        self.assertEqual(corpus.vocabulary, {})
        self.assertEqual(corpus.idf, [])
        self.assertEqual(corpus.document_count, 0)

    def test_duplicate_entries_count_document_once(self):
        corpus = build_corpus([
            cards(("A", 2), ("A", 2)),
            cards(("B", 1)),
        ])
        self.assertAlmostEqual(corpus.idf[corpus.vocabulary["A"]], math.log(2))


class TestVectorize(unittest.TestCase):
    def setUp(self):
        self.decks = [
            cards(("Lightning Bolt", 4), ("Mountain", 16)),
            cards(("Counterspell", 4), ("Island", 16)),
            cards(("Lightning Bolt", 2), ("Island", 18)),
        ]
        self.corpus = build_corpus(self.decks)

    def test_weights(self):
        vector = vectorize(self.decks[0], self.corpus)
        bolt_idx = self.corpus.vocabulary["Lightning Bolt"]
        mountain_idx = self.corpus.vocabulary["Mountain"]
        self.assertEqual([idx for idx, _ in vector], [bolt_idx, mountain_idx])
        self.assertAlmostEqual(vector[0][1], (4 / 20) * math.log(3 / 2))
        self.assertAlmostEqual(vector[1][1], (16 / 20) * math.log(3))

    def test_same_decklist_twice_is_identical(self):
        self.assertEqual(vectorize(self.decks[2], self.corpus), vectorize(self.decks[2], self.corpus))

    def test_quantity_scales_tf(self):
        corpus = build_corpus([cards(("A", 1)), cards(("B", 1))])
        one = vectorize(cards(("A", 1), ("C", 1)), corpus)
        two = vectorize(cards(("A", 2), ("C", 2)), corpus)
        self.assertAlmostEqual(one[0][1], two[0][1])
        bigger = vectorize(cards(("A", 3), ("C", 1)), corpus)
        self.assertAlmostEqual(bigger[0][1], 1.5 * one[0][1])

    def test_empty_decklist(self):
        self.assertEqual(vectorize([], self.corpus), [])

    def test_ignores_unknown_cards(self):
        vector = vectorize(cards(("Black Lotus", 1), ("Counterspell", 1)), self.corpus)
        self.assertEqual(len(vector), 1)
        self.assertEqual(vector[0][0], self.corpus.vocabulary["Counterspell"])

    def test_omits_zero_weight_terms(self):
        corpus = build_corpus([cards(("Mountain", 20)), cards(("Mountain", 10), ("A", 1))])
        vector = vectorize(cards(("Mountain", 20)), corpus)
        self.assertEqual(vector, [])


class TestToDense(unittest.TestCase):
    def test_expands(self):
        self.assertEqual(to_dense([(0, 0.5), (2, 1.5)], 4), [0.5, 0.0, 1.5, 0.0])

    def test_empty(self):
        self.assertEqual(to_dense([], 3), [0.0, 0.0, 0.0])


if __name__ == "__main__":
    unittest.main()
