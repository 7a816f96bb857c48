import unittest

from metagame.analyzer.classifier import classify_all, classify_by_signature_cards, classify_tournaments
from metagame.models import ArchetypeDefinition, SignatureCard
from factories import cards, make_decklist, make_tournament


def archetype(name, *signature, strict=False):
    return ArchetypeDefinition(name=name, signature_cards=list(signature), strict_mode=strict)


MONO_RED = archetype("Mono Red", SignatureCard("Lightning Bolt", min_copies=4))
CONTROL = archetype("Control", SignatureCard("Counterspell", min_copies=4))


class TestClassifyBySignatureCards(unittest.TestCase):
    def test_min_copies(self):
        self.assertEqual(
            classify_by_signature_cards(cards(("Lightning Bolt", 4), ("Mountain", 20)), [MONO_RED]),
            "Mono Red",
        )
        self.assertIsNone(classify_by_signature_cards(cards(("Lightning Bolt", 3)), [MONO_RED]))

    def test_default_min_copies_is_one(self):
        defs = [archetype("Burn", SignatureCard("Lava Spike"))]
        self.assertEqual(classify_by_signature_cards(cards(("Lava Spike", 1)), defs), "Burn")
        self.assertIsNone(classify_by_signature_cards(cards(("Mountain", 20)), defs))

    def test_exact_copies(self):
        defs = [archetype("Splash Bolt", SignatureCard("Lightning Bolt", exact_copies=2))]
        self.assertEqual(classify_by_signature_cards(cards(("Lightning Bolt", 2)), defs), "Splash Bolt")
        self.assertIsNone(classify_by_signature_cards(cards(("Lightning Bolt", 4)), defs))

    def test_exact_zero_copies_means_absent(self):
        defs = [archetype("Creatureless", SignatureCard("Goblin Guide", exact_copies=0))]
        self.assertEqual(classify_by_signature_cards(cards(("Mountain", 20)), defs), "Creatureless")

    def test_quantities_summed_by_front_face(self):
        fable = "Fable of the Mirror-Breaker"
        defs = [archetype("Fable", SignatureCard(fable, min_copies=4))]
        mainboard = cards((f"{fable} // Reflection of Kiki-Jiki", 2), (fable, 2))
        self.assertEqual(classify_by_signature_cards(mainboard, defs), "Fable")

    def test_most_specific_archetype_wins(self):
        defs = [
            archetype("Red", SignatureCard("Lightning Bolt")),
            archetype("Boros", SignatureCard("Lightning Bolt"), SignatureCard("Lightning Helix")),
        ]
        mainboard = cards(("Lightning Bolt", 4), ("Lightning Helix", 4))
        self.assertEqual(classify_by_signature_cards(mainboard, defs), "Boros")

    def test_equal_size_tie_goes_to_first_declared(self):
        defs = [
            archetype("Bolt", SignatureCard("Lightning Bolt")),
            archetype("Helix", SignatureCard("Lightning Helix")),
        ]
        mainboard = cards(("Lightning Bolt", 4), ("Lightning Helix", 4))
        self.assertEqual(classify_by_signature_cards(mainboard, defs), "Bolt")

    def test_no_definitions(self):
        self.assertIsNone(classify_by_signature_cards(cards(("Lightning Bolt", 4)), []))


class TestClassifyAll(unittest.TestCase):
    def setUp(self):
        self.decklists = {
            "near-red": make_decklist("p3", cards(("Lightning Bolt", 2), ("Goblin Guide", 4), ("Mountain", 20))),
            "red": make_decklist("p1", cards(("Lightning Bolt", 4), ("Goblin Guide", 4), ("Mountain", 20))),
            "blue": make_decklist("p2", cards(("Counterspell", 4), ("Island", 20))),
            "green": make_decklist("p4", cards(("Llanowar Elves", 4), ("Forest", 20))),
        }

    def test_one_result_per_decklist(self):
        results = classify_all(self.decklists, [MONO_RED, CONTROL])
        self.assertEqual(sorted(r.decklist_id for r in results), sorted(self.decklists))

    def test_signature_results_come_first(self):
        results = classify_all(self.decklists, [MONO_RED, CONTROL])
        self.assertEqual([r.decklist_id for r in results], ["red", "blue", "near-red", "green"])
        self.assertEqual(results[0].method, "signature")
        self.assertEqual(results[0].confidence, 1.0)
        self.assertEqual(results[1].archetype, "Control")

    def test_knn_fallback(self):
        results = {r.decklist_id: r for r in classify_all(self.decklists, [MONO_RED, CONTROL])}
        near = results["near-red"]
        self.assertEqual(near.archetype, "Mono Red")
        self.assertEqual(near.method, "knn")
        self.assertGreater(near.confidence, 0.9)
        self.assertLessEqual(near.confidence, 1.0)

    def test_low_confidence_becomes_unknown(self):
        results = {r.decklist_id: r for r in classify_all(self.decklists, [MONO_RED, CONTROL])}
        green = results["green"]
        self.assertEqual(green.archetype, "Unknown")
        self.assertEqual(green.method, "unknown")
        self.assertLess(green.confidence, 0.3)

    def test_min_confidence_threshold(self):
        results = {
            r.decklist_id: r
            for r in classify_all(self.decklists, [MONO_RED, CONTROL], min_confidence=1.01)
        }
        self.assertEqual(results["near-red"].archetype, "Unknown")
        self.assertEqual(results["near-red"].method, "unknown")

    def test_strict_archetype_not_used_for_fallback(self):
        strict_control = archetype("Control", SignatureCard("Counterspell", min_copies=4), strict=True)
        decklists = {
            "blue": make_decklist("p1", cards(("Counterspell", 4), ("Island", 20))),
            "near-blue": make_decklist("p2", cards(("Counterspell", 2), ("Island", 20))),
            "red": make_decklist("p3", cards(("Lightning Bolt", 4), ("Mountain", 20))),
        }
        results = {r.decklist_id: r for r in classify_all(decklists, [MONO_RED, strict_control])}
        self.assertEqual(results["blue"].archetype, "Control")
        self.assertEqual(results["near-blue"].archetype, "Unknown")

    def test_no_signature_matches(self):
        results = classify_all(self.decklists, [])
        self.assertEqual(len(results), 4)
        for r in results:
            self.assertEqual(r.archetype, "Unknown")
            self.assertEqual(r.method, "unknown")
            self.assertEqual(r.confidence, 0.0)

    def test_empty_batch(self):
        self.assertEqual(classify_all({}, [MONO_RED]), [])

    def test_deterministic(self):
        self.assertEqual(
            classify_all(self.decklists, [MONO_RED, CONTROL]),
            classify_all(self.decklists, [MONO_RED, CONTROL]),
        )


class TestClassifyTournaments(unittest.TestCase):
    def test_keyed_by_tournament_id(self):
        t1 = make_tournament(1, decklists={"d1": make_decklist("p1", cards(("Lightning Bolt", 4)))})
        t2 = make_tournament(2, decklists={"d2": make_decklist("p2", cards(("Counterspell", 4)))})
        results = classify_tournaments([t1, t2], [MONO_RED, CONTROL])
        self.assertEqual(sorted(results), [1, 2])
        self.assertEqual(results[1][0].archetype, "Mono Red")
        self.assertEqual(results[2][0].archetype, "Control")


if __name__ == "__main__":
    unittest.main()
