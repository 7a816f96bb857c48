import unittest

from metagame.analyzer.knn import knn_classify
from metagame.models import LabeledPoint


def point(label, *weights):
    return LabeledPoint(vector=[(i, w) for i, w in enumerate(weights) if w > 0], label=label)


class TestKnnClassify(unittest.TestCase):
    def test_nearest_neighbor_with_k1(self):
        labeled = [point("Aggro", 1.0, 0.0), point("Control", 0.0, 1.0)]
        result = knn_classify([(0, 1.0)], labeled, 1)
        self.assertEqual(result.label, "Aggro")
        self.assertAlmostEqual(result.confidence, 1.0)

    def test_majority_beats_single_higher_similarity(self):
        # target along axis 0; Control is closest, two Aggro slightly further
        target = [(0, 1.0)]
        labeled = [
            point("Control", 0.95, (1 - 0.95 ** 2) ** 0.5),
            point("Aggro", 0.8, 0.6),
            point("Aggro", 0.8, 0.6),
            point("Ramp", 0.0, 1.0),
        ]
        result = knn_classify(target, labeled, 3)
        self.assertEqual(result.label, "Aggro")
        self.assertAlmostEqual(result.confidence, 0.8)

    def test_tie_broken_by_average_similarity(self):
        target = [(0, 1.0)]
        labeled = [
            point("Aggro", 0.6, 0.8),
            point("Control", 0.8, 0.6),
        ]
        result = knn_classify(target, labeled, 2)
        self.assertEqual(result.label, "Control")
        self.assertAlmostEqual(result.confidence, 0.8)

    def test_k_larger_than_labeled(self):
        labeled = [point("Aggro", 1.0, 0.0)]
        result = knn_classify([(0, 1.0)], labeled, 10)
        self.assertEqual(result.label, "Aggro")

    def test_empty_labeled_returns_none(self):
        self.assertIsNone(knn_classify([(0, 1.0)], [], 5))

    def test_confidence_is_average_of_winning_neighbors(self):
        target = [(0, 1.0)]
        labeled = [
            point("Aggro", 1.0, 0.0),
            point("Aggro", 0.6, 0.8),
            point("Control", 0.0, 1.0),
        ]
        result = knn_classify(target, labeled, 3)
        self.assertEqual(result.label, "Aggro")
        self.assertAlmostEqual(result.confidence, 0.8)

    def test_multi_class(self):
        labeled = [
            point("A", 1.0, 0.0, 0.0), point("A", 0.9, 0.1, 0.0),
            point("B", 0.0, 1.0, 0.0), point("B", 0.1, 0.9, 0.0),
            point("C", 0.0, 0.0, 1.0), point("C", 0.0, 0.1, 0.9),
        ]
        self.assertEqual(knn_classify([(1, 1.0)], labeled, 2).label, "B")
        self.assertEqual(knn_classify([(2, 1.0)], labeled, 2).label, "C")

    def test_deterministic(self):
        labeled = [point("A", 1.0, 0.5), point("B", 0.5, 1.0), point("A", 0.7, 0.7)]
        target = [(0, 0.9), (1, 0.8)]
        self.assertEqual(knn_classify(target, labeled, 3), knn_classify(target, labeled, 3))


if __name__ == "__main__":
    unittest.main()
