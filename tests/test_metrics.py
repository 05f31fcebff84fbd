import math
import unittest

from pipeplanner import CuttingPattern, Requirement, Segment, StockBarSpec, calculate_metrics, optimize


class TestCalculateMetrics(unittest.TestCase):

    def test_full_bars(self):
        stock = StockBarSpec(length=4.0, kerf_width=0.0, max_count=5)
        outcome = optimize(stock, [Requirement(length=4, quantity=3)])
        metrics = calculate_metrics(stock, outcome.patterns)

        self.assertEqual(metrics.efficiency, 100.0)
        self.assertEqual(metrics.waste_total, 0.0)
        self.assertEqual(metrics.stock_used, 3)
        self.assertEqual(metrics.stock_total, 5)
        self.assertTrue(metrics.has_patterns)

    def test_no_patterns_is_defined(self):
        stock = StockBarSpec(length=6.0, kerf_width=3.0, max_count=10)
        metrics = calculate_metrics(stock, [])

        self.assertEqual(metrics.efficiency, 0.0)
        self.assertFalse(math.isnan(metrics.efficiency))
        self.assertEqual(metrics.stock_used, 0)
        self.assertEqual(metrics.stock_total, 10)
        self.assertEqual(metrics.waste_total, 0.0)
        self.assertFalse(metrics.has_patterns)

    def test_waste_total_matches_patterns(self):
        stock = StockBarSpec(length=6.0, kerf_width=3.0, max_count=10)
        outcome = optimize(stock, [Requirement(length=1.5, quantity=5), Requirement(length=2.2, quantity=3)])
        metrics = calculate_metrics(stock, outcome.patterns)

        self.assertAlmostEqual(metrics.waste_total, sum(p.waste for p in outcome.patterns))
        self.assertEqual(metrics.stock_used, len(outcome.patterns))

        expected = (3 * 6.0 - metrics.waste_total) / (3 * 6.0) * 100
        self.assertAlmostEqual(metrics.efficiency, expected)

    def test_partial_bar(self):
        stock = StockBarSpec(length=5.0, kerf_width=0.0, max_count=1)
        pattern = CuttingPattern(
            bar_index=1,
            efficiency=60.0,
            waste=2.0,
            segments=(
                Segment(length=3.0, position=0.0),
                Segment(length=2.0, position=3.0, is_waste=True),
            ),
        )
        metrics = calculate_metrics(stock, [pattern])

        self.assertAlmostEqual(metrics.efficiency, 60.0)
        self.assertEqual(metrics.waste_total, 2.0)
        self.assertEqual(metrics.stock_used, 1)
        self.assertEqual(metrics.stock_total, 1)


if __name__ == '__main__':
    unittest.main()
