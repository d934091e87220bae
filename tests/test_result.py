import io
import unittest
from contextlib import redirect_stdout

import matplotlib
matplotlib.use("Agg")

import pandas as pd

from tsumitate.engine import ProjectionEngine, SimulationConfig
from tsumitate.result import FALLBACK_YEARS, ResultStore, SimulationResult
from tsumitate.returns import FixedReturnModel, RiskTier


def make_result(final_asset=2_000_000, principal=1_800_000, history=None):
    history = history if history is not None else [0, 120_000, 250_000]
    return SimulationResult(
        final_asset=final_asset,
        principal=principal,
        yearly_assets=pd.Series(history, dtype=float),
        monthly_contribution=10_000,
        risk_tier=RiskTier.MEDIUM,
    )


class TestSimulationResult(unittest.TestCase):
    def test_profit_and_percent(self):
        result = make_result(final_asset=2_000_000, principal=1_600_000)
        self.assertEqual(result.profit, 400_000)
        self.assertAlmostEqual(result.profit_percent, 25.0)

    def test_loss(self):
        result = make_result(final_asset=900_000, principal=1_000_000)
        self.assertEqual(result.profit, -100_000)
        self.assertAlmostEqual(result.profit_percent, -10.0)

    def test_zero_principal_gives_zero_percent(self):
        result = make_result(final_asset=0, principal=0)
        self.assertEqual(result.profit_percent, 0.0)

    def test_years_from_history(self):
        """履歴は 0年目を含むので件数 - 1"""
        self.assertEqual(make_result(history=[0, 1, 2, 3]).years, 3)
        self.assertEqual(make_result(history=[0]).years, FALLBACK_YEARS)
        self.assertEqual(make_result(history=[]).years, FALLBACK_YEARS)

    def test_to_frame_has_cumulative_principal(self):
        frame = make_result(history=[0, 120_000, 250_000]).to_frame()
        self.assertEqual(list(frame.index), [0, 1, 2])
        self.assertEqual(frame.index.name, "year")
        self.assertEqual(list(frame["principal"]), [0, 120_000, 240_000])
        self.assertEqual(list(frame["asset"]), [0, 120_000, 250_000])

    def test_summary_prints_figures(self):
        buf = io.StringIO()
        with redirect_stdout(buf):
            make_result(final_asset=2_000_000, principal=1_800_000).summary()
        text = buf.getvalue()
        self.assertIn("中リスク", text)
        self.assertIn("2,000,000", text)
        self.assertIn("+200,000", text)

    def test_plot_returns_figure(self):
        import matplotlib.pyplot as plt
        fig = make_result().plot(show=False)
        ax = fig.axes[0]
        self.assertEqual(len(ax.get_lines()), 2)
        self.assertEqual(list(ax.get_lines()[0].get_ydata()), [0, 120_000, 250_000])
        plt.close(fig)


class TestResultStore(unittest.TestCase):
    def test_starts_empty_and_clears(self):
        store = ResultStore()
        self.assertIsNone(store.result)
        engine = ProjectionEngine(
            SimulationConfig(10_000, RiskTier.LOW, total_years=2), FixedReturnModel(0.0),
        )
        engine.run_to_end()
        store.set_result(engine)
        self.assertEqual(store.result.final_asset, 240_000)
        self.assertEqual(list(store.result.yearly_assets), [0, 120_000, 240_000])
        store.clear()
        self.assertIsNone(store.result)


if __name__ == '__main__':
    unittest.main()
