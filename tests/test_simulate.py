import io
import os
import logging
import unittest
from contextlib import redirect_stdout
from unittest import mock

import simulate
from tsumitate.engine import ProjectionEngine, SimulationConfig
from tsumitate.result import ResultStore
from tsumitate.returns import FixedReturnModel, RiskTier
from tsumitate.settings import GameSettings


def scripted(*answers):
    """input() の代わりに決められた回答を順に返す"""
    it = iter(answers)
    return lambda prompt="": next(it)


class TestAskSettings(unittest.TestCase):
    def test_amount_is_snapped_and_risk_parsed(self):
        settings = GameSettings()
        with redirect_stdout(io.StringIO()):
            simulate.ask_settings(settings, scripted("25,400", "2"))
        self.assertEqual(settings.monthly_amount, 25_000)
        self.assertEqual(settings.risk_tier, RiskTier.HIGH)

    def test_blank_keeps_current(self):
        settings = GameSettings(monthly_amount=30_000, risk_tier=RiskTier.LOW)
        with redirect_stdout(io.StringIO()):
            simulate.ask_settings(settings, scripted("", ""))
        self.assertEqual(settings.monthly_amount, 30_000)
        self.assertEqual(settings.risk_tier, RiskTier.LOW)

    def test_bad_input_falls_back_to_defaults(self):
        settings = GameSettings(monthly_amount=30_000, risk_tier=RiskTier.LOW)
        buf = io.StringIO()
        with redirect_stdout(buf):
            simulate.ask_settings(settings, scripted("たくさん"))
        self.assertEqual(settings, GameSettings())
        self.assertIn("デフォルト値", buf.getvalue())

    def test_infinite_amount_falls_back_to_defaults(self):
        settings = GameSettings(monthly_amount=30_000, risk_tier=RiskTier.LOW)
        buf = io.StringIO()
        with redirect_stdout(buf):
            simulate.ask_settings(settings, scripted("inf"))
        self.assertEqual(settings.monthly_amount, 10_000)
        self.assertEqual(settings.risk_tier, RiskTier.MEDIUM)
        self.assertIn("デフォルト値", buf.getvalue())

    def test_bad_input_keeps_years_from_environment(self):
        settings = GameSettings(monthly_amount=30_000, total_years=10, months_per_year=6)
        with redirect_stdout(io.StringIO()):
            simulate.ask_settings(settings, scripted("1e400"))
        self.assertEqual(settings.monthly_amount, 10_000)
        self.assertEqual(settings.total_years, 10)
        self.assertEqual(settings.months_per_year, 6)


class TestPlay(unittest.TestCase):
    def test_enter_advances_one_year_each(self):
        config = SimulationConfig(10_000, RiskTier.MEDIUM, total_years=3)
        engine = ProjectionEngine(config, FixedReturnModel(0.0))
        buf = io.StringIO()
        with redirect_stdout(buf):
            simulate.play(engine, scripted("", "", ""))
        self.assertTrue(engine.is_finished)
        self.assertIn("3年目 / 3年", buf.getvalue())
        self.assertIn("360,000円", buf.getvalue())

    def test_q_fast_forwards(self):
        engine = ProjectionEngine(
            SimulationConfig(10_000, RiskTier.LOW, total_years=15), FixedReturnModel(0.5),
        )
        buf = io.StringIO()
        with redirect_stdout(buf):
            simulate.play(engine, scripted("q"))
        self.assertEqual(engine.current_year, 15)
        self.assertIn("5年目はリスクを見直す", buf.getvalue())
        self.assertIn("10年目はリスクを見直す", buf.getvalue())


class TestShowResult(unittest.TestCase):
    def test_summary_and_comment_without_plot(self):
        store = ResultStore()
        engine = ProjectionEngine(
            SimulationConfig(10_000, RiskTier.LOW, total_years=2), FixedReturnModel(0.0), store,
        )
        engine.run_to_end()
        buf = io.StringIO()
        with redirect_stdout(buf), mock.patch.object(store.result, "plot") as plot:
            simulate.show_result(store.result, scripted("n"))
        plot.assert_not_called()
        self.assertIn("2年間、おつかれさま！", buf.getvalue())


class TestLogLevel(unittest.TestCase):
    def test_level_name_from_environment(self):
        with mock.patch.dict(os.environ, {"TSUMITATE_LOG_LEVEL": "debug"}, clear=True):
            self.assertEqual(simulate.log_level_from_env(), logging.DEBUG)

    def test_default_is_warning(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            self.assertEqual(simulate.log_level_from_env(), logging.WARNING)

    def test_unknown_level_falls_back_to_warning(self):
        with mock.patch.dict(os.environ, {"TSUMITATE_LOG_LEVEL": "VERBOSE"}, clear=True):
            with self.assertLogs("simulate", level="WARNING"):
                self.assertEqual(simulate.log_level_from_env(), logging.WARNING)


class TestMain(unittest.TestCase):
    def test_single_game_then_quit(self):
        env = {"TSUMITATE_SEED": "3", "TSUMITATE_TOTAL_YEARS": "2"}
        buf = io.StringIO()
        with mock.patch.dict(os.environ, env, clear=True), redirect_stdout(buf):
            simulate.main(scripted("", "", "q", "n", ""))
        out = buf.getvalue()
        self.assertIn("2年目 / 2年", out)
        self.assertIn("最終資産", out)
        self.assertIn("またね！", out)

    def test_dotenv_is_loaded_before_logging_setup(self):
        def fake_load_dotenv():
            os.environ["TSUMITATE_LOG_LEVEL"] = "ERROR"
            os.environ["TSUMITATE_TOTAL_YEARS"] = "1"
            return True

        with mock.patch.dict(os.environ, {}, clear=True), \
                mock.patch.object(simulate, "load_dotenv", side_effect=fake_load_dotenv), \
                mock.patch.object(simulate.logging, "basicConfig") as basic_config, \
                redirect_stdout(io.StringIO()):
            simulate.main(scripted("", "", "", "n", ""))
        self.assertEqual(basic_config.call_args.kwargs["level"], logging.ERROR)


if __name__ == '__main__':
    unittest.main()
