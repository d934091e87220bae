"""
simulate.py
つみたてみらい — コンソール版

  1. 毎月のつみたて額とリスクタイプを決める
  2. Enter を押すたびに 1 年ずつ進む（全15年）
  3. 最後に結果（最終資産・元本・損益）と資産推移グラフを表示

実行:
  python simulate.py
"""

from __future__ import annotations

import os
import logging

from dotenv import load_dotenv

from tsumitate.engine import ProjectionEngine, YearStep
from tsumitate.messages import final_comment, format_change, format_yen, year_comment
from tsumitate.result import ResultStore, SimulationResult
from tsumitate.returns import RiskTier, UniformReturnModel
from tsumitate.settings import (
    GameSettings,
    InvalidConfig,
    MAX_MONTHLY_AMOUNT,
    MIN_MONTHLY_AMOUNT,
    parse_risk_tier,
    snap_monthly_amount,
)

logger = logging.getLogger(__name__)


def ask_settings(settings: GameSettings, input_func=input) -> GameSettings:
    """積立額とリスクタイプを入力してもらう。空欄なら今の設定のまま。"""
    print("=== つみたて設定 ===")
    try:
        raw_amount = input_func(
            f"毎月のつみたて額（{MIN_MONTHLY_AMOUNT:,}〜{MAX_MONTHLY_AMOUNT:,}円）"
            f" [{settings.monthly_amount:,}]: "
        ).replace(",", "").strip()
        if raw_amount:
            settings.set_monthly_amount(snap_monthly_amount(float(raw_amount)))

        raw_risk = input_func(
            f"リスクタイプ 0=低 / 1=中 / 2=高 [{RiskTier.ALL.index(settings.risk_tier)}]: "
        ).strip()
        if raw_risk:
            settings.set_risk_tier(parse_risk_tier(raw_risk))
    except (ValueError, InvalidConfig):
        print("\n[!] 入力が正しくありません。つみたて額とリスクはデフォルト値で始めます。")
        settings.reset_choices()

    print(f"毎月 {format_yen(settings.monthly_amount)} / {RiskTier.label(settings.risk_tier)}"
          f" / {settings.total_years}年\n")
    return settings


def print_year(engine: ProjectionEngine, step: YearStep) -> None:
    annual = engine.monthly_contribution * engine.months_per_year
    print(f"--- {step.year}年目 / {engine.total_years}年 ---")
    print(f"今年の変動   : {format_change(step.change_percent)}")
    print(f"現在の資産   : {format_yen(step.asset)}")
    print(f"年間つみたて : {format_yen(annual)}")
    print(year_comment(step.change_percent, step.year, engine.total_years))
    if engine.is_risk_review_year and not step.finished:
        print(f"※ {step.year}年目はリスクを見直すタイミングだよ。次の挑戦で変えてみよう。")
    print()


def play(engine: ProjectionEngine, input_func=input) -> None:
    """Enter で 1 年ずつ進める。q で最後まで一気に進める。"""
    print(f"1年目 / {engine.total_years}年")
    print(f"現在の資産: {format_yen(engine.current_asset)}")
    print(f"まいつき {format_yen(engine.monthly_contribution)} / {RiskTier.label(engine.risk_tier)}")
    print("ここから つみたてスタートだよ！\n")

    fast_forward = False
    while not engine.is_finished:
        if not fast_forward:
            key = input_func("Enter: 次の年へ ▶ （q: 最後まで進める）")
            fast_forward = key.strip().lower() == "q"
        print_year(engine, engine.advance_one_year())


def show_result(result: SimulationResult, input_func=input) -> None:
    result.summary()
    print(final_comment(result.profit_percent, result.years))
    print()
    if input_func("グラフを表示しますか？ [y/N]: ").strip().lower() == "y":
        print("グラフのウィンドウを閉じると次に進みます。")
        result.plot()


def log_level_from_env() -> int:
    """TSUMITATE_LOG_LEVEL をログレベルに変換する。不明な名前なら WARNING。"""
    name  = os.getenv("TSUMITATE_LOG_LEVEL", "WARNING").strip().upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        logger.warning("TSUMITATE_LOG_LEVEL=%r は不明なレベルのため WARNING を使用します。", name)
        return logging.WARNING
    return level


def main(input_func=input) -> None:
    # .env のログレベルを反映させるため、ログ設定より先に読み込む
    load_dotenv()
    logging.basicConfig(
        level=log_level_from_env(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    print("=== つみたてみらい ===\n")

    settings = GameSettings.from_env()
    ask_settings(settings, input_func)
    model = UniformReturnModel(seed=settings.seed)

    while True:
        store  = ResultStore()
        engine = ProjectionEngine(
            config       = settings.to_config(),
            return_model = model,
            result_sink  = store,
        )
        play(engine, input_func)
        show_result(store.result, input_func)

        choice = input_func(
            "1: 同じ条件でもう一度 / 2: 条件を変えてやりなおす / それ以外: おわる > "
        ).strip()
        if choice == "1":
            continue
        if choice == "2":
            ask_settings(settings, input_func)
            continue
        break

    print("またね！")


if __name__ == "__main__":
    main()
