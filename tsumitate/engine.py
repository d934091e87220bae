"""
tsumitate/engine.py
つみたてシミュレーションエンジン

仕組み:
  - 1ターン ＝ 1年。advance_one_year() を 1 回呼ぶと 1 年進む
  - 内部では months_per_year（通常 12）ヶ月分をループして計算
  - 毎月「積立 → 月次変動を反映」の順で複利計算する
  - total_years（通常 15）年に達したら終了

UI 側はこのクラスの読み取り専用プロパティと、
advance_one_year() が返す YearStep を見るだけで表示を更新できる。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from tsumitate.returns import BaseReturnModel, UniformReturnModel

if TYPE_CHECKING:
    from tsumitate.result import ResultStore

logger = logging.getLogger(__name__)

# リスクを見直せる年（0年目・5年目・10年目）
RISK_REVIEW_YEARS = (0, 5, 10)


# ------------------------------------------------------------------ #
# 設定値（実行中は変更しない）
# ------------------------------------------------------------------ #
@dataclass(frozen=True)
class SimulationConfig:
    monthly_contribution: float          # 毎月のつみたて額（円）
    risk_tier:            str            # RiskTier.LOW / MEDIUM / HIGH
    total_years:          int = 15
    months_per_year:      int = 12

    @property
    def annual_contribution(self) -> float:
        return self.monthly_contribution * self.months_per_year

    @property
    def principal(self) -> float:
        """元本（つみたて総額）= 毎月額 × 月数 × 年数"""
        return self.annual_contribution * self.total_years


# ------------------------------------------------------------------ #
# 実行状態（エンジンだけが書き換える）
# ------------------------------------------------------------------ #
@dataclass
class SimulationState:
    current_year:         int   = 0      # 何年目まで計算済みか（0 = 未開始）
    current_asset:        float = 0.0
    year_start_asset:     float = 0.0    # 直近に終わった年の年初資産
    year_end_asset:       float = 0.0    # 直近に終わった年の年末資産
    year_change_percent:  float = 0.0    # 直近に終わった年の変動率（%）
    yearly_asset_history: list[float] = field(default_factory=lambda: [0.0])


# ------------------------------------------------------------------ #
# 1年分の結果
# ------------------------------------------------------------------ #
class StepStatus:
    ADVANCED         = "advanced"          # 1年進んだ
    FINISHED         = "finished"          # 1年進んで最終年に到達した
    ALREADY_COMPLETE = "already_complete"  # 最終年到達済みのため何もしなかった


@dataclass(frozen=True)
class YearStep:
    year:           int
    status:         str
    asset:          float
    change_percent: float

    @property
    def finished(self) -> bool:
        return self.status in (StepStatus.FINISHED, StepStatus.ALREADY_COMPLETE)

    @property
    def already_complete(self) -> bool:
        return self.status == StepStatus.ALREADY_COMPLETE


# ------------------------------------------------------------------ #
# シミュレーションエンジン
# ------------------------------------------------------------------ #
class ProjectionEngine:
    """
    1年ずつ進める積立シミュレーションエンジン

    使い方:
        from tsumitate.engine import ProjectionEngine, SimulationConfig
        from tsumitate.returns import RiskTier, UniformReturnModel

        engine = ProjectionEngine(
            config       = SimulationConfig(10_000, RiskTier.MEDIUM),
            return_model = UniformReturnModel(seed=42),
        )
        step = engine.advance_one_year()
        print(step.year, engine.current_asset)

    Args:
        config:       SimulationConfig。指定すると即 start() する
        return_model: 月次変動率を返すモデル（省略時は UniformReturnModel）
        result_sink:  最終年到達時に結果のコピーを受け取る ResultStore
    """

    def __init__(
        self,
        config:       SimulationConfig = None,
        return_model: BaseReturnModel  = None,
        result_sink:  "ResultStore"    = None,
    ) -> None:
        self.return_model = return_model or UniformReturnModel()
        self.result_sink  = result_sink
        self._config: SimulationConfig | None = None
        self._state = SimulationState()
        if config is not None:
            self.start(config)

    # ------------------------------------------------------------------ #
    # 開始・進行
    # ------------------------------------------------------------------ #
    def start(self, config: SimulationConfig) -> None:
        """
        新しいシミュレーションを開始する。

        状態は 0年目・資産 0・履歴 [0] にリセットされる。
        設定値の検証・丸めは呼び出し側（settings.py）の責任。
        """
        self._config = config
        self._state  = SimulationState()
        logger.info(
            "シミュレーション開始: 毎月%.0f円 / %s / %d年",
            config.monthly_contribution,
            config.risk_tier,
            config.total_years,
        )

    def advance_one_year(self) -> YearStep:
        """
        1年分（months_per_year ヶ月）の積立と値動きを計算して 1 年進める。

        最終年に到達済みの場合は何もせず、
        status=ALREADY_COMPLETE の YearStep を返す（エラーにはしない）。
        """
        if self._config is None:
            raise RuntimeError("start() を先に呼び出してください。")

        cfg   = self._config
        state = self._state

        if state.current_year >= cfg.total_years:
            logger.warning("最終年（%d年）に到達済みのため進めません。", cfg.total_years)
            return YearStep(
                year           = state.current_year,
                status         = StepStatus.ALREADY_COMPLETE,
                asset          = state.current_asset,
                change_percent = state.year_change_percent,
            )

        start_asset = state.current_asset
        asset = start_asset
        for _ in range(cfg.months_per_year):
            asset += cfg.monthly_contribution
            change = self.return_model.monthly_change_percent(cfg.risk_tier)
            asset *= 1 + change / 100

        # 1年目は年初資産が 0 なのでゼロ割を避けて 0% とする
        if start_asset > 0:
            change_percent = (asset - start_asset) / start_asset * 100
        else:
            change_percent = 0.0

        state.year_start_asset    = start_asset
        state.year_end_asset      = asset
        state.current_asset       = asset
        state.year_change_percent = change_percent
        state.current_year       += 1
        state.yearly_asset_history.append(asset)

        finished = state.current_year >= cfg.total_years
        logger.debug(
            "%d年目完了: 資産=%.0f 変動率=%+.2f%%",
            state.current_year, asset, change_percent,
        )
        if finished:
            logger.info("シミュレーション終了: 最終資産=%.0f円", asset)
            if self.result_sink is not None:
                self.result_sink.set_result(self)

        return YearStep(
            year           = state.current_year,
            status         = StepStatus.FINISHED if finished else StepStatus.ADVANCED,
            asset          = asset,
            change_percent = change_percent,
        )

    def run_to_end(self) -> list[YearStep]:
        """最終年まで一気に進め、各年の YearStep を返す。"""
        steps: list[YearStep] = []
        while not self.is_finished:
            steps.append(self.advance_one_year())
        return steps

    # ------------------------------------------------------------------ #
    # 読み取り専用プロパティ
    # ------------------------------------------------------------------ #
    @property
    def config(self) -> SimulationConfig:
        if self._config is None:
            raise RuntimeError("start() を先に呼び出してください。")
        return self._config

    @property
    def current_year(self) -> int:
        return self._state.current_year

    @property
    def total_years(self) -> int:
        return self.config.total_years

    @property
    def months_per_year(self) -> int:
        return self.config.months_per_year

    @property
    def monthly_contribution(self) -> float:
        return self.config.monthly_contribution

    @property
    def risk_tier(self) -> str:
        return self.config.risk_tier

    @property
    def current_asset(self) -> float:
        return self._state.current_asset

    @property
    def year_start_asset(self) -> float:
        return self._state.year_start_asset

    @property
    def year_end_asset(self) -> float:
        return self._state.year_end_asset

    @property
    def year_change_percent(self) -> float:
        return self._state.year_change_percent

    @property
    def yearly_asset_history(self) -> tuple[float, ...]:
        return tuple(self._state.yearly_asset_history)

    @property
    def has_progressed(self) -> bool:
        """1年以上進めたかどうか（start() 直後は False）。"""
        return self._config is not None and self._state.current_year > 0

    @property
    def is_finished(self) -> bool:
        return self._config is not None and self._state.current_year >= self._config.total_years

    @property
    def is_risk_review_year(self) -> bool:
        """今がリスクを見直せる年（0 / 5 / 10 年目）かどうか。"""
        return self._state.current_year in RISK_REVIEW_YEARS
