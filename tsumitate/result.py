"""
tsumitate/result.py
シミュレーション結果の受け渡し

ProjectionEngine が最終年に到達したら、結果を ResultStore にコピーして保持する。
コピーは値渡し（履歴は pandas.Series に複製）なので、
後からエンジンを再スタートしても保存済みの結果は変わらない。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import pandas as pd

from tsumitate.returns import RiskTier

if TYPE_CHECKING:
    from tsumitate.engine import ProjectionEngine

logger = logging.getLogger(__name__)

# 履歴から年数を推定できないときの年数
FALLBACK_YEARS = 15


# ------------------------------------------------------------------ #
# シミュレーション結果
# ------------------------------------------------------------------ #
@dataclass
class SimulationResult:
    final_asset:          float
    principal:            float
    yearly_assets:        pd.Series    # index = 年（0 〜 N）、0年目は 0
    monthly_contribution: float
    risk_tier:            str
    months_per_year:      int = 12

    @classmethod
    def from_engine(cls, engine: "ProjectionEngine") -> "SimulationResult":
        history = list(engine.yearly_asset_history)
        return cls(
            final_asset          = engine.current_asset,
            principal            = engine.config.principal,
            yearly_assets        = pd.Series(history, index=range(len(history)), name="asset", dtype=float),
            monthly_contribution = engine.monthly_contribution,
            risk_tier            = engine.risk_tier,
            months_per_year      = engine.months_per_year,
        )

    @property
    def years(self) -> int:
        """履歴は「0年目 + 各年末」なので件数 - 1 が年数。"""
        count = len(self.yearly_assets)
        if count <= 1:
            return FALLBACK_YEARS
        return count - 1

    @property
    def profit(self) -> float:
        return self.final_asset - self.principal

    @property
    def profit_percent(self) -> float:
        if self.principal <= 0:
            return 0.0
        return self.profit / self.principal * 100

    def to_frame(self) -> pd.DataFrame:
        """年ごとの資産と、その年までの累計元本。"""
        annual = self.monthly_contribution * self.months_per_year
        years  = self.yearly_assets.index
        return pd.DataFrame(
            {
                "asset":     self.yearly_assets.values,
                "principal": [annual * y for y in years],
            },
            index=pd.Index(years, name="year"),
        )

    def summary(self) -> None:
        print("=" * 40)
        print(f"リスクタイプ : {RiskTier.label(self.risk_tier)}")
        print(f"毎月の積立額 : {self.monthly_contribution:>12,.0f} 円")
        print(f"期間         : {self.years:>12} 年")
        print("-" * 40)
        print(f"最終資産     : {self.final_asset:>12,.0f} 円")
        print(f"元本         : {self.principal:>12,.0f} 円")
        print(f"損益         : {self.profit:>+12,.0f} 円")
        print(f"損益率       : {self.profit_percent:>+11.1f} ％")
        print("=" * 40)

    def plot(self, show: bool = True):
        import matplotlib.pyplot as plt
        import platform

        # 日本語文字化け対策
        if platform.system() == "Windows":
            plt.rcParams["font.family"] = "MS Gothic"
        elif platform.system() == "Darwin":
            plt.rcParams["font.family"] = "AppleGothic"

        frame = self.to_frame()
        fig, ax = plt.subplots(figsize=(10, 6))

        ax.plot(frame.index, frame["asset"], marker="o", linewidth=2,
                color="#1f77b4", label="資産")
        ax.plot(frame.index, frame["principal"], linestyle="--", linewidth=1,
                color="gray", label="元本")
        ax.fill_between(frame.index, frame["asset"], alpha=0.2, color="#1f77b4")

        ax.set_title(f"つみたて資産の推移（{RiskTier.label(self.risk_tier)}）")
        ax.set_xlabel("年")
        ax.set_ylabel("資産額 (円)")
        ax.yaxis.set_major_formatter(plt.FuncFormatter(lambda x, _: f"{x:,.0f}"))
        ax.grid(True, linestyle="--", alpha=0.7)
        ax.legend()

        fig.tight_layout()
        if show:
            plt.show()
        return fig


# ------------------------------------------------------------------ #
# 結果の保持先（エンジンの result_sink）
# ------------------------------------------------------------------ #
class ResultStore:
    """
    シミュレーション結果の保持クラス

    エンジンに result_sink として渡しておくと、最終年到達時に
    set_result() が呼ばれて結果のコピーが保存される。
    """

    def __init__(self) -> None:
        self._result: SimulationResult | None = None

    @property
    def result(self) -> SimulationResult | None:
        return self._result

    def set_result(self, engine: "ProjectionEngine") -> SimulationResult:
        self._result = SimulationResult.from_engine(engine)
        logger.info(
            "結果を保存: 最終資産=%.0f 元本=%.0f 年数=%d",
            self._result.final_asset,
            self._result.principal,
            self._result.years,
        )
        return self._result

    def clear(self) -> None:
        self._result = None
