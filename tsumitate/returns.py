"""
tsumitate/returns.py
リスクタイプと月次リターンモデル

新しいリターンモデルを作るときは BaseReturnModel を継承し、
monthly_change_percent() メソッドだけを実装してください。

リスク別の月次変動幅（一様分布・両端含む、単位 %）:
  低リスク： -1% ～ +2%
  中リスク： -3% ～ +4%
  高リスク： -6% ～ +8%

正規分布ではなく一様分布で、上側に厚い非対称レンジ
（長期ではプラスに寄る）になっている。
"""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np


# ------------------------------------------------------------------ #
# リスクタイプ
# ------------------------------------------------------------------ #
class RiskTier:
    LOW    = "low"      # 低リスク
    MEDIUM = "medium"   # 中リスク
    HIGH   = "high"     # 高リスク

    ALL = (LOW, MEDIUM, HIGH)

    _LABELS = {
        LOW:    "低リスク",
        MEDIUM: "中リスク",
        HIGH:   "高リスク",
    }

    @classmethod
    def from_index(cls, index: int) -> str:
        """0/1/2 からリスクタイプを返す。範囲外は中リスク。"""
        if 0 <= index < len(cls.ALL):
            return cls.ALL[index]
        return cls.MEDIUM

    @classmethod
    def label(cls, tier: str) -> str:
        return cls._LABELS.get(tier, "不明なリスク")


# 月次変動率レンジ（%）: (下限, 上限)
MONTHLY_RANGES: dict[str, tuple[float, float]] = {
    RiskTier.LOW:    (-1.0, 2.0),
    RiskTier.MEDIUM: (-3.0, 4.0),
    RiskTier.HIGH:   (-6.0, 8.0),
}


# ------------------------------------------------------------------ #
# リターンモデル基底クラス
# ------------------------------------------------------------------ #
class BaseReturnModel(ABC):
    """
    月次リターンモデル基底クラス

    エンジンとの契約:
      monthly_change_percent() は 1 ヶ月ごとに 1 回呼ばれる。
      戻り値は % 単位（+1.5% なら 1.5）。
      エンジンは asset *= 1 + 戻り値 / 100 で資産に反映する。
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """モデル名を返す。"""

    @abstractmethod
    def monthly_change_percent(self, risk_tier: str) -> float:
        """
        その月の変動率（%）を返す。

        Args:
            risk_tier: RiskTier.LOW / MEDIUM / HIGH

        Returns:
            月次変動率（%）
        """


class UniformReturnModel(BaseReturnModel):
    """
    リスク別レンジから一様乱数で月次変動率を引くモデル（ゲーム本番用）

    Args:
        rng:  numpy の Generator（テストでは固定シードのものを渡す）
        seed: rng 未指定時に default_rng へ渡すシード
    """

    def __init__(self, rng: np.random.Generator = None, seed: int = None) -> None:
        self.rng = rng if rng is not None else np.random.default_rng(seed)

    @property
    def name(self) -> str:
        return "Uniform"

    def monthly_change_percent(self, risk_tier: str) -> float:
        bounds = MONTHLY_RANGES.get(risk_tier)
        if bounds is None:
            return 0.0
        low, high = bounds
        return float(self.rng.uniform(low, high))


class FixedReturnModel(BaseReturnModel):
    """毎月同じ変動率を返す決定的モデル。0% なら積立額だけが積み上がる。"""

    def __init__(self, percent: float = 0.0) -> None:
        self.percent = percent

    @property
    def name(self) -> str:
        return f"Fixed({self.percent:+.1f}%)"

    def monthly_change_percent(self, risk_tier: str) -> float:
        return self.percent
