"""
tsumitate/settings.py
ゲーム設定（毎月のつみたて額・リスクタイプ・年数）

設定値の検証・丸めはここで行い、エンジンには検証済みの
SimulationConfig だけを渡す（エンジン側では再検証しない）。

.env / 環境変数で初期値を上書きできる:
  TSUMITATE_MONTHLY_AMOUNT   毎月のつみたて額（円）
  TSUMITATE_RISK             low / medium / high または 0 / 1 / 2
  TSUMITATE_TOTAL_YEARS      シミュレーション年数
  TSUMITATE_MONTHS_PER_YEAR  1年あたりの月数
  TSUMITATE_SEED             乱数シード（未設定なら毎回ランダム）
"""

from __future__ import annotations

import os
import math
import logging
from dataclasses import dataclass

from dotenv import load_dotenv

from tsumitate.engine import SimulationConfig
from tsumitate.returns import RiskTier

logger = logging.getLogger(__name__)

# ------------------------------------------------------------------ #
# 定数
# ------------------------------------------------------------------ #
DEFAULT_MONTHLY_AMOUNT  = 10_000
DEFAULT_RISK_TIER       = RiskTier.MEDIUM
DEFAULT_TOTAL_YEARS     = 15
DEFAULT_MONTHS_PER_YEAR = 12

# 積立額入力の範囲と刻み（円）
MIN_MONTHLY_AMOUNT  = 1_000
MAX_MONTHLY_AMOUNT  = 100_000
MONTHLY_AMOUNT_STEP = 1_000


class InvalidConfig(ValueError):
    """設定値がシミュレーションに使えない。"""


def snap_monthly_amount(amount: float) -> int:
    """積立額を [MIN, MAX] に収め、MONTHLY_AMOUNT_STEP 刻みに丸める。"""
    if not math.isfinite(amount):
        raise InvalidConfig(f"積立額が数値ではありません: {amount!r}")
    snapped = round(amount / MONTHLY_AMOUNT_STEP) * MONTHLY_AMOUNT_STEP
    return int(min(max(snapped, MIN_MONTHLY_AMOUNT), MAX_MONTHLY_AMOUNT))


def parse_risk_tier(value: str) -> str:
    """"low" / "medium" / "high" または "0" / "1" / "2" をリスクタイプに変換する。"""
    text = str(value).strip().lower()
    if text in RiskTier.ALL:
        return text
    if text.isdigit():
        return RiskTier.from_index(int(text))
    raise InvalidConfig(f"不明なリスクタイプです: {value!r}")


def validate_config(config: SimulationConfig) -> SimulationConfig:
    if config.monthly_contribution < 0:
        raise InvalidConfig(f"積立額が負です: {config.monthly_contribution}")
    if config.total_years <= 0:
        raise InvalidConfig(f"年数は 1 以上にしてください: {config.total_years}")
    if config.months_per_year <= 0:
        raise InvalidConfig(f"月数は 1 以上にしてください: {config.months_per_year}")
    if config.risk_tier not in RiskTier.ALL:
        raise InvalidConfig(f"不明なリスクタイプです: {config.risk_tier!r}")
    return config


# ------------------------------------------------------------------ #
# ゲーム設定
# ------------------------------------------------------------------ #
@dataclass
class GameSettings:
    monthly_amount:  int = DEFAULT_MONTHLY_AMOUNT
    risk_tier:       str = DEFAULT_RISK_TIER
    total_years:     int = DEFAULT_TOTAL_YEARS
    months_per_year: int = DEFAULT_MONTHS_PER_YEAR
    seed:            int | None = None

    @classmethod
    def from_env(cls) -> "GameSettings":
        """
        .env / 環境変数から設定を読み込む。

        読めない値はデフォルトのまま使い、警告ログを出す。
        """
        load_dotenv()
        settings = cls()

        amount = _env_int("TSUMITATE_MONTHLY_AMOUNT", DEFAULT_MONTHLY_AMOUNT)
        settings.set_monthly_amount(amount)

        risk = os.getenv("TSUMITATE_RISK", DEFAULT_RISK_TIER)
        try:
            settings.set_risk_tier(parse_risk_tier(risk))
        except InvalidConfig:
            logger.warning("TSUMITATE_RISK=%r を読めないためデフォルトを使用します。", risk)

        settings.total_years     = _env_positive_int("TSUMITATE_TOTAL_YEARS", DEFAULT_TOTAL_YEARS)
        settings.months_per_year = _env_positive_int("TSUMITATE_MONTHS_PER_YEAR", DEFAULT_MONTHS_PER_YEAR)

        seed = os.getenv("TSUMITATE_SEED", "")
        if seed:
            settings.seed = _env_int("TSUMITATE_SEED", None)
        return settings

    def set_monthly_amount(self, amount: int) -> None:
        # マイナスは 0 に丸める
        self.monthly_amount = max(0, int(amount))

    def set_risk_tier(self, risk_tier: str) -> None:
        if risk_tier not in RiskTier.ALL:
            raise InvalidConfig(f"不明なリスクタイプです: {risk_tier!r}")
        self.risk_tier = risk_tier

    def set_risk_tier_by_index(self, index: int) -> None:
        self.risk_tier = RiskTier.from_index(index)

    def reset_to_default(self) -> None:
        self.monthly_amount  = DEFAULT_MONTHLY_AMOUNT
        self.risk_tier       = DEFAULT_RISK_TIER
        self.total_years     = DEFAULT_TOTAL_YEARS
        self.months_per_year = DEFAULT_MONTHS_PER_YEAR

    def reset_choices(self) -> None:
        """積立額とリスクだけをデフォルトに戻す（年数・月数はそのまま）。"""
        self.monthly_amount = DEFAULT_MONTHLY_AMOUNT
        self.risk_tier      = DEFAULT_RISK_TIER

    def to_config(self) -> SimulationConfig:
        return validate_config(SimulationConfig(
            monthly_contribution = self.monthly_amount,
            risk_tier            = self.risk_tier,
            total_years          = self.total_years,
            months_per_year      = self.months_per_year,
        ))


def load_config(settings: GameSettings = None) -> SimulationConfig:
    """
    設定から SimulationConfig を作る。

    settings が無い場合はデフォルト値（毎月10,000円・中リスク・15年）で続行する。
    """
    if settings is None:
        logger.warning("ゲーム設定が見つからないため、デフォルト値を使用します。")
        settings = GameSettings()
    return settings.to_config()


# ------------------------------------------------------------------ #
# 環境変数ヘルパー
# ------------------------------------------------------------------ #
def _env_int(key: str, default):
    raw = os.getenv(key, "")
    if raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("%s=%r を整数として読めないためデフォルトを使用します。", key, raw)
        return default


def _env_positive_int(key: str, default: int) -> int:
    value = _env_int(key, default)
    if value <= 0:
        logger.warning("%s=%r は 1 以上にしてください。デフォルトを使用します。", key, value)
        return default
    return value
