"""
tsumitate/messages.py
表示用テキスト（金額・変動率の書式、キャラクターのコメント）
"""

from __future__ import annotations

# 変動率がこの幅以内なら「横ばい（→）」扱い
FLAT_BAND = 0.01


def format_yen(amount: float) -> str:
    return f"{amount:,.0f}円"


def format_change(percent: float) -> str:
    """例: +6.8％ ↑ / -2.0％ ↓ / 0.0％ →"""
    if percent > FLAT_BAND:
        arrow = "↑"
    elif percent < -FLAT_BAND:
        arrow = "↓"
    else:
        arrow = "→"
    text = f"{percent:+.1f}"
    if text in ("+0.0", "-0.0"):
        text = "0.0"
    return f"{text}％ {arrow}"


def year_comment(change_percent: float, year: int, total_years: int) -> str:
    """1年ごとの結果に対するコメント。"""
    is_last_year = year >= total_years

    if change_percent > 5:
        if is_last_year:
            return "最後の年に大きくふえたね！おつかれさま！"
        return "今年は大きくふえたね！この調子でつみたてしていこう！"
    if change_percent > 0.1:
        return "すこしずつだけど、ちゃんとふえているよ。長く続けるのがコツだよ！"
    if change_percent > -0.1:
        return "今年はあまり動かなかったみたい。こんな年もあるよ。"
    if change_percent > -5:
        return "すこしさがっちゃったけど、長い目で見ていこう！つみたては続けることが大事だよ。"
    return "大きくさがった年だったね…。でも、リスクを知ることも大事な学びだよ。"


def final_comment(profit_percent: float, years: int) -> str:
    """最終結果（損益率）に対するコメント。"""
    head = f"{years}年間、おつかれさま！\n"

    if profit_percent > 50:
        return head + "大きくふやすことができたね。長くつみたてる力がよくわかる結果だよ。"
    if profit_percent > 10:
        return head + "コツコツつみたてることで、しっかりと資産が育ったね。"
    if profit_percent > 0.1:
        return head + "ゆっくりだけど、ちゃんとふえているね。長期投資らしい結果だよ。"
    if profit_percent > -5:
        return head + "ほとんど横ばいだったけど、こういう結果になることもあるんだ。リスクや期間を変えて試してみよう。"
    return head + "今回はマイナスになってしまったけれど、リスクの大きさや期間の大事さを学べたはずだよ。"
