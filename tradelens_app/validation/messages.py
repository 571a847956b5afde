"""
User-visible note catalog.

Notes are surfaced verbatim to the end user, so each key has a rendering per
supported locale. Japanese is the original UI language; English is the
default.
"""

from typing import Any

MESSAGES: dict[str, dict[str, str]] = {
    "en": {
        "entry_snapped": "entry price rounded to tick increment",
        "sl_snapped": "stop-loss price rounded to tick increment",
        "buy_sl_not_below_entry": (
            "stop-loss at or above entry; should be below entry or below a structural support."
        ),
        "buy_tp_not_above_entry": "take-profit contains a value at or below entry.",
        "buy_sl_above_support": (
            "stop-loss sits above the nearest support; vulnerable to a stop-hunt wick."
        ),
        "sell_sl_not_above_entry": (
            "stop-loss at or below entry; should be above entry or above a structural resistance."
        ),
        "sell_tp_not_below_entry": "take-profit contains a value at or above entry.",
        "sell_sl_below_resistance": (
            "stop-loss sits below the nearest resistance; vulnerable to a stop-hunt wick."
        ),
        "orderbook_ticks_adjusted": "order-book prices corrected to tick increment: {count} level(s)",
        "orderbook_gaps_irregular": (
            "order-book price spacing is irregular (possible fill/display latency or reference drift)"
        ),
        "stub_decision_parse": "decision output failed validation; returning fail-safe response",
        "stub_extraction_parse": "extraction output could not be parsed; returning fail-safe response",
        "stub_extraction_failed": "extraction failed (check keys, model and provider response)",
        "stub_active": "analysis is returning a fail-safe stub",
        "stub_rationale_fallback": "no key configured or model output could not be shaped; simplified response",
        "stub_rationale_images": "images received: {count}",
        "stub_rationale_hold": "no clear edge established; standing aside",
        "base_scenario_conditions": "base scenario under current assumptions",
    },
    "ja": {
        "entry_snapped": "注: エントリ価格を呼値刻みに丸めました",
        "sl_snapped": "注: 損切価格を呼値刻みに丸めました",
        "buy_sl_not_below_entry": "警告: 損切がエントリ以上です。エントリ直下または直近サポート下に設定を検討。",
        "buy_tp_not_above_entry": "警告: 利確候補にエントリ以下の値が含まれています。",
        "buy_sl_above_support": "注意: 損切が直近サポートより上です。ノイズで狩られる可能性。",
        "sell_sl_not_above_entry": "警告: 損切がエントリ以下です。エントリ直上または直近レジスタンス上に設定を検討。",
        "sell_tp_not_below_entry": "警告: 利確候補にエントリ以上の値が含まれています。",
        "sell_sl_below_resistance": "注意: 損切が直近レジスタンスより下です。ノイズで狩られる可能性。",
        "orderbook_ticks_adjusted": "板の価格を呼値刻みに補正: {count}箇所",
        "orderbook_gaps_irregular": "板の価格間隔が不規則です（約定/表示の遅延や参照ズレの可能性）",
        "stub_decision_parse": "要約JSONの検証に失敗したためスタブ返却",
        "stub_extraction_parse": "抽出JSONの解析に失敗したためスタブ返却",
        "stub_extraction_failed": "抽出に失敗（キー/モデル/レスポンス確認）",
        "stub_active": "解析はフェイルセーフでスタブ返却中",
        "stub_rationale_fallback": "キー未設定またはモデル応答の整形に失敗したため簡易応答",
        "stub_rationale_images": "受領画像: {count}枚",
        "stub_rationale_hold": "明確な優位性が未確定のため様子見",
        "base_scenario_conditions": "現状の前提に基づく基本シナリオ",
    },
}

SUPPORTED_LOCALES = frozenset(MESSAGES)
DEFAULT_LOCALE = "en"


def message(key: str, locale: str = DEFAULT_LOCALE, **params: Any) -> str:
    """
    Render a note in the requested locale.

    Unknown locales fall back to English; ``params`` fill ``{placeholders}``.

    Raises:
        KeyError: If key is not in the catalog
    """
    catalog = MESSAGES.get(locale, MESSAGES[DEFAULT_LOCALE])
    text = catalog[key]
    return text.format(**params) if params else text
