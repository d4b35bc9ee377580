"""Named constants — keywords, glyph tables and default limits."""

from __future__ import annotations

DEFAULT_MAX_STEPS = 10000

TAB_WIDTH = 4

INITIAL_LINE = 0

# ── identifiers ──────────────────────────────────────────────────

# ASCII letters, hiragana, katakana (with the prolonged sound mark) and kanji;
# digits and underscores may follow the first character.
IDENT_CHARS = r"A-Za-zぁ-ゖァ-ヺー々一-鿿"
IDENT_PATTERN = rf"[{IDENT_CHARS}][{IDENT_CHARS}0-9_]*"

# ── line-level keywords ──────────────────────────────────────────

COMMENT_PREFIXES: tuple[str, ...] = ("//", "#")
INLINE_COMMENT_MARKER = "//"

ASSIGN_OPERATORS = r"(?:=|←)"
HEADER_COLON = r"\s*[:：]?"

OUTPUT_SUFFIX = "を表示する"

STRING_DELIMITERS: dict[str, str] = {
    "「": "」",
    '"': '"',
}

# ── operator normalization ───────────────────────────────────────

FULLWIDTH_TRANSLATION = str.maketrans(
    {
        "０": "0",
        "１": "1",
        "２": "2",
        "３": "3",
        "４": "4",
        "５": "5",
        "６": "6",
        "７": "7",
        "８": "8",
        "９": "9",
        "（": "(",
        "）": ")",
        "［": "[",
        "］": "]",
        "＋": "+",
        "－": "-",
        "−": "-",
        "×": "*",
        "＊": "*",
        "／": "/",
        "％": "%",
        "＝": "=",
        "＞": ">",
        "＜": "<",
        "　": " ",
    }
)

# Multi-character spellings, applied in order after FULLWIDTH_TRANSLATION.
OPERATOR_SPELLINGS: tuple[tuple[str, str], ...] = (
    ("≧", " >= "),
    ("≥", " >= "),
    ("≦", " <= "),
    ("≤", " <= "),
    ("≠", " != "),
    ("÷", " // "),
    ("かつ", " && "),
    ("または", " || "),
    ("でない", " ¬ "),
)

AND_WORDS: frozenset[str] = frozenset({"&&", "and", "AND"})
OR_WORDS: frozenset[str] = frozenset({"||", "or", "OR"})
NOT_WORDS: frozenset[str] = frozenset({"!", "not", "NOT", "¬"})
POSTFIX_NOT = "¬"

COMPARISON_OPERATORS: frozenset[str] = frozenset(
    {"=", "==", "!=", "<", ">", "<=", ">="}
)

# ── snapshot descriptions ────────────────────────────────────────

DESC_INITIAL = "変数を初期化します。"
DESC_FINISHED = "プログラムの実行が終了しました。"
DESC_ASSIGN = "『{name}』に{value}を代入します。"
DESC_ARRAY_DECLARE = "配列『{name}』を {values} で初期化します。"
DESC_INDEX_ASSIGN = "『{name}[{index}]』に{value}を代入します。"
DESC_FOR_ITERATION = "繰り返し: {name} = {value} として開始します。"
DESC_WHILE_ITERATION = "条件『{condition}』が成り立つので繰り返します。"
DESC_CONDITION_TRUE = "条件判定: 『{condition}』は成立します。"
DESC_CONDITION_FALSE = "条件判定: 『{condition}』は成立しません。"
DESC_OUTPUT = "「{text}」を表示します。"

COMPILE_ERROR_MESSAGE = "プログラムの実行中にエラーが発生しました。"

# ── demo program ─────────────────────────────────────────────────

DEMO_PROGRAM = """\
合計 = 0
i を 1 から 5 まで 1 ずつ増やしながら繰り返す:
    合計 = 合計 + i
    「i = 」, i, 「 : 合計 = 」, 合計 を表示する
もし 合計 > 10 ならば:
    「10を超えました」を表示する
そうでなければ:
    「10以下です」を表示する
"""
