import difflib
import re

from column_visibility import unhide_column

_PUNCT_TO_SPACE = re.compile(r"[\(\)\[\]\{\},.:/+=_-]")
_WHITESPACE = re.compile(r"\s+")
_VOWELS = re.compile(r"[aeiou]")


def _normalize_text(text):
    if not isinstance(text, str):
        return ""
    lowered = text.lower()
    lowered = _PUNCT_TO_SPACE.sub(" ", lowered)
    lowered = _WHITESPACE.sub(" ", lowered).strip()
    return lowered


def _skeleton_word(word):
    return _VOWELS.sub("", word)


def _skeleton_text(text):
    words = _normalize_text(text).split()
    return " ".join(_skeleton_word(w) for w in words)


def _is_subsequence(needle, haystack):
    it = iter(haystack)
    for ch in needle:
        for val in it:
            if val == ch:
                break
        else:
            return False
    return True


def _token_score(q_word, c_word):
    qs = _skeleton_word(q_word) or q_word
    cs = _skeleton_word(c_word) or c_word

    score = 0.0
    if cs.startswith(qs):
        score = 1.0
    elif _is_subsequence(qs, cs):
        score = 0.7

    # a plain prefix match counts even when skeletons differ
    if c_word.startswith(q_word):
        score = max(score, 0.9)
    return score


def _phrase_score(q_words, c_words):
    m = len(q_words)
    n = len(c_words)
    if m == 0 or n == 0 or m > n:
        return 0.0

    best = 0.0
    for i in range(n - m + 1):
        window = c_words[i : i + m]
        scores = [_token_score(qw, cw) for qw, cw in zip(q_words, window)]
        avg = sum(scores) / m
        if avg > best:
            best = avg
    return best


def score_title(query, title) -> float:
    """0 when ``query`` cannot name ``title``; higher is a better match."""
    normalized_query = _normalize_text(query)
    norm_title = _normalize_text(title)
    if not normalized_query or not norm_title:
        return 0.0
    if not _is_subsequence(normalized_query.replace(" ", ""), norm_title.replace(" ", "")):
        return 0.0

    q_words = normalized_query.split()
    c_words = norm_title.split()
    overall = difflib.SequenceMatcher(None, _skeleton_text(query), _skeleton_text(title)).ratio()
    phrase = _phrase_score(q_words, c_words)

    score = 0.7 * overall + 0.3 * phrase
    if phrase >= 0.92:
        score = max(score, 0.9 * phrase)
    if norm_title == normalized_query:
        score += 1.0
    return score


def rank_columns(state, query) -> list[int]:
    """Full column indices matching ``query``, best first, ties in column order.

    An empty query lists every column in order, hidden ones included.
    """
    if not _normalize_text(query):
        return list(range(len(state.specs)))
    scored = []
    for idx, spec in enumerate(state.specs):
        score = score_title(query, spec.title)
        if score > 0:
            scored.append((-score, idx))
    scored.sort()
    return [idx for _, idx in scored]


def best_column(state, query):
    ranked = rank_columns(state, query)
    return ranked[0] if ranked else None


def jump_to_column(state, col: int) -> bool:
    """Put the cursor on ``col``, showing it first if it was hidden."""
    if col < 0 or col >= len(state.specs):
        return False
    unhide_column(state, col)
    state.col_cursor = col
    return True
