import pytest

from road_spelling.domain.checks.name_matching import (
    CJK_NUMERAL_CHARS,
    CJKNumeral,
    TokenKind,
    edit_distance_is_one,
    identifier_tokens,
    is_identifier,
    is_spelling_inconsistent,
    same_identifiers,
    tokenize,
)

# ---------- Tokens


@pytest.mark.parametrize(
    "token",
    ["6", "12c", "Y6", "I-95", "A", "A.", "(A", "(A)", ".A", "三", "三号", "廿", "٣"],
)
def test_identifier_tokens(token):
    assert is_identifier(token)


@pytest.mark.parametrize("token", ["Main", "St", "Street", "St.", "AB", "(AB)", "中山", ""])
def test_word_tokens(token):
    assert not is_identifier(token)


def test_cjk_table_has_thirteen_numerals():
    assert len(CJKNumeral) == 13
    assert len(CJK_NUMERAL_CHARS) == 13
    assert "〇" in CJK_NUMERAL_CHARS and "卅" in CJK_NUMERAL_CHARS


def test_tokenize_tags_each_token():
    toks = tokenize("Road A  12c Street")
    assert [t.text for t in toks] == ["Road", "A", "12c", "Street"]
    assert [t.kind for t in toks] == [
        TokenKind.WORD,
        TokenKind.IDENTIFIER,
        TokenKind.IDENTIFIER,
        TokenKind.WORD,
    ]


def test_tokenize_empty_and_blank_names():
    assert tokenize("") == []
    assert tokenize("   \t ") == []
    assert tokenize(None) == []
    assert identifier_tokens("   ") == []


def test_ideographic_space_splits_tokens():
    assert identifier_tokens("国道　三") == ["三"]


def test_no_break_space_splits_tokens():
    assert identifier_tokens("Road\u00a0A") == ["A"]
    assert not is_spelling_inconsistent("Road\u00a0A", "Road\u00a0B")


def test_same_identifiers_counts_repeats():
    assert same_identifiers("Main Street", "Maim Street")
    assert same_identifiers("Route 6 East", "Route 6 Eats")
    assert not same_identifiers("Route 6", "Route 9")
    assert not same_identifiers("Route 6", "Route")
    assert same_identifiers("A A Road", "A Road")


# ---------- Edit distance


@pytest.mark.parametrize(
    "a,b",
    [
        ("Maim Street", "Main Street"),  # substitution
        ("Main Steet", "Main Street"),  # insertion
        ("Main Street", "Main Steet"),  # deletion
        ("ain Street", "Main Street"),  # at the front
        ("Main Street", "Main Streets"),  # at the back
        ("Main St", "Man St"),
        ("中山路", "中止路"),
    ],
)
def test_edit_distance_one(a, b):
    assert edit_distance_is_one(a, b)


@pytest.mark.parametrize(
    "a,b",
    [
        ("Main Street", "Moin Stret"),
        ("abc", "aXbd"),
        ("Straße", "Strasse"),
        ("ab", "ba"),  # transposition is two substitutions
        ("Main", "Main"),
        ("Main", "Ma"),
    ],
)
def test_edit_distance_not_one(a, b):
    assert not edit_distance_is_one(a, b)


# ---------- Full predicate


def test_spec_examples():
    assert is_spelling_inconsistent("Maim Street", "Main Street")
    assert is_spelling_inconsistent("Main Steet", "Main Street")
    assert not is_spelling_inconsistent("Main Street", "Moin Stret")
    assert not is_spelling_inconsistent("Route 6", "Route 9")
    assert not is_spelling_inconsistent("Road A", "Road B")


def test_cjk_numerals_are_identifiers():
    assert not is_spelling_inconsistent("国道三号", "国道四号")
    assert not is_spelling_inconsistent("三 号线", "四 号线")
    # shared numeral, misspelt word
    assert is_spelling_inconsistent("三 中山路", "三 中止路")


@pytest.mark.parametrize("s", ["Main Street", "A", "Route 6", "国道三号", " "])
def test_identical_names_never_flagged(s):
    assert not is_spelling_inconsistent(s, s)


@pytest.mark.parametrize(
    "a,b", [("Main", "Main Street"), ("Elm", "Elmwood"), ("Oak Street", "Oak St")]
)
def test_length_gate(a, b):
    assert not is_spelling_inconsistent(a, b)
    assert not is_spelling_inconsistent(b, a)


def test_missing_names_never_match():
    assert not is_spelling_inconsistent(None, "Main Street")
    assert not is_spelling_inconsistent("Main Street", "")


@pytest.mark.parametrize(
    "a,b",
    [
        ("Maim Street", "Main Street"),
        ("Main Steet", "Main Street"),
        ("Route 6", "Route 9"),
        ("Main Street", "Moin Stret"),
    ],
)
def test_symmetric(a, b):
    assert is_spelling_inconsistent(a, b) == is_spelling_inconsistent(b, a)
