"""Tests for grapheme segmentation and the GraphemeIndex coordinate mapping."""

import pytest

from resaltar.graphemes import GraphemeIndex, iter_grapheme_starts, split_graphemes

E_ACUTE = "e\u0301"
FLAG_JP = "\U0001f1ef\U0001f1f5"
FLAG_US = "\U0001f1fa\U0001f1f8"
FAMILY = "\U0001f468\u200d\U0001f469\u200d\U0001f467"
THUMBS_UP_MEDIUM = "\U0001f44d\U0001f3fd"


class TestSegmentation:
    """Cluster boundaries for the cases source text actually contains."""

    def test_ascii_is_one_cluster_per_char(self) -> None:
        assert split_graphemes("abc") == ["a", "b", "c"]

    def test_empty_text(self) -> None:
        assert split_graphemes("") == []
        assert list(iter_grapheme_starts("")) == []

    def test_combining_mark_joins_base(self) -> None:
        assert split_graphemes(f"caf{E_ACUTE}!") == ["c", "a", "f", E_ACUTE, "!"]

    def test_multiple_combining_marks(self) -> None:
        cluster = "a\u0301\u0323"
        assert split_graphemes(cluster + "b") == [cluster, "b"]

    def test_crlf_is_one_cluster(self) -> None:
        assert split_graphemes("a\r\nb") == ["a", "\r\n", "b"]

    def test_lf_cr_is_two_clusters(self) -> None:
        assert split_graphemes("\n\r") == ["\n", "\r"]

    def test_tab_is_its_own_cluster(self) -> None:
        assert split_graphemes("a\tb") == ["a", "\t", "b"]

    def test_combining_mark_after_control_stands_alone(self) -> None:
        assert split_graphemes("\n\u0301") == ["\n", "\u0301"]

    def test_regional_indicators_pair_into_flags(self) -> None:
        assert split_graphemes(FLAG_JP + FLAG_US) == [FLAG_JP, FLAG_US]

    def test_odd_regional_indicator_stands_alone(self) -> None:
        assert split_graphemes(FLAG_JP + "\U0001f1fa") == [FLAG_JP, "\U0001f1fa"]

    def test_zwj_emoji_sequence(self) -> None:
        assert split_graphemes(FAMILY + "x") == [FAMILY, "x"]

    def test_zwj_after_letter_does_not_pull_emoji(self) -> None:
        assert split_graphemes("a\u200d\U0001f600") == ["a\u200d", "\U0001f600"]

    def test_emoji_modifier(self) -> None:
        assert split_graphemes(THUMBS_UP_MEDIUM) == [THUMBS_UP_MEDIUM]

    def test_variation_selector(self) -> None:
        heart = "\u2764\ufe0f"
        assert split_graphemes(heart + "!") == [heart, "!"]

    def test_hangul_jamo_sequence(self) -> None:
        syllable = "\u1100\u1161\u11a8"
        assert split_graphemes(syllable + "a") == [syllable, "a"]

    def test_precomposed_hangul_with_trailing_jamo(self) -> None:
        # U+AC00 is an LV syllable, which accepts a trailing T jamo
        assert split_graphemes("\uac00\u11a8") == ["\uac00\u11a8"]

    def test_spacing_mark_joins(self) -> None:
        # DEVANAGARI LETTER KA + VOWEL SIGN AA (Mc)
        assert split_graphemes("\u0915\u093e") == ["\u0915\u093e"]

    def test_prepend_joins_following_character(self) -> None:
        # ARABIC NUMBER SIGN is a Prepend character
        assert split_graphemes("\u0600\u0661x") == ["\u0600\u0661", "x"]

    def test_prepend_does_not_join_backwards(self) -> None:
        assert split_graphemes("a\u0600b") == ["a", "\u0600b"]

    def test_prepend_before_control_stands_alone(self) -> None:
        assert split_graphemes("\u0600\n") == ["\u0600", "\n"]


class TestGraphemeIndex:
    """Mapping between code-point offsets and grapheme indices."""

    def test_build_ascii(self) -> None:
        index = GraphemeIndex.build("abc")
        assert index.starts == (0, 1, 2)
        assert index.length == 3
        assert len(index) == 3

    def test_build_combining(self) -> None:
        index = GraphemeIndex.build(f"caf{E_ACUTE}!")
        assert index.starts == (0, 1, 2, 3, 5)
        assert len(index) == 5
        assert index.length == 6

    def test_empty_index(self) -> None:
        index = GraphemeIndex.build("")
        assert len(index) == 0
        assert not index
        assert index.to_grapheme(5) == 0
        assert index.to_raw(0, 3) == (0, 0)

    def test_to_grapheme_floor(self) -> None:
        index = GraphemeIndex.build(f"caf{E_ACUTE}!")
        assert index.to_grapheme(3) == 3
        assert index.to_grapheme(4) == 3
        assert index.to_grapheme(5) == 4

    def test_to_grapheme_past_end(self) -> None:
        index = GraphemeIndex.build("abc")
        assert index.to_grapheme(99) == 2

    def test_to_raw(self) -> None:
        index = GraphemeIndex.build(f"caf{E_ACUTE}!")
        assert index.to_raw(3, 4) == (3, 5)
        assert index.to_raw(0, 5) == (0, 6)

    def test_to_raw_clamps(self) -> None:
        index = GraphemeIndex.build("abc")
        assert index.to_raw(-1, 10) == (0, 3)
        assert index.to_raw(2, 1) == (2, 2)

    def test_span_widens_to_cluster(self) -> None:
        index = GraphemeIndex.build(f"caf{E_ACUTE}!")
        # The raw match "caf" + "e" stops before the accent
        assert index.span(0, 4) == (0, 4)
        # A match starting on the accent belongs to the accented cluster
        assert index.span(4, 5) == (3, 4)

    def test_span_empty(self) -> None:
        index = GraphemeIndex.build("abc")
        assert index.span(2, 2) == (2, 2)
        assert index.span(2, 1) == (2, 2)

    def test_sub_is_rebased(self) -> None:
        text = f"a{E_ACUTE}cd"
        index = GraphemeIndex.build(text)
        sub = index.sub(1, 3)
        assert sub == GraphemeIndex.build(f"{E_ACUTE}c")
        assert sub.starts == (0, 2)
        assert sub.length == 3

    def test_sub_full_range(self) -> None:
        index = GraphemeIndex.build("hello")
        assert index.sub(0, 5) == index

    def test_equality_and_hash(self) -> None:
        a = GraphemeIndex.build("xyz")
        b = GraphemeIndex.build("xyz")
        assert a == b
        assert hash(a) == hash(b)
        assert a != GraphemeIndex.build("xy")

    def test_repr(self) -> None:
        assert repr(GraphemeIndex.build("ab")) == "GraphemeIndex(graphemes=2, length=2)"

    @pytest.mark.parametrize(
        "text",
        ["", "plain", f"caf{E_ACUTE}", FAMILY + FLAG_JP, "line\r\nnext", "\uac00\u11a8x"],
    )
    def test_starts_strictly_increasing(self, text: str) -> None:
        starts = GraphemeIndex.build(text).starts
        assert all(a < b for a, b in zip(starts, starts[1:]))
        if text:
            assert starts[0] == 0
            assert starts[-1] < len(text)
