"""Tests for grammar packs, the rule dispatcher and the grammar registry."""

import pytest

from resaltar import (
    Annotator,
    MatcherError,
    RecursionDepthError,
    UnknownGrammarError,
    highlight,
    to_html,
)
from resaltar.grammars import (
    JULIA,
    MARKDOWN,
    TOML,
    Grammar,
    Rule,
    RuleKind,
    apply_rules,
    available_grammars,
    digits,
    get_grammar,
    keywords,
    operators,
    register_grammar,
    unregister_grammar,
)


def marked(a: Annotator) -> list[tuple[str, str]]:
    return [(a.text_of(m), m.label) for m in a.marks]


def assert_no_overlap(a: Annotator) -> None:
    marks = list(a.marks)
    for left, right in zip(marks, marks[1:]):
        assert left.end <= right.start


class TestRules:
    def test_constructors_set_kind(self) -> None:
        assert Rule.all("end", "end").kind is RuleKind.ALL
        assert Rule.char("1", "number", numeric=True).numeric
        assert Rule.between("[", "keys", "]").closer == "]"
        assert Rule.before("(", "funcn", until=[" "]).until == (" ",)
        assert Rule.after("::", "type", include_right=1).include_right == 1
        assert Rule.for_("\\", 1, "exit").length == 1
        assert Rule.line_after("#", "comment").kind is RuleKind.LINE_AFTER
        assert Rule.line_startswith("> ", "quote").kind is RuleKind.LINE_STARTSWITH
        inside = Rule.inside("string", [Rule.all("x", "y")], grammar="julia")
        assert inside.target == "string"
        assert inside.rules == (Rule.all("x", "y"),)
        assert inside.grammar == "julia"

    def test_rules_are_frozen(self) -> None:
        rule = Rule.all("end", "end")
        with pytest.raises(AttributeError):
            rule.label = "other"  # type: ignore[misc]

    def test_keywords_keep_order(self) -> None:
        assert [r.target for r in keywords(["if", "else"], "if")] == ["if", "else"]

    def test_operators_longest_first(self) -> None:
        rules = operators(["=", "==", "=", "<="], "op")
        assert [r.target for r in rules] == ["==", "<=", "="]

    def test_digits(self) -> None:
        rules = digits("number")
        assert [r.target for r in rules] == list("0123456789")
        assert all(r.numeric for r in rules)

    def test_apply_rules_counts_marks(self) -> None:
        a = Annotator("end x end")
        assert apply_rules(a, (Rule.all("end", "end"), Rule.all("x", "var"))) == 3

    def test_unknown_rule_kind(self) -> None:
        with pytest.raises(MatcherError, match="Unknown rule kind"):
            apply_rules(Annotator("x"), [Rule("bogus", "x", "y")])  # type: ignore[arg-type]

    def test_rule_order_is_priority(self) -> None:
        a = Annotator('"end" end')
        apply_rules(a, (Rule.between('"', "string"), Rule.all("end", "end")))
        assert marked(a) == [('"end"', "string"), ("end", "end")]

    def test_inside_rule_with_nested_rules(self) -> None:
        a = Annotator('x "a\\tb"')
        apply_rules(
            a,
            (Rule.between('"', "string"), Rule.inside("string", [Rule.for_("\\", 1, "exit")])),
        )
        assert marked(a) == [('"a', "string"), ("\\t", "exit"), ('b"', "string")]


class TestRegistry:
    def teardown_method(self) -> None:
        unregister_grammar("ini")
        unregister_grammar("loop")

    def test_builtins_registered(self) -> None:
        assert {"julia", "markdown", "toml"} <= set(available_grammars())

    def test_lookup_by_alias_case_insensitive(self) -> None:
        assert get_grammar("JL") is JULIA
        assert get_grammar("md") is MARKDOWN
        assert get_grammar("Toml") is TOML

    def test_unknown_grammar(self) -> None:
        with pytest.raises(UnknownGrammarError) as exc_info:
            get_grammar("cobol")
        err = exc_info.value
        assert err.name == "cobol"
        assert "julia" in err.available
        assert str(err).startswith("Unknown grammar: 'cobol'. Available: ")

    def test_unknown_grammar_is_key_error(self) -> None:
        with pytest.raises(KeyError):
            get_grammar("cobol")

    def test_register_and_unregister(self) -> None:
        ini = Grammar(
            name="ini",
            rules=(Rule.line_after(";", "comment"), Rule.between("[", "section", "]")),
            aliases=("cfg",),
        )
        assert register_grammar(ini) is ini
        assert get_grammar("cfg") is ini
        a = ini.annotate("[core]\n; note")
        assert marked(a) == [("[core]", "section"), ("; note", "comment")]
        assert unregister_grammar("ini") is ini
        with pytest.raises(UnknownGrammarError):
            get_grammar("cfg")

    def test_unregister_unknown_is_noop(self) -> None:
        assert unregister_grammar("never-registered") is None

    def test_inside_rule_with_unknown_grammar(self) -> None:
        a = Annotator("(x)")
        rules = (Rule.between("(", "group", ")"), Rule.inside("group", grammar="missing"))
        with pytest.raises(UnknownGrammarError):
            apply_rules(a, rules)

    def test_self_recursive_grammar_hits_depth_limit(self) -> None:
        register_grammar(
            Grammar(
                name="loop",
                rules=(Rule.between("(", "group", ")"), Rule.inside("group", grammar="loop")),
            )
        )
        with pytest.raises(RecursionDepthError):
            get_grammar("loop").annotate("(x)")


class TestJulia:
    def test_function_signature(self) -> None:
        a = JULIA.annotate('function example(x::String = "hello!")\n    x * " friend!"\nend')
        assert marked(a) == [
            ("function", "func"),
            ("example", "funcn"),
            ("::String", "type"),
            ("=", "op"),
            ('"hello!"', "string"),
            ("*", "op"),
            ('" friend!"', "string"),
            ("end", "end"),
        ]
        assert_no_overlap(a)

    def test_interpolation_is_highlighted_as_julia(self) -> None:
        a = JULIA.annotate('println("sum: $(a + 1) and $b")')
        assert marked(a) == [
            ("println", "funcn"),
            ('"sum: ', "string"),
            ("$(", "interp"),
            ("a ", "interp"),
            ("+", "op"),
            (" ", "interp"),
            ("1", "number"),
            (")", "interp"),
            (" and ", "string"),
            ("$b", "interp"),
            ('"', "string"),
        ]
        assert_no_overlap(a)

    def test_comments_take_priority(self) -> None:
        a = JULIA.annotate("x = 1 # end\n#= end =#\nend")
        assert marked(a) == [
            ("=", "op"),
            ("1", "number"),
            ("# end\n", "comment"),
            ("#= end =#", "comment"),
            ("end", "end"),
        ]

    def test_escape_inside_string(self) -> None:
        a = JULIA.annotate('"a\\nb"')
        assert marked(a) == [('"a', "string"), ("\\n", "exit"), ('b"', "string")]

    def test_macro_call_and_char(self) -> None:
        a = JULIA.annotate("@time f('c')")
        assert marked(a) == [("@time", "type"), ("f", "funcn"), ("'c'", "char")]

    def test_keyword_labels(self) -> None:
        a = JULIA.annotate("if x in xs\n    return true\nelse\nend")
        assert marked(a) == [
            ("if", "if"),
            ("in", "in"),
            ("return", "if"),
            ("true", "number"),
            ("else", "if"),
            ("end", "end"),
        ]

    def test_equality_is_one_operator(self) -> None:
        a = JULIA.annotate("a == b")
        assert marked(a) == [("==", "op")]

    def test_identifier_digits_unmarked(self) -> None:
        a = JULIA.annotate("x1 = 2")
        assert marked(a) == [("=", "op"), ("2", "number")]

    def test_style_table_registered(self) -> None:
        a = JULIA.annotate("x")
        assert a.styles.resolve("func").css() == "color:#fc038c;"
        assert a.styles.resolve("interp").css() == "color:darkred;"
        assert a.styles.resolve("nonexistent").css() == "color:#3D3D3D;"


class TestMarkdown:
    def test_inline_elements(self) -> None:
        text = "# Title\nSome **bold** and *it* with [key](http://x) and ``code``"
        a = MARKDOWN.annotate(text)
        assert marked(a) == [
            ("# Title", "heading"),
            ("**bold**", "bold"),
            ("*it*", "italic"),
            ("[key]", "keys"),
            ("(http://x)", "link"),
            ("``code``", "code"),
        ]

    def test_code_shields_emphasis(self) -> None:
        a = MARKDOWN.annotate("`a*b*c` *d*")
        assert marked(a) == [("`a*b*c`", "code"), ("*d*", "italic")]

    def test_quote_line(self) -> None:
        a = MARKDOWN.annotate("> quoted\nplain")
        assert marked(a) == [("> quoted", "point")]


class TestToml:
    def test_document(self) -> None:
        text = '[tool]\nname = "x"  # comment\nversion = 2\nflag = true'
        a = TOML.annotate(text)
        assert marked(a) == [
            ("[tool]", "keys"),
            ("=", "equals"),
            ('"x"', "string"),
            ("# comment\n", "comment"),
            ("=", "equals"),
            ("2", "number"),
            ("=", "equals"),
            ("true", "number"),
        ]

    def test_comment_rule_runs_before_strings(self) -> None:
        a = TOML.annotate('key = "#1"')
        # The quote left unpaired by the comment runs into it and is dropped
        assert ("#1\"", "comment") in marked(a)


class TestConveniences:
    def test_highlight_fragments_cover_text(self) -> None:
        text = 'function f(x)\n    println("hi $(x)")\nend'
        fragments = highlight(text, "julia")
        assert "".join(f.raw for f in fragments) == text
        assert fragments[0].label == "func"
        assert fragments[0].style == (("color", "#fc038c"),)

    def test_markup_in_source_is_kept(self) -> None:
        source = 'println("<br>" * "a&lt;b&nbsp;")'
        fragments = highlight(source, "julia")
        assert "".join(f.raw for f in fragments) == source
        assert ('"<br>"', "string") in marked(JULIA.annotate(source))

    def test_normalize_opt_in(self) -> None:
        fragments = highlight('println("<br>")', "julia", normalize=True)
        assert "".join(f.raw for f in fragments) == 'println("\n")'
        assert TOML.annotate("a&nbsp;=&nbsp;1", normalize=True).text == "a = 1"

    def test_to_html_escapes_source_entities(self) -> None:
        assert to_html("a&lt;b", "toml", css_class=None) == (
            '<span style="color:darkblue;">a&amp;lt;b</span>'
        )
        assert to_html("a&lt;b", "toml", css_class=None, normalize=True) == (
            '<span style="color:darkblue;">a&lt;b</span>'
        )

    def test_highlight_by_alias(self) -> None:
        assert [f.label for f in highlight("# Hi", "md")] == ["heading"]

    def test_highlight_empty(self) -> None:
        assert highlight("", "toml") == []

    def test_highlight_unknown_language(self) -> None:
        with pytest.raises(UnknownGrammarError):
            highlight("x", "cobol")

    def test_to_html(self) -> None:
        assert to_html("end", "julia") == '<span class="modiftxt" style="color:#b81870;">end</span>'

    def test_to_html_default_style(self) -> None:
        html = to_html("x y", "toml", css_class=None)
        assert html == '<span style="color:darkblue;">x&nbsp;y</span>'
