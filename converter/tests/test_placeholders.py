"""
Tests for the placeholder vault and the directive lexicon.
"""

from converter.markdown.directives import (
    anchor_link_directive,
    code_directive,
    find_directives,
    image_directive,
    inline_directive,
    is_block_token,
    parse_close,
    parse_inline,
    parse_open,
)
from converter.markdown.placeholders import TOKEN_PATTERN, PlaceholderVault


class TestPlaceholderVault:
    """Tests for protect/restore."""

    def test_protect_then_restore_gives_back_the_source(self):
        vault = PlaceholderVault()
        source = 'Hello {{user name="a_b*c"}} and {{#note title="<b>X</b>"}}body{{/note}}'

        protected = vault.protect(source)

        assert "{{" not in protected
        assert len(vault) == 3
        assert vault.restore(protected) == source

    def test_restore_is_idempotent(self):
        vault = PlaceholderVault()
        restored = vault.restore(vault.protect("a {{x}} b"))

        assert vault.restore(restored) == restored == "a {{x}} b"

    def test_unknown_tokens_are_left_alone(self):
        vault = PlaceholderVault()
        foreign = PlaceholderVault()
        token = foreign.stash("{{other}}")

        assert vault.restore(f"keep {token}") == f"keep {token}"

    def test_text_without_directives_is_untouched(self):
        vault = PlaceholderVault()

        assert vault.protect("no directives {here}") == "no directives {here}"
        assert len(vault) == 0

    def test_tokens_are_unique_within_a_vault(self):
        vault = PlaceholderVault()
        first = vault.stash("{{a}}")
        second = vault.stash("{{a}}")

        assert first != second
        assert TOKEN_PATTERN.fullmatch(first)

    def test_vaults_do_not_share_state(self):
        one = PlaceholderVault()
        two = PlaceholderVault()
        token = one.stash("{{from-one}}")

        assert token not in two
        assert two.original(token) is None
        assert one.original(token) == "{{from-one}}"

    def test_nested_stash_restores_completely(self):
        vault = PlaceholderVault()
        inner = vault.protect("{{#x}}")
        outer = vault.stash(f"{inner}\nbody\n{{{{/x}}}}")

        assert vault.restore(outer) == "{{#x}}\nbody\n{{/x}}"

    def test_tokens_in_reports_originals(self):
        vault = PlaceholderVault()
        text = vault.protect("{{#a}} and {{/a}}")

        originals = [original for _, original in vault.tokens_in(text)]

        assert originals == ["{{#a}}", "{{/a}}"]


class TestDirectiveLexicon:
    """Tests for recognising and building directive tokens."""

    def test_open_close_and_inline(self):
        assert parse_open('{{#confluence-info title="Heads up"}}') == "confluence-info"
        assert parse_open("  {{#a}}  ") == "a"
        assert parse_close("{{/confluence-info}}") == "confluence-info"
        assert parse_inline('{{confluence-anchor name="x"}}') == "confluence-anchor"
        assert parse_open("{{/a}}") is None
        assert parse_close("{{#a}}") is None
        assert parse_inline("{{#a}}") is None

    def test_block_token_must_be_the_whole_text(self):
        assert is_block_token("{{#a}}")
        assert is_block_token("{{/a}}")
        assert not is_block_token("{{a}}")
        assert not is_block_token("text {{#a}}")

    def test_find_directives(self):
        found = [m.group(0) for m in find_directives("x {{a}} y {{#b k=\"v\"}} z")]

        assert found == ["{{a}}", '{{#b k="v"}}']

    def test_image_directive_strips_encoded_quotes(self):
        directive = image_directive("%22images/a.png%22", "An image", width="200")

        assert directive == '{{confluence-image src="images/a.png" alt="An image" width="200"}}'

    def test_code_directive(self):
        directive = code_directive("print(1)\n\n", "python")

        assert directive == (
            '{{#confluence-code language="python" linenumbers=true}}\n'
            "print(1)\n"
            "{{/confluence-code}}"
        )

    def test_parameters_are_quoted(self):
        assert inline_directive("x", ("title", 'say "hi"')) == '{{x title="say &quot;hi&quot;"}}'

    def test_anchor_link_skips_missing_tooltip(self):
        assert anchor_link_directive("1", "footnote-1") == (
            '{{confluence-link type="anchor" text="1" anchor="footnote-1"}}'
        )
