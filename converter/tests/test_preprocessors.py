"""
Tests for the source-level preprocessors.
"""

from converter.markdown.placeholders import PlaceholderVault
from converter.markdown.preprocessors import apply_preprocessors
from converter.markdown.preprocessors.directive_lines import isolate_directive_lines
from converter.markdown.preprocessors.protect_source import protect_source_directives
from converter.markdown.preprocessors.utils import iter_lines_with_fence_state
from converter.markdown.preprocessors.verbatim_regions import stash_verbatim_regions


def make_context(**extra):
    return {"vault": PlaceholderVault(), **extra}


class TestFenceState:
    def test_fence_lines_are_flagged(self):
        lines = ["a", "```python", "{{#x}}", "```", "b"]

        flags = [in_fence for _, _, in_fence in iter_lines_with_fence_state(lines)]

        assert flags == [False, True, True, True, False]

    def test_shorter_fence_does_not_close(self):
        lines = ["````", "```", "x", "````", "y"]

        flags = [in_fence for _, _, in_fence in iter_lines_with_fence_state(lines)]

        assert flags == [True, True, True, True, False]


class TestDirectiveLines:
    def test_close_after_list_gets_its_own_paragraph(self):
        text = "{{#note}}\n- one\n- two\n{{/note}}"

        assert isolate_directive_lines(text, {}) == "{{#note}}\n\n- one\n- two\n\n{{/note}}"

    def test_existing_blank_lines_are_not_doubled(self):
        text = "{{#note}}\n\nbody\n\n{{/note}}"

        assert isolate_directive_lines(text, {}) == text

    def test_fenced_code_is_untouched(self):
        text = "```\nx\n{{/note}}\n```"

        assert isolate_directive_lines(text, {}) == text

    def test_inline_directives_are_not_isolated(self):
        text = "Hello\n{{user}}\nthere"

        assert isolate_directive_lines(text, {}) == text


class TestVerbatimRegions:
    def test_code_region_is_stashed_whole(self):
        context = make_context()
        region = '{{#confluence-code language="bash"}}\necho "*not emphasis*"\n    indented\n{{/confluence-code}}'

        result = stash_verbatim_regions(f"Before\n{region}\nAfter", context)

        assert "confluence-code" not in result
        assert result.startswith("Before\n\n")
        assert result.endswith("\n\nAfter")
        assert context["vault"].restore(result) == f"Before\n\n{region}\n\nAfter"

    def test_unclosed_region_is_left_alone(self):
        context = make_context()
        text = '{{#confluence-code language="bash"}}\necho hi'

        assert stash_verbatim_regions(text, context) == text
        assert len(context["vault"]) == 0

    def test_other_directives_are_not_verbatim(self):
        context = make_context()
        text = "{{#note}}\n*x*\n{{/note}}"

        assert stash_verbatim_regions(text, context) == text

    def test_verbatim_names_are_configurable(self):
        context = make_context(config={"verbatim_directives": ["raw"]})
        text = "{{#raw}}\n_x_\n{{/raw}}"

        result = stash_verbatim_regions(text, context)

        assert "{{" not in result
        assert context["vault"].restore(result).strip() == text


class TestProtectSource:
    def test_directives_become_placeholders(self):
        context = make_context()
        text = 'Use {{user name="a_b_c"}} and [link]({{base}}/x)'

        result = protect_source_directives(text, context)

        assert "{{" not in result
        assert "_b_" not in result
        assert context["vault"].restore(result) == text

    def test_pipeline_order(self):
        context = make_context()
        text = "{{#note}}\n- item\n{{/note}}\n"

        result = apply_preprocessors(text, context)

        assert "{{" not in result
        assert context["vault"].restore(result) == "{{#note}}\n\n- item\n\n{{/note}}\n"
