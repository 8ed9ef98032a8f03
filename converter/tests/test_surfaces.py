"""
Tests for the Django and Celery entry points: template filter, management
command and tasks.
"""

from io import StringIO
from unittest.mock import patch

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError
from django.template import Context, Template

from converter.markdown.config import DEFAULT_STORAGE_CONFIG, get_storage_config
from converter.markdown.errors import MarkdownParseError
from converter.tasks import convert_document_async, convert_documents_async


class TestConfig:
    def test_settings_and_context_override_defaults(self, storage_settings):
        storage_settings.STORAGE_FORMAT = {"footnotes_heading": "Notes", "max_nesting_depth": 50}

        config = get_storage_config({"config": {"max_nesting_depth": 10}})

        assert config["footnotes_heading"] == "Notes"
        assert config["max_nesting_depth"] == 10
        assert config["code_default_language"] == DEFAULT_STORAGE_CONFIG["code_default_language"]

    def test_empty_context_config(self):
        assert get_storage_config({"config": None})["expand_default_title"] == "Details"


@pytest.fixture
def storage_settings():
    """Restore settings.STORAGE_FORMAT after the test."""
    from django.conf import settings as django_settings

    saved = getattr(django_settings, "STORAGE_FORMAT", None)
    yield django_settings
    django_settings.STORAGE_FORMAT = saved


@pytest.mark.requires_pandoc
class TestTemplateTags:
    def test_filter(self):
        template = Template("{% load markdown_tags %}{{ body|storage_format }}")

        output = template.render(Context({"body": "Hello {{user}} *there*"}))

        assert output.strip() == "<p>Hello {{user}} <em>there</em></p>"

    def test_tag_with_context_config(self):
        template = Template("{% load markdown_tags %}{% storage_format_with_context body %}")
        context = Context(
            {
                "body": "```\nx\n```",
                "storage_format_config": {"code_default_language": "none"},
            }
        )

        output = template.render(context)

        assert 'language="none"' in output


class TestConvertMarkdownCommand:
    def test_missing_file(self, tmp_path):
        with pytest.raises(CommandError):
            call_command("convert_markdown", str(tmp_path / "missing.md"), stdout=StringIO())

    def test_output_needs_single_input(self, tmp_path):
        with pytest.raises(CommandError):
            call_command(
                "convert_markdown",
                str(tmp_path / "a.md"),
                str(tmp_path / "b.md"),
                output=str(tmp_path / "out.xhtml"),
                stdout=StringIO(),
            )

    def test_conversion_errors_become_command_errors(self, tmp_path):
        source = tmp_path / "page.md"
        source.write_text("text\n", encoding="utf-8")

        with patch(
            "converter.management.commands.convert_markdown.render_storage_format",
            side_effect=MarkdownParseError("pandoc missing"),
        ):
            with pytest.raises(CommandError, match="pandoc missing"):
                call_command("convert_markdown", str(source), stdout=StringIO())

    def test_output_stream_does_not_switch_to_printing(self, tmp_path):
        source = tmp_path / "page.md"
        source.write_text("text\n", encoding="utf-8")
        out = StringIO()

        with patch(
            "converter.management.commands.convert_markdown.render_storage_format",
            return_value="<p>ok</p>",
        ):
            call_command("convert_markdown", str(source), stdout=out)

        assert (tmp_path / "page.xhtml").read_text(encoding="utf-8") == "<p>ok</p>"
        assert "Wrote" in out.getvalue()
        assert "<p>ok</p>" not in out.getvalue()

    def test_print_flag_writes_to_the_given_stream(self, tmp_path):
        source = tmp_path / "page.md"
        source.write_text("text\n", encoding="utf-8")
        out = StringIO()

        with patch(
            "converter.management.commands.convert_markdown.render_storage_format",
            return_value="<p>ok</p>",
        ):
            call_command("convert_markdown", str(source), print_output=True, stdout=out)

        assert "<p>ok</p>" in out.getvalue()
        assert not (tmp_path / "page.xhtml").exists()

    @pytest.mark.requires_pandoc
    def test_writes_next_to_input(self, tmp_path):
        source = tmp_path / "page.md"
        source.write_text('{{#note}}\n\nBody\n\n{{/note}}\n', encoding="utf-8")
        out = StringIO()

        call_command("convert_markdown", str(source), stdout=out)

        written = (tmp_path / "page.xhtml").read_text(encoding="utf-8")
        assert written.strip() == "{{#note}}\n<p>Body</p>\n{{/note}}"
        assert "Converted 1 file(s)" in out.getvalue()

    @pytest.mark.requires_pandoc
    def test_output_dir_and_suffix(self, tmp_path):
        source = tmp_path / "page.md"
        source.write_text("text\n", encoding="utf-8")
        target_dir = tmp_path / "out"

        call_command(
            "convert_markdown",
            str(source),
            output_dir=str(target_dir),
            suffix=".html",
            stdout=StringIO(),
        )

        assert (target_dir / "page.html").read_text(encoding="utf-8").strip() == "<p>text</p>"

    @pytest.mark.requires_pandoc
    def test_print_to_stdout(self, tmp_path):
        source = tmp_path / "page.md"
        source.write_text("text\n", encoding="utf-8")
        out = StringIO()

        call_command("convert_markdown", str(source), "--print", stdout=out)

        assert "<p>text</p>" in out.getvalue()
        assert not (tmp_path / "page.xhtml").exists()


class TestTasks:
    def test_failure_is_reported(self):
        with patch("converter.tasks.render_storage_format", side_effect=MarkdownParseError("boom")):
            result = convert_document_async.apply(args=("text",)).get()

        assert result == {"success": False, "error": "boom"}

    def test_success(self):
        with patch("converter.tasks.render_storage_format", return_value="<p>ok</p>"):
            result = convert_document_async.apply(args=("ok",)).get()

        assert result == {"success": True, "content": "<p>ok</p>"}

    def test_batch_is_one_group(self):
        with patch("converter.tasks.group") as mock_group:
            convert_documents_async(["a", "b"], {"config": {}})

        signatures = list(mock_group.call_args.args[0])
        assert [s.args for s in signatures] == [("a", {"config": {}}), ("b", {"config": {}})]
        mock_group.return_value.apply_async.assert_called_once_with()

    @pytest.mark.requires_pandoc
    def test_real_conversion(self):
        result = convert_document_async.apply(args=("{{#a}}\n\nx\n\n{{/a}}",)).get()

        assert result["success"] is True
        assert result["content"].strip() == "{{#a}}\n<p>x</p>\n{{/a}}"
