from django.conf import settings

# Prefix pandoc puts in front of generated identifiers. Footnote definitions
# come out as "user-content-fn1" and references point at "#user-content-fn1".
ID_PREFIX = "user-content-"

DEFAULT_STORAGE_CONFIG = {
    "footnotes_heading": "Footnotes",
    "code_default_language": "text",
    "code_line_numbers": True,
    "expand_default_title": "Details",
    "max_nesting_depth": 100,
    # Block directives whose bodies are passed through without markdown parsing
    "verbatim_directives": ["confluence-code"],
}


def get_pandoc_config():
    """
    Configuration for pypandoc/Pandoc markdown rendering.

    GitHub-flavoured markdown is read with footnotes and raw HTML enabled
    (raw HTML is how <details> sections reach the tree). The HTML5 writer is
    asked to keep source line breaks and to prefix identifiers so footnote
    ids follow the user-content-fn convention the footnote resolver expects.
    """
    return {
        "format": "gfm+footnotes",
        "to": "html5",
        "extra_args": [
            "--wrap=preserve",
            f"--id-prefix={ID_PREFIX}",
        ],
        # Pandoc filters can be added here (Python or Lua filters)
        "filters": [],
    }


def get_storage_config(context=None):
    """
    Conversion options: defaults, then settings.STORAGE_FORMAT, then context["config"].

    The pipeline runs outside a configured Django project as well (tests,
    plain library use); in that case only the defaults and per-call overrides
    apply.
    """
    config = dict(DEFAULT_STORAGE_CONFIG)
    if settings.configured:
        config.update(getattr(settings, "STORAGE_FORMAT", {}) or {})
    if context and context.get("config"):
        config.update(context["config"])
    return config
