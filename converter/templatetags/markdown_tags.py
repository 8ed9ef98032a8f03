# converter/templatetags/markdown_tags.py

from django import template
from django.utils.safestring import mark_safe

from converter.markdown.renderer import render_storage_format

register = template.Library()


@register.filter(name="storage_format")
def storage_format_filter(value):
    return mark_safe(render_storage_format(value))


@register.simple_tag(takes_context=True)
def storage_format_with_context(context, value):
    """Template tag that passes per-page conversion options to the processors"""
    processor_context = {
        "config": context.get("storage_format_config"),
    }
    return mark_safe(render_storage_format(value, context=processor_context))
