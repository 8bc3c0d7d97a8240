"""
XSS Prevention / Input Sanitization Module

Sanitizes coach-entered text and externally supplied food data before it is
stored.
"""

import html
import re


def sanitize_text(text, max_length=10000):
    """
    Sanitize text by HTML-escaping special characters.

    Args:
        text: The text to sanitize (can be None)
        max_length: Maximum allowed length (default 10000)

    Returns:
        Sanitized string, truncated if necessary
    """
    if text is None:
        return ''

    if not isinstance(text, str):
        text = str(text)

    text = text.strip()

    # Remove control characters except newlines and tabs
    text = re.sub(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]', '', text)

    text = html.escape(text)

    if len(text) > max_length:
        text = text[:max_length]

    return text


def sanitize_name(name, default='', max_length=200):
    """
    Sanitize a single-line name (exercise, template, meal, food).

    Collapses whitespace and strips control characters, returning default
    when nothing is left.
    """
    if not name:
        return default

    if not isinstance(name, str):
        name = str(name)

    name = re.sub(r'[\x00-\x1f\x7f-\x9f]', ' ', name)
    name = re.sub(r'\s+', ' ', name).strip()
    name = html.escape(name)

    if len(name) > max_length:
        name = name[:max_length - 3] + '...'

    return name or default
