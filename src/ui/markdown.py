"""Markdown to HTML conversion for chat bubbles."""

import html
import re

_HEADER_CLASSES = {
    1: "text-2xl font-semibold mt-6 mb-3",
    2: "text-xl font-semibold mt-5 mb-2",
    3: "text-lg font-semibold mt-4 mb-2",
    4: "text-base font-semibold mt-3 mb-1",
}


def plain_text_to_html(text: str) -> str:
    """Escape user-typed text for a bubble, keeping its line breaks."""
    return html.escape(text).replace("\n", "<br>")


def _render_link(match: re.Match[str]) -> str:
    label, url = match.group(1), match.group(2)
    if not url.lower().startswith(("http://", "https://")):
        return label
    url = url.replace('"', "&quot;")
    return f'<a href="{url}" class="text-blue-600 underline" target="_blank">{label}</a>'


def _wrap_lists(lines: list[str], pattern: str, tag: str, css: str) -> list[str]:
    in_list = False
    result = []
    for line in lines:
        stripped = line.strip()
        if re.match(pattern, stripped):
            if not in_list:
                result.append(f'<{tag} class="{css}">')
                in_list = True
            result.append(f"<li>{re.sub(pattern, '', stripped)}</li>")
        else:
            if in_list:
                result.append(f"</{tag}>")
                in_list = False
            result.append(line)
    if in_list:
        result.append(f"</{tag}>")
    return result


def markdown_to_html(text: str) -> str:
    """Convert markdown to HTML for chat display.

    Supports: headers, bold, italic, inline code, code blocks, links, lists.
    """
    if not text or not text.strip():
        return ""

    # Escape HTML entities first
    text = text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")

    # Code blocks (```code```)
    text = re.sub(
        r"```(\w*)\n?([\s\S]*?)```",
        r'<pre class="bg-gray-800 text-gray-100 rounded-lg p-3 my-2 overflow-x-auto text-xs">'
        r"<code>\2</code></pre>",
        text,
    )

    # Inline code (`code`)
    text = re.sub(
        r"`([^`]+)`",
        r'<code class="bg-gray-200 text-pink-600 px-1.5 py-0.5 rounded text-xs">\1</code>',
        text,
    )

    # Headers (# .. ####), deepest first
    for level in sorted(_HEADER_CLASSES, reverse=True):
        text = re.sub(
            rf"^{'#' * level} (.*)$",
            rf'<h{level} class="{_HEADER_CLASSES[level]}">\1</h{level}>',
            text,
            flags=re.MULTILINE,
        )

    # Bold (**text**)
    text = re.sub(r"\*\*([^*\n]+)\*\*", r"<strong>\1</strong>", text)

    # Italic (*text*)
    text = re.sub(r"(?<![*\w])\*([^*\n]+)\*(?![*\w])", r"<em>\1</em>", text)

    # Links [text](url), http(s) only
    text = re.sub(r"\[([^\]]+)\]\(([^)\s]+)\)", _render_link, text)

    lines = text.split("\n")
    lines = _wrap_lists(lines, r"^[-*]\s+", "ul", "list-disc list-inside my-2 space-y-1")
    lines = _wrap_lists(lines, r"^\d+\.\s+", "ol", "list-decimal list-inside my-2 space-y-1")
    text = "\n".join(lines)

    # Block tags already break lines
    text = re.sub(r"(</?(?:ul|ol|li|h\d|pre)[^>]*>)\n", r"\1", text)

    # Line breaks (preserve newlines as <br>)
    return text.replace("\n", "<br>")
