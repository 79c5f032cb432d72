"""
Lab document rendering.

Lab sources are markdown with three kinds of placeholders:

    {{ MASTER_URL }}                 value from the render context
    {% image_path diagram.png %}     <content base>/images/diagram.png
    {% if JAVA_APP %}...{% else %}...{% endif %}

Conditionals are resolved first, then image paths, then values. Conditionals
do not nest.
"""
import html
import logging
import re
from typing import Dict, List, Optional, Tuple
from urllib.parse import quote

import markdown

from app.config import Settings
from app.modules.workshops.schemas import WorkshopDefinition, WorkshopSummary, LabModule, LabPage

logger = logging.getLogger(__name__)

VAR_PATTERN = re.compile(r"{{\s*([A-Za-z_][A-Za-z0-9_]*)\s*}}")
IMAGE_PATH_PATTERN = re.compile(r"{%\s*image_path\s+([^\s%]+)\s*%}")
IF_PATTERN = re.compile(
    r"{%\s*if\s+([A-Za-z_][A-Za-z0-9_]*)\s*%}(.*?)(?:{%\s*else\s*%}(.*?))?{%\s*endif\s*%}",
    re.DOTALL,
)

FALSY_VALUES = ("", "false", "0", "no")
ASCIIDOC_SUFFIXES = (".adoc", ".asciidoc")
MARKDOWN_EXTENSIONS = ["fenced_code", "tables", "toc"]


def build_context(
    settings: Settings,
    workshop: WorkshopDefinition,
    module: LabModule,
    content_base: Optional[str] = None,
    overrides: Optional[Dict[str, str]] = None,
) -> Dict[str, str]:
    """Merge template values, later sources win: built-ins, workshop, lab, TEMPLATE_VARS, attendee."""
    builtins = {
        "MASTER_URL": settings.openshift_master,
        "GUID": settings.guid,
        "JAVA_APP": "true" if settings.java_app else "false",
        "WORKSHOP_ID": workshop.id,
        "LAB_ID": module.id,
        "CONTENT_URL_PREFIX": content_base,
    }
    context = {k: v for k, v in builtins.items() if v is not None}
    context.update(workshop.vars)
    context.update(module.vars)
    context.update(settings.template_vars)
    if overrides:
        context.update({k: v for k, v in overrides.items() if v is not None})
    return context


def _is_truthy(value: Optional[str]) -> bool:
    return value is not None and value.strip().lower() not in FALSY_VALUES


def substitute(text: str, context: Dict[str, str], image_base: Optional[str] = None) -> str:
    def replace_if(match):
        name, then_branch, else_branch = match.group(1), match.group(2), match.group(3)
        if _is_truthy(context.get(name)):
            return then_branch
        return else_branch or ""

    def replace_image(match):
        name = match.group(1)
        if not image_base:
            return f"images/{name}"
        return f"{image_base.rstrip('/')}/images/{name}"

    def replace_var(match):
        name = match.group(1)
        if name in context:
            return context[name]
        logger.debug(f"No value for placeholder {name}, leaving it as is")
        return match.group(0)

    text = IF_PATTERN.sub(replace_if, text)
    text = IMAGE_PATH_PATTERN.sub(replace_image, text)
    return VAR_PATTERN.sub(replace_var, text)


def workshop_url(workshop_id: str, lab_id: Optional[str] = None) -> str:
    """Path of a workshop or one of its labs, ids percent-encoded."""
    url = f"/workshop/{quote(workshop_id, safe='')}"
    if lab_id is not None:
        url += f"/lab/{quote(lab_id, safe='')}"
    return url


def render_markdown(text: str) -> Tuple[Optional[str], str]:
    """Convert markdown to HTML. Returns (first level-1 heading or None, html)."""
    md = markdown.Markdown(extensions=MARKDOWN_EXTENSIONS)
    body = md.convert(text)
    # headings inside fenced code never reach toc_tokens
    title = next((html.unescape(t["name"]) for t in md.toc_tokens if t["level"] == 1), None)
    return title, body


def render_document(text: str, filename: Optional[str] = None) -> Tuple[Optional[str], str]:
    """Markdown is converted; asciidoc sources are shown escaped as preformatted text."""
    if filename and filename.lower().endswith(ASCIIDOC_SUFFIXES):
        match = re.search(r"^=\s+(.+?)\s*$", text, re.MULTILINE)
        title = match.group(1) if match else None
        return title, f'<pre class="asciidoc">{html.escape(text)}</pre>'
    return render_markdown(text)


CSS = """
<style>
  body { font-family: "Helvetica Neue", Arial, sans-serif; margin: 0; color: #222; }
  header { background: #1f1f1f; color: #fff; padding: 12px 24px; }
  header a { color: #fff; text-decoration: none; }
  .layout { display: flex; }
  nav.labs { width: 260px; padding: 16px; border-right: 1px solid #ddd; }
  nav.labs li.current { font-weight: 700; }
  main { flex: 1; padding: 16px 40px; max-width: 960px; }
  pre { background: #f5f5f5; padding: 12px; overflow-x: auto; }
  .pager { display: flex; justify-content: space-between; margin-top: 40px; }
</style>
"""


def _layout(title: str, header: str, body: str) -> str:
    return (
        "<!DOCTYPE html>\n"
        f'<html><head><meta charset="utf-8"><title>{html.escape(title)}</title>{CSS}</head>'
        f"<body><header>{header}</header>{body}</body></html>"
    )


def render_page(workshop: WorkshopDefinition, page: LabPage) -> str:
    lab_items: List[str] = []
    for module in workshop.modules:
        css_class = ' class="current"' if module.id == page.lab_id else ""
        href = html.escape(workshop_url(workshop.id, module.id))
        lab_items.append(f'<li{css_class}><a href="{href}">{html.escape(module.name)}</a></li>')

    pager = []
    if page.previous_lab_id:
        pager.append(f'<a class="previous" href="{html.escape(workshop_url(workshop.id, page.previous_lab_id))}">&larr; Previous</a>')
    else:
        pager.append("<span></span>")
    if page.next_lab_id:
        pager.append(f'<a class="next" href="{html.escape(workshop_url(workshop.id, page.next_lab_id))}">Next &rarr;</a>')

    header = f'<a href="/">Workshops</a> / {html.escape(workshop.name)}'
    body = (
        f'<div class="layout"><nav class="labs"><ol>{"".join(lab_items)}</ol></nav>'
        f'<main>{page.html}<div class="pager">{"".join(pager)}</div></main></div>'
    )
    return _layout(f"{page.title} - {workshop.name}", header, body)


def render_index(summaries: List[WorkshopSummary], title: str) -> str:
    if not summaries:
        items = "<p>No workshops are loaded.</p>"
    else:
        rows = []
        for s in summaries:
            description = f" - {html.escape(s.description)}" if s.description else ""
            rows.append(
                f'<li><a href="{html.escape(workshop_url(s.id))}">{html.escape(s.name)}</a>'
                f" ({s.lab_count} labs){description}</li>"
            )
        items = f'<ul>{"".join(rows)}</ul>'
    return _layout(title, html.escape(title), f"<main>{items}</main>")
