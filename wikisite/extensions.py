from __future__ import annotations

import posixpath
import re
import xml.etree.ElementTree as etree
from urllib.parse import unquote

from markdown.extensions import Extension
from markdown.inlinepatterns import InlineProcessor
from markdown.treeprocessors import Treeprocessor

from .attributes import split_attribute_block
from .utils import encode_path, is_url, normalize_path

RE_WIKILINK = r"\[\[(?P<target>[^\[\]:]+)(?::(?P<label>[^\[\]]+))?\]\]"
TOC_HEADING_RE = re.compile(r"^(?:table[\s-]+of[\s-]+)?contents$", re.IGNORECASE)
HEADING_TAGS = {"h1", "h2", "h3", "h4", "h5", "h6"}
PERMALINK_CLASS = "headerlink"


def heading_text(el: etree.Element) -> str:
    parts = [el.text or ""]
    for child in el:
        if PERMALINK_CLASS not in (child.get("class") or "").split():
            parts.append("".join(child.itertext()))
        parts.append(child.tail or "")
    return "".join(parts).strip()


def page_href(relative_root: str, target: str, clean_link: bool) -> str:
    target, _, anchor = target.partition("#")
    href = posixpath.normpath(posixpath.join(relative_root, normalize_path(target)))
    if not clean_link:
        href += ".html"
    if anchor:
        href += f"#{normalize_path(anchor)}"
    return href


class WikiLinkInlineProcessor(InlineProcessor):
    def __init__(self, pattern, md, ext: "SiteExtension"):
        super().__init__(pattern, md)
        self.ext = ext

    def handleMatch(self, m, data):
        target = m.group("target").strip()
        if not target:
            return None, None, None
        label = (m.group("label") or "").strip() or target
        el = etree.Element("a")
        el.set("class", "wikilink")
        el.set("href", page_href(self.ext.relative_root, target, self.ext.clean_link))
        el.text = label
        return el, m.start(0), m.end(0)


class LinkRewriteTreeprocessor(Treeprocessor):
    """Point links at sibling ``.md`` files to their rendered pages."""

    def __init__(self, md, ext: "SiteExtension"):
        super().__init__(md)
        self.ext = ext

    def run(self, root):
        for el in root.iter("a"):
            href = el.get("href") or ""
            if not href or is_url(href):
                continue
            path, sep, fragment = href.partition("#")
            if not path.endswith(".md"):
                continue
            path = normalize_path(path)[: -len(".md")]
            if not self.ext.clean_link:
                path += ".html"
            el.set("href", f"{path}{sep}{fragment}")


class ImageTreeprocessor(Treeprocessor):
    """Rewrite local image sources and queue the files for copying.

    Only the relative paths are recorded here; the caller copies them.
    """

    def __init__(self, md, ext: "SiteExtension"):
        super().__init__(md)
        self.ext = ext

    def run(self, root):
        for el in root.iter("img"):
            src = el.get("src") or ""
            if not src or is_url(src) or src.startswith(("/", "#")):
                continue
            decoded = posixpath.normpath(unquote(src).replace("\\", "/"))
            if decoded not in self.ext.pending_copies:
                self.ext.pending_copies.append(decoded)
            el.set("src", f"./{encode_path(decoded)}")


class ImageAttributesTreeprocessor(Treeprocessor):
    def run(self, root):
        for el in root.iter("img"):
            split = split_attribute_block(el.tail or "")
            if split is None:
                continue
            attrs, rest = split
            for key, value in attrs.items():
                if key == "class" and el.get("class"):
                    value = f"{el.get('class')} {value}"
                el.set(key, value)
            el.tail = rest


class TableOfContentsTreeprocessor(Treeprocessor):
    """Insert a nested list of headings after a "Contents" heading."""

    def run(self, root):
        headings = [el for el in root.iter() if el.tag in HEADING_TAGS]
        for index, heading in enumerate(headings):
            if TOC_HEADING_RE.match(heading_text(heading)):
                break
        else:
            return
        entries = [
            (int(el.tag[1]), el.get("id", ""), heading_text(el)) for el in headings[index + 1 :]
        ]
        if not entries:
            return
        parent_map = {child: parent for parent in root.iter() for child in parent}
        parent = parent_map.get(heading, root)
        position = list(parent).index(heading)
        parent.insert(position + 1, build_toc_list(entries))


def build_toc_list(entries: list[tuple[int, str, str]]) -> etree.Element:
    top = etree.Element("ul")
    top.set("class", "toc")
    # [level, list element, last item in that list]
    stack = [[min(level for level, _, _ in entries), top, None]]
    for level, anchor, text in entries:
        while len(stack) > 1 and level < stack[-1][0]:
            stack.pop()
        if level > stack[-1][0] and stack[-1][2] is not None:
            nested = etree.SubElement(stack[-1][2], "ul")
            stack.append([level, nested, None])
        item = etree.SubElement(stack[-1][1], "li")
        link = etree.SubElement(item, "a")
        link.set("href", f"#{anchor}")
        link.text = text
        stack[-1][2] = item
    return top


class TitleTreeprocessor(Treeprocessor):
    def __init__(self, md, ext: "SiteExtension"):
        super().__init__(md)
        self.ext = ext

    def run(self, root):
        for el in root.iter("h1"):
            self.ext.title = heading_text(el)
            break


class SiteExtension(Extension):
    """Wiki-links, link and image rewriting, image attributes, TOC and title.

    Registered stages, in run order: wiki-links (inline, before reference
    links), ``.md`` link rewriting, image rewriting, image attributes, then
    after the ``toc`` extension has assigned heading ids the table of
    contents and title inference.
    """

    def __init__(self, relative_root: str = ".", clean_link: bool = False, **kwargs):
        super().__init__(**kwargs)
        self.relative_root = relative_root
        self.clean_link = clean_link
        self.pending_copies: list[str] = []
        self.title = ""

    def extendMarkdown(self, md):
        md.registerExtension(self)
        md.inlinePatterns.register(WikiLinkInlineProcessor(RE_WIKILINK, md, self), "site_wikilink", 175)
        md.treeprocessors.register(LinkRewriteTreeprocessor(md, self), "site_links", 17)
        md.treeprocessors.register(ImageTreeprocessor(md, self), "site_images", 16)
        md.treeprocessors.register(ImageAttributesTreeprocessor(md), "site_image_attrs", 15)
        md.treeprocessors.register(TableOfContentsTreeprocessor(md), "site_toc", 4)
        md.treeprocessors.register(TitleTreeprocessor(md, self), "site_title", 3)

    def reset(self):
        self.pending_copies = []
        self.title = ""
