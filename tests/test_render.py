"""Tests for the default page renderer."""

from conftest import write

from wikisite.render import build_meta_tags, render_page, render_template


class TestRenderTemplate:
    def test_substitutes_keys(self):
        assert render_template("<h1>{{title}}</h1>{{content}}", title="T", content="<p>x</p>") == "<h1>T</h1><p>x</p>"

    def test_unknown_placeholders_removed(self):
        assert render_template("[{{author}}]", title="T") == "[]"

    def test_content_inserted_last(self):
        output = render_template("{{title}}|{{content}}", title="T", content="{{title}}")
        assert output == "T|{{title}}"


class TestMetaTags:
    def test_all_tags(self):
        tags = build_meta_tags("Page", "About", "/favicon.ico", "https://e.com/og.png", "https://e.com/page")
        assert '<link rel="icon" href="/favicon.ico">' in tags
        assert '<meta property="og:title" content="Page">' in tags
        assert '<meta property="og:image" content="https://e.com/og.png">' in tags
        assert '<meta property="og:url" content="https://e.com/page">' in tags

    def test_optional_tags_omitted(self):
        tags = build_meta_tags("Page", "About", "", "", "")
        assert "icon" not in tags
        assert "og:image" not in tags
        assert "og:url" not in tags

    def test_values_escaped(self):
        assert 'content="Tom &amp; Jerry"' in build_meta_tags("Tom & Jerry", "", "", "", "")


class TestRenderPage:
    def test_uses_layout_from_input_root(self, docs, out, make_page):
        write(docs / "layout.html", "<div>layout from root</div><h1>{{title}}</h1>{{content}}")
        rendered = render_page(make_page(title="Example"))
        assert "layout from root" in rendered
        assert "<h1>Example</h1>" in rendered
        assert (out / "example.html").read_text(encoding="utf-8") == rendered

    def test_nested_output_written(self, docs, out, make_page):
        page = make_page("nested", folder="second-level")
        render_page(page)
        assert (out / "second-level" / "nested.html").is_file()

    def test_default_layout(self, docs, out, make_page):
        rendered = render_page(make_page(content="<p>Hello World</p>"))
        assert '<main class="article">' in rendered
        assert "<p>Hello World</p>" in rendered
        assert ".codehilite" in rendered
        assert "{{" not in rendered

    def test_builtin_layout_option(self, docs, out, make_page):
        rendered = render_page(make_page(), "matrix")
        assert '<main class="matrix-container">' in rendered
        assert "Matrix Layout" in rendered

    def test_favicon_and_og_tags(self, docs, out, make_page):
        page = make_page(favicon="/favicon.ico", og_image="https://example.com/og.png", og_url="https://example.com/example")
        rendered = render_page(page)
        assert '<link rel="icon" href="/favicon.ico">' in rendered
        assert '<meta property="og:image" content="https://example.com/og.png">' in rendered
        assert '<meta property="og:url" content="https://example.com/example">' in rendered

    def test_front_matter_fallback_for_og(self, docs, out, make_page):
        page = make_page(front_matter={"ogImage": "https://example.com/og.png", "ogUrl": "https://example.com/example"})
        rendered = render_page(page)
        assert '<meta property="og:image" content="https://example.com/og.png">' in rendered
        assert '<meta property="og:url" content="https://example.com/example">' in rendered

    def test_front_matter_keys_available(self, docs, out, make_page):
        write(docs / "layout.html", "<p>by {{author}}</p>{{content}}")
        rendered = render_page(make_page(front_matter={"author": "Ada <Lovelace>"}))
        assert "<p>by Ada &lt;Lovelace&gt;</p>" in rendered
