"""Tests for sitemap.xml and robots.txt output."""

from types import SimpleNamespace

from wikisite.sitemap import page_path, render_sitemap, write_robots


class TestRenderSitemap:
    def test_urls_for_pages(self, out):
        pages = [
            SimpleNamespace(output_file_path=out / "example.html"),
            SimpleNamespace(output_file_path=out / "second-level" / "nested.html"),
            SimpleNamespace(output_file_path=out / "second-level" / "index.html"),
        ]
        sitemap = render_sitemap(pages, out / "sitemap.xml", "https://example.com")
        written = (out / "sitemap.xml").read_text(encoding="utf-8")
        assert written == sitemap
        assert written.startswith('<?xml version="1.0" encoding="UTF-8"?>')
        assert '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">' in written
        assert "<url><loc>https://example.com/example</loc></url>" in written
        assert "<loc>https://example.com/second-level/nested</loc>" in written
        assert "<loc>https://example.com/second-level/</loc>" in written

    def test_keeps_page_order(self, out):
        pages = [
            SimpleNamespace(output_file_path=out / "b.html"),
            SimpleNamespace(output_file_path=out / "a.html"),
        ]
        sitemap = render_sitemap(pages, out / "sitemap.xml", "https://example.com/")
        assert sitemap.index("/b</loc>") < sitemap.index("/a</loc>")
        assert "https://example.com//" not in sitemap

    def test_root_index(self, out):
        assert page_path(out / "index.html", out) == "/"

    def test_names_ending_in_index_kept(self, out):
        pages = [
            SimpleNamespace(output_file_path=out / "myindex.html"),
            SimpleNamespace(output_file_path=out / "sub" / "reindex.html"),
            SimpleNamespace(output_file_path=out / "sub" / "index.html"),
        ]
        sitemap = render_sitemap(pages, out / "sitemap.xml", "https://e.com")
        assert "<loc>https://e.com/myindex</loc>" in sitemap
        assert "<loc>https://e.com/sub/reindex</loc>" in sitemap
        assert "<loc>https://e.com/sub/</loc>" in sitemap
        assert "<loc>https://e.com/my</loc>" not in sitemap


class TestRobots:
    def test_written_when_missing(self, out):
        out.mkdir()
        assert write_robots(out)
        assert (out / "robots.txt").read_text(encoding="utf-8") == "User-agent: *\nDisallow:"

    def test_existing_file_kept(self, out):
        out.mkdir()
        (out / "robots.txt").write_text("User-agent: *\nDisallow: /private", encoding="utf-8")
        assert not write_robots(out)
        assert (out / "robots.txt").read_text(encoding="utf-8").endswith("/private")
