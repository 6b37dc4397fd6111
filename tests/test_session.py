"""
Rendering session helpers that do not need a browser.
"""

from slide2pdf.lib.session import RenderingSession, normalize_url


class TestNormalizeUrl:

    def test_remote_url_untouched(self):
        assert normalize_url("https://example.test/slides/#/3") == "https://example.test/slides/#/3"

    def test_existing_local_file(self, tmp_path):
        deck = tmp_path / "index.html"
        deck.write_text("<html></html>")
        assert normalize_url(str(deck)) == "file://" + str(deck)

    def test_missing_local_file_untouched(self, tmp_path):
        missing = str(tmp_path / "missing.html")
        assert normalize_url(missing) == missing


class TestRenderingSession:

    def test_close_without_open_is_safe(self):
        session = RenderingSession("https://example.test")
        session.close()
        assert session.page is None

    def test_no_animation_control_without_devtools(self):
        session = RenderingSession("https://example.test")
        session.stop_animations()
