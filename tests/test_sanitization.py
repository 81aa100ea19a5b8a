"""
HTML to text conversion tests.
"""

import pytest

from mailrelay.services.extraction import extract
from mailrelay.services.sanitization import html_to_text


class TestHtmlToText:

    @pytest.mark.parametrize("body", ["", None])
    def test_empty(self, body):
        assert html_to_text(body) == ""

    def test_tags_stripped_and_entities_decoded(self):
        text = html_to_text("<p>Tom &amp; Jerry say <b>hi</b> &lt;3</p>")
        assert text == "Tom & Jerry say hi <3"

    def test_style_and_script_contents_dropped(self):
        text = html_to_text(
            "<style>.x { color: #333333; }</style>"
            "<script>var n = 123456;</script>"
            "<p>Code 4821</p>"
        )
        assert text == "Code 4821"

    def test_block_elements_separate_words(self):
        text = html_to_text("<div>Your code</div><div>482913</div>")
        assert extract(text).code == "482913"

    def test_link_target_kept_beside_anchor_text(self):
        text = html_to_text('<a href="https://svc.test/verify?t=1&amp;u=2">Verify</a>.')
        assert extract(text).link == "https://svc.test/verify?t=1&u=2"

    def test_anchor_showing_its_own_url_not_repeated(self):
        text = html_to_text('<a href="https://svc.test/x">https://svc.test/x</a>')
        assert text == "https://svc.test/x"

    def test_non_web_link_target_dropped(self):
        text = html_to_text('<a href="javascript:alert(1)">Click</a>')
        assert text == "Click"
