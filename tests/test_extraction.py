"""
Code and link extraction tests.
"""

import pytest

from mailrelay.schemas.message import ExtractionResult
from mailrelay.services.extraction import extract, find_code, find_links, pick_action_link


class TestEmptyInput:

    @pytest.mark.parametrize("text", ["", None])
    def test_nothing_found(self, text):
        result = extract(text)
        assert result == ExtractionResult(code=None, link=None)


class TestCodeDetection:

    def test_six_digit_code(self):
        assert extract("Your code is 482913").code == "482913"

    def test_four_and_eight_digit_bounds(self):
        assert find_code("pin 1234 please") == "1234"
        assert find_code("pin 12345678 please") == "12345678"

    def test_too_short_or_too_long_ignored(self):
        assert find_code("abc 123 def") is None
        assert find_code("ref 123456789 end") is None

    def test_first_run_wins(self):
        assert extract("Order 55510 confirmed, code 998877").code == "55510"

    def test_digits_glued_to_letters_are_not_a_code(self):
        assert find_code("token A12345B") is None

    def test_code_next_to_punctuation(self):
        assert find_code("Code:246810.") == "246810"

    def test_non_ascii_digits_ignored(self):
        assert find_code("code ١٢٣٤٥٦") is None


class TestLinkDetection:

    def test_keyword_link_preferred_over_earlier_link(self):
        text = "Please visit https://x.test/home or confirm at https://x.test/confirm?id=1"
        assert extract(text).link == "https://x.test/confirm?id=1"

    def test_keyword_link_first(self):
        text = "Please confirm at https://x.test/confirm?id=1 or visit https://x.test/home"
        assert extract(text).link == "https://x.test/confirm?id=1"

    def test_first_link_without_keyword(self):
        assert extract("See https://a.test then https://b.test").link == "https://a.test"

    @pytest.mark.parametrize("keyword", ["confirm", "VERIFY", "Login", "signin", "PassWord"])
    def test_keywords_case_insensitive(self, keyword):
        links = ["https://a.test/home", f"https://a.test/{keyword}"]
        assert pick_action_link(links) == f"https://a.test/{keyword}"

    def test_no_links(self):
        assert extract("Just text, code 4321").link is None

    def test_link_stops_at_whitespace(self):
        assert find_links("go https://a.test/path?x=1\nnext line") == ["https://a.test/path?x=1"]

    def test_plain_http_scheme(self):
        assert find_links("old http://legacy.test/verify") == ["http://legacy.test/verify"]

    def test_leading_punctuation_after_scheme_rejected(self):
        assert find_links("bad https://.test and https://?q") == []

    def test_code_and_link_together(self):
        result = extract("Code 739201\nOr click https://svc.test/verify?t=abc")
        assert result.code == "739201"
        assert result.link == "https://svc.test/verify?t=abc"
