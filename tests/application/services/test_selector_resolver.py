# tests/application/services/test_selector_resolver.py
import pytest

from application.services.selector_resolver import SelectorResolver


@pytest.mark.parametrize(
    "kind,value,expected",
    [
        ("id", "main", "#main"),
        ("class", "article", ".article"),
        ("tag", "h1", "h1"),
        ("xpath", "//div[@class='x']", "xpath=//div[@class='x']"),
        (None, "ul > li.next a", "ul > li.next a"),
    ],
)
def test_query(kind, value, expected):
    assert SelectorResolver().query(kind, value) == expected


class TestSplitAttribute:
    def test_xpath_suffix(self):
        assert SelectorResolver().split_attribute("xpath", "//a[@class='dl']/@href") == ("//a[@class='dl']", "href")

    def test_kindless_suffix(self):
        assert SelectorResolver().split_attribute(None, ".//img/@data-src") == (".//img", "data-src")

    def test_other_kinds_keep_selector(self):
        assert SelectorResolver().split_attribute("class", "a/@href") == ("a/@href", None)

    def test_no_suffix(self):
        assert SelectorResolver().split_attribute("xpath", "//a") == ("//a", None)
