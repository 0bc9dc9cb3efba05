"""
tests/test_extractor.py

Unit tests for selector-driven item extraction. Pure parsing, no I/O.
"""

from __future__ import annotations

from app.domain.scraping import SelectorConfig
from app.scraping.parsing import HTMLItemExtractor, extract
from conftest import BOOKS_MARKUP, BOOKS_SELECTORS, BOOKS_URL

SELECTORS = SelectorConfig.from_mapping(BOOKS_SELECTORS)


def _articles(*bodies: str) -> str:
    return "<html><body>" + "".join(f"<article class='item'>{body}</article>" for body in bodies) + "</body></html>"


ITEM_SELECTORS = SelectorConfig(article="article.item", title="h2", link="a.more")


class TestExtract:
    def test_one_record_per_well_formed_article(self) -> None:
        records = extract(BOOKS_MARKUP, BOOKS_URL, SELECTORS)

        assert len(records) == 3

    def test_title_attribute_wins_over_text(self) -> None:
        records = extract(BOOKS_MARKUP, BOOKS_URL, SELECTORS)

        assert records[0].title == "A Light in the Attic"
        assert records[1].title == "Tipping the Velvet"

    def test_title_falls_back_to_trimmed_text(self) -> None:
        records = extract(BOOKS_MARKUP, BOOKS_URL, SELECTORS)

        assert records[2].title == "Soumission"

    def test_relative_link_resolves_against_base(self) -> None:
        records = extract(BOOKS_MARKUP, BOOKS_URL, SELECTORS)

        assert records[0].url == "http://books.toscrape.com/catalogue/a-light-in-the-attic_1000/index.html"

    def test_source_is_host_of_item_url(self) -> None:
        records = extract(BOOKS_MARKUP, BOOKS_URL, SELECTORS)

        assert {record.source for record in records} == {"books.toscrape.com"}

    def test_price_is_trimmed_text_and_optional(self) -> None:
        records = extract(BOOKS_MARKUP, BOOKS_URL, SELECTORS)

        assert records[0].price == "£51.77"
        assert records[2].price is None

    def test_price_omitted_without_price_selector(self) -> None:
        selectors = SelectorConfig(article="article.product_pod", title="h3 > a", link="h3 > a")

        records = extract(BOOKS_MARKUP, BOOKS_URL, selectors)

        assert len(records) == 3
        assert all(record.price is None for record in records)

    def test_nested_inline_text_is_joined_without_separator(self) -> None:
        selectors = SelectorConfig(article="article.item", title="a.t", link="a.t", price="p.pr")
        markup = _articles("<a class='t' href='/x'>Foo<em>Bar</em></a><p class='pr'>£51.<span>77</span></p>")

        records = extract(markup, "https://example.com/", selectors)

        assert records[0].title == "FooBar"
        assert records[0].price == "£51.77"

    def test_inner_whitespace_is_kept_and_ends_trimmed(self) -> None:
        selectors = SelectorConfig(article="article.item", title="h2", link="a.more", price="p.pr")
        markup = _articles("<h2>\n  Two  words \n</h2><a class='more' href='/a'>x</a><p class='pr'>  12 EUR  </p>")

        records = extract(markup, "https://example.com/", selectors)

        assert records[0].title == "Two  words"
        assert records[0].price == "12 EUR"

    def test_same_markup_yields_same_records(self) -> None:
        first = extract(BOOKS_MARKUP, BOOKS_URL, SELECTORS)
        second = extract(BOOKS_MARKUP, BOOKS_URL, SELECTORS)

        assert first == second

    def test_no_matching_articles_yields_empty(self) -> None:
        assert extract("<html><body><p>nothing</p></body></html>", BOOKS_URL, SELECTORS) == []


class TestDroppedCandidates:
    def test_article_without_title_is_dropped(self) -> None:
        markup = _articles("<a class='more' href='/a'>read</a>")

        assert extract(markup, "https://example.com/", ITEM_SELECTORS) == []

    def test_whitespace_only_title_is_dropped(self) -> None:
        markup = _articles("<h2>   \n  </h2><a class='more' href='/a'>read</a>")

        assert extract(markup, "https://example.com/", ITEM_SELECTORS) == []

    def test_blank_title_attribute_falls_back_to_text(self) -> None:
        markup = _articles("<h2 title='  '>Real title</h2><a class='more' href='/a'>read</a>")

        records = extract(markup, "https://example.com/", ITEM_SELECTORS)

        assert [record.title for record in records] == ["Real title"]

    def test_missing_href_is_dropped(self) -> None:
        markup = _articles("<h2>Title</h2><a class='more'>read</a>")

        assert extract(markup, "https://example.com/", ITEM_SELECTORS) == []

    def test_non_http_link_is_dropped(self) -> None:
        markup = _articles(
            "<h2>Mail</h2><a class='more' href='mailto:someone@example.com'>mail</a>",
            "<h2>Script</h2><a class='more' href='javascript:void(0)'>js</a>",
            "<h2>Kept</h2><a class='more' href='/kept'>kept</a>",
        )

        records = extract(markup, "https://example.com/list/", ITEM_SELECTORS)

        assert [record.url for record in records] == ["https://example.com/kept"]

    def test_bad_candidate_does_not_affect_others(self) -> None:
        markup = _articles(
            "<a class='more' href='/first'>no title</a>",
            "<h2>Second</h2><a class='more' href='second'>read</a>",
        )

        records = extract(markup, "https://example.com/list/", ITEM_SELECTORS)

        assert len(records) == 1
        assert records[0].url == "https://example.com/list/second"


class TestBaseUrl:
    def test_base_tag_overrides_page_url(self) -> None:
        markup = (
            "<html><head><base href='/shop/'></head><body>"
            "<article class='item'><h2>Lamp</h2><a class='more' href='lamp.html'>x</a></article>"
            "</body></html>"
        )

        records = HTMLItemExtractor.extract(
            markup=markup,
            base_url="https://example.com/index.html",
            selectors=ITEM_SELECTORS,
        )

        assert records[0].url == "https://example.com/shop/lamp.html"

    def test_absolute_link_is_kept(self) -> None:
        markup = _articles("<h2>Elsewhere</h2><a class='more' href='https://other.org/p/1'>x</a>")

        records = extract(markup, "https://example.com/", ITEM_SELECTORS)

        assert records[0].url == "https://other.org/p/1"
        assert records[0].source == "other.org"
