"""
BeautifulSoup-based item extraction driven by selector configs.
"""

from __future__ import annotations

import logging
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from app.domain.scraping import Record, SelectorConfig, is_absolute_http_url
from app.scraping.normalization.identity import source_for

logger = logging.getLogger(__name__)


class HTMLItemExtractor:
    """
    Deterministic extraction of item records from one HTML document.
    """

    @classmethod
    def extract(
        cls,
        *,
        markup: str,
        base_url: str,
        selectors: SelectorConfig,
    ) -> list[Record]:
        """
        Return one record per article node carrying a title and a resolvable link.
        """

        soup = BeautifulSoup(markup, "html.parser")
        page_base = cls._page_base_url(soup=soup, base_url=base_url)

        records: list[Record] = []
        for index, node in enumerate(soup.select(selectors.article)):
            record = cls._extract_record(node=node, page_base=page_base, selectors=selectors)
            if record is None:
                logger.debug("Dropped candidate %d: missing title or link", index)
                continue
            records.append(record)
        return records

    @classmethod
    def _extract_record(
        cls,
        *,
        node: Tag,
        page_base: str,
        selectors: SelectorConfig,
    ) -> Record | None:
        title_node = node.select_one(selectors.title)
        title = cls._extract_title(title_node) if title_node is not None else ""
        if not title:
            return None

        url = cls._resolve_link(link_node=node.select_one(selectors.link), page_base=page_base)
        if url is None:
            return None

        price: str | None = None
        if selectors.price:
            price_node = node.select_one(selectors.price)
            if price_node is not None:
                price = price_node.get_text().strip() or None

        return Record(title=title, url=url, source=source_for(url), price=price)

    @staticmethod
    def _extract_title(node: Tag) -> str:
        attribute = node.get("title")
        if isinstance(attribute, str) and attribute.strip():
            return attribute.strip()
        return node.get_text().strip()

    @staticmethod
    def _resolve_link(*, link_node: Tag | None, page_base: str) -> str | None:
        if link_node is None:
            return None
        href = link_node.get("href")
        if not isinstance(href, str) or not href.strip():
            return None

        resolved = urljoin(page_base, href.strip())
        if not is_absolute_http_url(resolved):
            return None
        return resolved

    @staticmethod
    def _page_base_url(*, soup: BeautifulSoup, base_url: str) -> str:
        base_tag = soup.find("base", href=True)
        if base_tag is None:
            return base_url
        href = str(base_tag["href"]).strip()
        if not href:
            return base_url
        return urljoin(base_url, href)


def extract(markup: str, base_url: str, selectors: SelectorConfig) -> list[Record]:
    return HTMLItemExtractor.extract(markup=markup, base_url=base_url, selectors=selectors)
