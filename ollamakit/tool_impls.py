"""Ready-made tools: a calculator, a web scraper, a stock scraper and a web search."""

from __future__ import annotations

import ast
import json
import math
import operator
import re
from dataclasses import asdict, dataclass
from decimal import Decimal
from typing import Any, Callable

import httpx
from bs4 import BeautifulSoup
from bs4.element import Comment, Declaration, Doctype, NavigableString, ProcessingInstruction, Tag
from pydantic import BaseModel, Field

from .tools import Tool

# --- calculator -------------------------------------------------------------


def _divide(left: float, right: float) -> float:
    if right == 0:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


def _modulo(left: float, right: float) -> float:
    if right == 0:
        return math.nan
    try:
        return math.fmod(left, right)
    except ValueError:
        return math.nan


def _power(base: float, exponent: float) -> float:
    try:
        result = base**exponent
    except ZeroDivisionError:
        return math.inf
    except OverflowError:
        if base < 0 and exponent.is_integer() and int(exponent) % 2:
            return -math.inf
        return math.inf
    if isinstance(result, complex):
        return math.nan
    return result


_BINARY: dict[type[ast.operator], Callable[[float, float], float]] = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: _divide,
    ast.Mod: _modulo,
    ast.Pow: _power,
}

_UNARY: dict[type[ast.unaryop], Callable[[float], float]] = {
    ast.USub: operator.neg,
    ast.UAdd: operator.pos,
}


def _evaluate(node: ast.AST) -> float:
    if isinstance(node, ast.Constant):
        value = node.value
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"unsupported literal {value!r}")
        try:
            return float(value)
        except OverflowError as exc:
            raise ValueError("number too large") from exc
    if isinstance(node, ast.UnaryOp) and type(node.op) in _UNARY:
        return _UNARY[type(node.op)](_evaluate(node.operand))
    if isinstance(node, ast.BinOp) and type(node.op) in _BINARY:
        return _BINARY[type(node.op)](_evaluate(node.left), _evaluate(node.right))
    raise ValueError(f"unsupported syntax: {type(node).__name__}")


def evaluate_expression(expression: str) -> float:
    """Evaluate an arithmetic expression with ``+ - * / % **`` and parentheses.

    Raises ValueError for anything that is not such an expression.
    """
    try:
        tree = ast.parse(expression.strip(), mode="eval")
    except SyntaxError as exc:
        raise ValueError(f"invalid expression: {exc.msg}") from exc
    except ValueError as exc:
        raise ValueError(f"invalid expression: {exc}") from exc
    try:
        return _evaluate(tree.body)
    except RecursionError as exc:
        raise ValueError("expression is nested too deeply") from exc


def _format_number(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


class CalculatorParams(BaseModel):
    expression: str = Field(
        description=(
            "The mathematical expression to calculator. General formatting guidelines:\n"
            "- Use `*` for multiplication\n"
            "- Use `**` for exponents\n"
            "- Be sure to use parantheses for more complicated expressions"
        )
    )


class Calculator(Tool):
    """Evaluates arithmetic; failures are returned as text for the model to read."""

    name = "calculator"
    description = (
        "Evaluates an arbitrary mathematical expression. "
        "Can only evaluate one expression at a time."
    )
    Params = CalculatorParams

    async def call(self, params: CalculatorParams) -> str:
        try:
            return _format_number(evaluate_expression(params.expression))
        except ValueError as exc:
            return f"Calc evaluation error: {exc}"


# --- HTML helpers -------------------------------------------------------------

_SKIPPED_STRINGS = (Comment, Declaration, Doctype, ProcessingInstruction)
_BLOCKS = {
    "p", "div", "section", "article", "header", "footer", "main", "nav", "aside",
    "table", "tr", "form", "figure", "dl", "dd", "dt",
}
_HEADINGS = {f"h{level}": level for level in range(1, 7)}
_LIST_ITEM = re.compile(r"^ *(\*|\d+\.) ")


def _children(node: Tag, depth: int) -> str:
    return "".join(_render(child, depth) for child in node.children)


def _render_list(node: Tag, depth: int) -> str:
    ordered = node.name == "ol"
    items = [child for child in node.children if isinstance(child, Tag) and child.name == "li"]
    rendered = []
    for index, item in enumerate(items, start=1):
        marker = f"{index}." if ordered else "*"
        body = re.sub(r"\n{2,}", "\n", _children(item, depth + 1).strip())
        rendered.append(f"{'  ' * depth}{marker} {body}")
    return "\n\n" + "\n".join(rendered) + "\n\n"


def _render(node: Any, depth: int = 0) -> str:
    if isinstance(node, NavigableString):
        if isinstance(node, _SKIPPED_STRINGS):
            return ""
        return re.sub(r"\s+", " ", str(node))
    if not isinstance(node, Tag):
        return ""
    name = node.name
    if name in _HEADINGS:
        return f"\n\n{'#' * _HEADINGS[name]} {_children(node, depth).strip()}\n\n"
    if name in ("ul", "ol"):
        return _render_list(node, depth)
    if name == "li":
        return f"\n* {_children(node, depth).strip()}\n"
    if name == "br":
        return "\n"
    if name == "hr":
        return "\n\n---\n\n"
    if name in ("strong", "b"):
        inner = _children(node, depth).strip()
        return f"**{inner}**" if inner else ""
    if name in ("em", "i"):
        inner = _children(node, depth).strip()
        return f"*{inner}*" if inner else ""
    if name == "pre":
        return f"\n\n```\n{node.get_text().strip(chr(10))}\n```\n\n"
    if name == "code":
        return f"`{node.get_text()}`"
    if name == "a":
        inner = _children(node, depth).strip()
        href = node.get("href")
        return f"[{inner}]({href})" if href else inner
    if name == "img":
        return f"![{node.get('alt', '')}]({node.get('src', '')})"
    if name == "blockquote":
        inner = _children(node, depth).strip()
        quoted = "\n".join(f"> {line.strip()}" for line in inner.splitlines())
        return f"\n\n{quoted}\n\n"
    if name in _BLOCKS:
        return f"\n\n{_children(node, depth).strip()}\n\n"
    return _children(node, depth)


def _tidy_line(line: str) -> str:
    if _LIST_ITEM.match(line):
        return line.rstrip()
    return line.strip()


def html_to_markdown(html: str) -> str:
    """Convert an HTML page to Markdown text, dropping scripts and styles."""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style", "noscript", "head", "template"]):
        tag.decompose()
    text = "\n".join(_tidy_line(line) for line in _render(soup).splitlines())
    return re.sub(r"\n{3,}", "\n\n", text).strip()


def _text_of(node: Tag) -> str:
    return node.get_text()


def parse_stock_page(html: str) -> dict[str, str]:
    """Read the description/value pairs from a stock quote page."""
    document = BeautifulSoup(html, "html.parser")
    result: dict[str, str] = {}
    for item in document.select("div.gyFHrc"):
        description = item.select_one("div.mfs7Fc")
        value = item.select_one("div.P6K39c")
        if description is not None and value is not None:
            result[_text_of(description)] = _text_of(value)
    return result


@dataclass
class SearchResult:
    title: str
    link: str
    snippet: str

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


def _required_text(result: Tag, selector: str) -> str:
    found = result.select_one(selector)
    if found is None:
        raise ValueError(f"search result without {selector!r}")
    return _text_of(found)


def parse_search_results(html: str) -> list[SearchResult]:
    """Read the results from a search results page; incomplete results raise ValueError."""
    document = BeautifulSoup(html, "html.parser")
    return [
        SearchResult(
            title=_required_text(result, ".result__a"),
            link=_required_text(result, ".result__url").strip(),
            snippet=_required_text(result, ".result__snippet"),
        )
        for result in document.select(".web-result")
    ]


def _compact_json(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


async def _fetch_text(
    client: httpx.AsyncClient | None, url: str, params: dict[str, str] | None = None
) -> str:
    if client is not None:
        response = await client.get(url, params=params)
        return response.text
    async with httpx.AsyncClient(follow_redirects=True) as own:
        response = await own.get(url, params=params)
        return response.text


# --- web tools ----------------------------------------------------------------


class StockParams(BaseModel):
    exchange: str = Field(description="The stock exchange market identifier code (MIC)")
    ticker: str = Field(description="The ticker symbol of the stock")


class StockScraper(Tool):
    name = "stock_scraper"
    description = "Scrapes stock information from Google Finance."
    Params = StockParams

    def __init__(
        self,
        base_url: str = "https://www.google.com/finance",
        language: str = "en",
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url
        self.language = language
        self.client = client

    async def scrape(self, exchange: str, ticker: str) -> dict[str, str]:
        url = f"{self.base_url}/quote/{ticker}:{exchange}"
        html = await _fetch_text(self.client, url, {"hl": self.language})
        return parse_stock_page(html)

    async def call(self, params: StockParams) -> str:
        return _compact_json(await self.scrape(params.exchange, params.ticker))


class ScraperParams(BaseModel):
    website: str = Field(description="The URL of the website to scrape")


class Scraper(Tool):
    name = "website_scraper"
    description = "Scrapes text content from websites and splits it into manageable chunks."
    Params = ScraperParams

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        self.client = client

    async def call(self, params: ScraperParams) -> str:
        return html_to_markdown(await _fetch_text(self.client, params.website))


class SearchParams(BaseModel):
    query: str = Field(description="The search query to send to DuckDuckGo")


class DDGSearcher(Tool):
    name = "ddg_searcher"
    description = "Searches the web using DuckDuckGo's HTML interface."
    Params = SearchParams

    def __init__(
        self,
        base_url: str = "https://duckduckgo.com",
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url
        self.client = client

    async def search(self, query: str) -> list[SearchResult]:
        html = await _fetch_text(self.client, f"{self.base_url}/html/", {"q": query})
        return parse_search_results(html)

    async def call(self, params: SearchParams) -> str:
        results = await self.search(params.query)
        return _compact_json([result.to_dict() for result in results])