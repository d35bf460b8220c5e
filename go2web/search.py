from urllib.parse import parse_qs, quote_plus, urlparse

from bs4 import BeautifulSoup

from go2web.content import strip_html

SEARCH_URL = "https://html.duckduckgo.com/html/"
MAX_RESULTS = 10


def search_url(terms, base=SEARCH_URL):
    return f"{base}?q={quote_plus(terms)}"


def _unwrap(href):
    # DuckDuckGo wraps results as //duckduckgo.com/l/?uddg=<target>
    if href.startswith("//"):
        href = "https:" + href
    parsed = urlparse(href)
    if parsed.path.startswith("/l/"):
        target = parse_qs(parsed.query).get("uddg")
        if target:
            return target[0]
    return href


def extract_results(html, limit=MAX_RESULTS):
    """Pull (title, url) pairs out of a DuckDuckGo HTML result page."""
    soup = BeautifulSoup(html, "html.parser")
    results = []
    for link in soup.select("a.result__a"):
        href = link.get("href")
        if not href:
            continue
        results.append({
            "title": strip_html(link.get_text(" ")),
            "url": _unwrap(href),
        })
        if len(results) >= limit:
            break
    return results


def search(fetcher, terms, base=SEARCH_URL, limit=MAX_RESULTS):
    # the scraper needs the markup, so skip rendering
    page = fetcher.fetch(search_url(terms, base), transform=False)
    return extract_results(page.text, limit)
