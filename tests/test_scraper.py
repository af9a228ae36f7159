# Test-suite for the AddressScraper orchestrator (fetching replaced by FakeFetcher)
from __future__ import annotations

import pytest
from bs4 import ParserRejectedMarkup

from address_scout.config import ScraperConfig
from address_scout.crawler.domain import DomainFilter
from address_scout.crawler.models import ContentType
from address_scout.crawler.scraper import AddressScraper
from address_scout.errors import ContentTooLarge
from address_scout.parser import html_parser

from conftest import ADDR_1, ADDR_2, ADDR_3, FakeFetcher

TARGET = "https://example.com"


def page(*scripts: str, body: str = "") -> str:
    tags = "".join(f'<script src="{s}"></script>' for s in scripts)
    return f"<html><head>{tags}</head><body>{body}</body></html>"


def as_tuples(results):
    return {(r.address, r.src, r.type, tuple(r.targets)) for r in results}


@pytest.mark.asyncio()
async def test_end_to_end_html_and_script(make_scraper):
    scraper, _ = make_scraper(
        {
            TARGET: page("/app.js", body=f"<p>{ADDR_1}</p>"),
            f"{TARGET}/app.js": f"const owner = '{ADDR_2}';",
        }
    )
    results = await scraper.scrape([TARGET])

    assert as_tuples(results) == {
        (ADDR_1, TARGET, ContentType.HTML, (TARGET,)),
        (ADDR_2, f"{TARGET}/app.js", ContentType.SCRIPT, (TARGET,)),
    }


@pytest.mark.asyncio()
async def test_only_same_registrable_domain_scripts_are_followed(make_scraper):
    scraper, fetcher = make_scraper(
        {
            TARGET: page("https://cdn.example.com/a.js", "https://unrelated.org/a.js"),
            "https://cdn.example.com/a.js": ADDR_1,
            "https://unrelated.org/a.js": ADDR_2,
        }
    )
    results = await scraper.scrape([TARGET])

    assert "https://cdn.example.com/a.js" in fetcher.calls
    assert "https://unrelated.org/a.js" not in fetcher.calls
    assert [r.address for r in results] == [ADDR_1]


@pytest.mark.asyncio()
async def test_other_tenant_on_shared_platform_is_not_followed(make_scraper):
    target = "https://alice.github.io"
    scraper, fetcher = make_scraper(
        {
            target: page("/own.js", "https://mallory.github.io/x.js"),
            f"{target}/own.js": ADDR_1,
            "https://mallory.github.io/x.js": ADDR_2,
        }
    )
    results = await scraper.scrape([target])

    assert fetcher.calls == [target, f"{target}/own.js"]
    assert [r.address for r in results] == [ADDR_1]


@pytest.mark.asyncio()
async def test_bare_relative_script_resolves_from_site_root(make_scraper):
    target = f"{TARGET}/path/index.html"
    scraper, fetcher = make_scraper(
        {
            target: page("lib/app.js"),
            f"{TARGET}/lib/app.js": ADDR_1,
        }
    )
    results = await scraper.scrape([target])

    assert fetcher.calls == [target, f"{TARGET}/lib/app.js"]
    assert results[0].src == f"{TARGET}/lib/app.js"


@pytest.mark.asyncio()
async def test_blacklisted_script_is_skipped(make_scraper, config):
    scraper, fetcher = make_scraper(
        {
            TARGET: page("https://ads.example.com/x.js", "/own.js"),
            "https://ads.example.com/x.js": ADDR_1,
            f"{TARGET}/own.js": ADDR_2,
        },
        domain_filter=DomainFilter(["ads.example.com"]),
    )
    results = await scraper.scrape([TARGET])

    assert "https://ads.example.com/x.js" not in fetcher.calls
    assert [r.address for r in results] == [ADDR_2]


@pytest.mark.asyncio()
async def test_failing_script_does_not_fail_target(make_scraper):
    scraper, _ = make_scraper(
        {
            TARGET: page("/missing.js", "/huge.js", "/ok.js", "javascript:void(0)", body=ADDR_3),
            f"{TARGET}/huge.js": ContentTooLarge(f"{TARGET}/huge.js", 10),
            f"{TARGET}/ok.js": ADDR_1,
        }
    )
    results = await scraper.scrape([TARGET])

    assert {r.address for r in results} == {ADDR_1, ADDR_3}


@pytest.mark.asyncio()
async def test_unexpected_script_error_is_isolated(make_scraper):
    scraper, _ = make_scraper(
        {
            TARGET: page("/boom.js", "/ok.js"),
            f"{TARGET}/boom.js": RuntimeError("boom"),
            f"{TARGET}/ok.js": ADDR_1,
        }
    )
    results = await scraper.scrape([TARGET])
    assert [r.address for r in results] == [ADDR_1]


@pytest.mark.asyncio()
async def test_failed_target_does_not_abort_batch(make_scraper):
    scraper, _ = make_scraper({TARGET: page(body=ADDR_1)})
    results = await scraper.scrape(["https://down.example.org", TARGET])

    assert as_tuples(results) == {(ADDR_1, TARGET, ContentType.HTML, (TARGET,))}


@pytest.mark.asyncio()
async def test_blacklisted_target_fails_whole_target(make_scraper):
    scraper, fetcher = make_scraper({"https://google.com": page("/a.js", body=ADDR_1)})
    assert await scraper.scrape(["https://google.com"]) == []
    assert "https://google.com/a.js" not in fetcher.calls


@pytest.mark.asyncio()
async def test_target_without_registrable_domain_fails(make_scraper):
    scraper, _ = make_scraper({"http://127.0.0.1/": page(body=ADDR_1)})
    assert await scraper.scrape(["http://127.0.0.1/"]) == []


@pytest.mark.asyncio()
async def test_nothing_found_is_not_an_error(make_scraper):
    scraper, _ = make_scraper({TARGET: page(body="no addresses")})
    assert await scraper.scrape([TARGET]) == []


@pytest.mark.asyncio()
async def test_target_cache_skips_network(make_scraper):
    scraper, fetcher = make_scraper(
        {TARGET: page("/app.js", body=ADDR_1), f"{TARGET}/app.js": ADDR_2}
    )
    first = await scraper.scrape([TARGET])
    calls = list(fetcher.calls)
    second = await scraper.scrape([TARGET])

    assert fetcher.calls == calls
    assert as_tuples(first) == as_tuples(second)
    assert TARGET in scraper.target_cache


@pytest.mark.asyncio()
async def test_failed_target_is_not_cached(make_scraper):
    scraper, fetcher = make_scraper({})
    await scraper.scrape([TARGET])
    await scraper.scrape([TARGET])
    assert fetcher.calls == [TARGET, TARGET]
    assert TARGET not in scraper.target_cache


@pytest.mark.asyncio()
async def test_shared_script_is_fetched_once_and_targets_merge(make_scraper):
    shared = "https://static.example.com/shared.js"
    other = "https://www.example.com"
    scraper, fetcher = make_scraper(
        {
            TARGET: page(shared),
            other: page(shared),
            shared: ADDR_1,
        }
    )
    results = await scraper.scrape([TARGET, other])

    assert fetcher.calls.count(shared) == 1
    assert as_tuples(results) == {(ADDR_1, shared, ContentType.SCRIPT, (TARGET, other))}


@pytest.mark.asyncio()
async def test_same_target_twice_in_batch(make_scraper):
    scraper, fetcher = make_scraper({TARGET: page(body=ADDR_1)})
    results = await scraper.scrape([TARGET, TARGET])

    assert fetcher.calls == [TARGET]
    assert as_tuples(results) == {(ADDR_1, TARGET, ContentType.HTML, (TARGET,))}


@pytest.mark.asyncio()
async def test_script_fan_out_is_bounded(make_scraper):
    config = ScraperConfig(concurrency=3, cache_size=50)
    scripts = [f"/s{i}.js" for i in range(10)]
    responses = {TARGET: page(*scripts)}
    responses.update({f"{TARGET}{s}": ADDR_1 for s in scripts})
    fetcher = FakeFetcher(responses, default_delay=0.05)
    scraper, _ = make_scraper(responses, cfg=config, fetcher=fetcher)

    results = await scraper.scrape([TARGET])

    assert fetcher.max_in_flight == 3
    assert len(fetcher.calls) == 11
    assert len(results) == 10


@pytest.mark.asyncio()
async def test_target_timeout_skips_only_slow_target(make_scraper):
    config = ScraperConfig(target_timeout=0.2)
    slow = "https://slow.example.org"
    responses = {slow: page(body=ADDR_2), TARGET: page(body=ADDR_1)}
    fetcher = FakeFetcher(responses, delays={slow: 1.0})
    scraper, _ = make_scraper(responses, cfg=config, fetcher=fetcher)

    results = await scraper.scrape([slow, TARGET])
    assert [r.address for r in results] == [ADDR_1]


@pytest.mark.asyncio()
async def test_scrape_without_session_raises():
    scraper = AddressScraper(ScraperConfig())
    with pytest.raises(RuntimeError):
        await scraper.scrape_target(TARGET)


@pytest.mark.asyncio()
async def test_context_manager_owns_session():
    async with AddressScraper(ScraperConfig()) as scraper:
        assert scraper.session is not None
        assert scraper.fetcher is not None
        session = scraper.session
    assert session.closed
    assert scraper.fetcher is None


@pytest.mark.asyncio()
async def test_repeated_script_is_fetched_once(make_scraper):
    scraper, fetcher = make_scraper(
        {
            TARGET: page("/app.js", "/app.js", "/app.js"),
            f"{TARGET}/app.js": ADDR_1,
        }
    )
    results = await scraper.scrape([TARGET])

    assert fetcher.calls == [TARGET, f"{TARGET}/app.js"]
    assert as_tuples(results) == {(ADDR_1, f"{TARGET}/app.js", ContentType.SCRIPT, (TARGET,))}


@pytest.mark.asyncio()
async def test_rejected_markup_keeps_page_addresses(make_scraper, monkeypatch):
    def reject(*args, **kwargs):
        raise ParserRejectedMarkup("unparseable")

    monkeypatch.setattr(html_parser, "BeautifulSoup", reject)
    scraper, fetcher = make_scraper(
        {
            TARGET: page("/app.js", body=f"<p>{ADDR_1}</p>"),
            f"{TARGET}/app.js": ADDR_2,
        }
    )
    results = await scraper.scrape([TARGET])

    assert fetcher.calls == [TARGET]
    assert as_tuples(results) == {(ADDR_1, TARGET, ContentType.HTML, (TARGET,))}
