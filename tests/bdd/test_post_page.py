"""Behaviour tests for building and serving post pages.

The scenarios in ``features/post_page.feature`` drive the static builder
against an in-memory content source and assert on the written HTML.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest
from bs4 import BeautifulSoup
from pytest_bdd import given, parsers, scenarios, then, when

from post_pages.assembler import PageAssembler
from post_pages.builder import StaticSiteBuilder
from post_pages.render_state import RenderState
from post_pages.renderer import PageRenderer

FEATURE_FILE = Path(__file__).resolve().parents[2] / "features" / "post_page.feature"
scenarios(FEATURE_FILE)


@pytest.fixture
def scenario_state() -> dict[str, typ.Any]:
    """Return a mutable dict used to share scenario state across BDD steps."""
    return {}


def _builder(source: typ.Any, output_dir: Path) -> StaticSiteBuilder:
    return StaticSiteBuilder(PageAssembler(source), PageRenderer(), output_dir)


def _page(state: dict[str, typ.Any], slug: str) -> BeautifulSoup:
    builder: StaticSiteBuilder = state["builder"]
    return BeautifulSoup(
        builder.page_path(slug).read_text(encoding="utf-8"), "html.parser"
    )


@given("a catalogue of three published posts")
def given_catalogue(
    fake_source: typ.Any, tmp_path: Path, scenario_state: dict[str, typ.Any]
) -> None:
    """Serve the shared three-post timeline."""
    scenario_state["builder"] = _builder(fake_source, tmp_path / "post")


@given("an unreachable content source")
def given_unreachable(
    fake_source: typ.Any, tmp_path: Path, scenario_state: dict[str, typ.Any]
) -> None:
    """Serve a source whose every request fails."""
    fake_source.unavailable = True
    scenario_state["builder"] = _builder(fake_source, tmp_path / "post")


@when("the site is built")
def when_built(scenario_state: dict[str, typ.Any]) -> None:
    """Run the static build."""
    scenario_state["report"] = scenario_state["builder"].build()


@when(parsers.parse('"{slug}" is requested on demand'))
def when_on_demand(slug: str, scenario_state: dict[str, typ.Any]) -> None:
    """Render a post that was not pre-rendered."""
    view = scenario_state["builder"].render_on_demand(slug)
    scenario_state["view"] = view
    scenario_state["html"] = view.render()


@then(parsers.parse('the page for "{slug}" is written'))
def then_written(slug: str, scenario_state: dict[str, typ.Any]) -> None:
    """The build reports the page and it exists on disk."""
    builder: StaticSiteBuilder = scenario_state["builder"]
    assert builder.page_path(slug) in scenario_state["report"].written, (
        f"{slug} missing from build report"
    )
    assert builder.page_path(slug).exists()


@then(parsers.parse('the page for "{slug}" shows a read time of "{read_time}"'))
def then_read_time(slug: str, read_time: str, scenario_state: dict[str, typ.Any]) -> None:
    """The read-time label matches the expected estimate."""
    label = _page(scenario_state, slug).select_one(".post-meta__read-time")
    assert label is not None, "read time label missing"
    assert label.get_text(strip=True) == read_time


@then(parsers.parse('the page for "{slug}" links to "{previous}" and "{following}"'))
def then_siblings(
    slug: str, previous: str, following: str, scenario_state: dict[str, typ.Any]
) -> None:
    """Both sibling links carry the neighbouring post titles."""
    soup = _page(scenario_state, slug)
    before = soup.select_one("[data-test='previous-post'] h3")
    after = soup.select_one("[data-test='next-post'] h3")
    assert before is not None and before.get_text(strip=True) == previous
    assert after is not None and after.get_text(strip=True) == following


@then("the view passed through loading before rendering")
def then_transitions(scenario_state: dict[str, typ.Any]) -> None:
    """An on-demand view starts loading and ends rendered."""
    view = scenario_state["view"]
    assert view.transitions == [RenderState.LOADING, RenderState.RENDERED]
    assert not view.is_fallback


@then("the rendered page has no next post link")
def then_no_next(scenario_state: dict[str, typ.Any]) -> None:
    """The newest post omits the next-post navigation."""
    soup = BeautifulSoup(scenario_state["html"], "html.parser")
    assert soup.select_one("[data-test='next-post']") is None
    assert soup.select_one("[data-test='previous-post']") is not None


@then("no pages are written")
def then_nothing(scenario_state: dict[str, typ.Any]) -> None:
    """An empty enumeration is a successful, empty build."""
    report = scenario_state["report"]
    assert report.written == []
    assert report.ok
