"""Unit tests for the HTTP content source client."""

from __future__ import annotations

import json
import typing as typ

import pytest
import requests

from post_pages.errors import PostNotFoundError, SourceUnavailableError
from post_pages.source import PrismicClient, at, ordering

if typ.TYPE_CHECKING:
    from pytest_mock import MockerFixture

API = "https://blog.cdn.prismic.io/api/v2"
API_INFO = {
    "refs": [
        {"id": "master", "ref": "master-ref-123", "label": "Master", "isMasterRef": True},
        {"id": "release", "ref": "release-ref", "label": "Spring"},
    ]
}


def _response(mocker: MockerFixture, payload: object, status: int = 200) -> typ.Any:
    response = mocker.Mock()
    response.status_code = status
    body = json.dumps(payload)
    response.text = body
    response.content = body.encode("utf-8")
    return response


def _search(*documents: dict[str, typ.Any]) -> dict[str, typ.Any]:
    return {"page": 1, "total_pages": 1, "results": list(documents)}


@pytest.fixture
def session(mocker: MockerFixture) -> typ.Any:
    """Return a mocked requests.Session."""
    return mocker.Mock(spec=requests.Session)


def test_query_uses_master_ref_and_encodes_parameters(
    mocker: MockerFixture, session: typ.Any
) -> None:
    """Queries resolve the master ref once and send encoded predicates."""
    doc = {"id": "X1", "uid": "hooks-guide", "type": "posts", "data": {"title": "Hooks"}}
    session.get.side_effect = [
        _response(mocker, API_INFO),
        _response(mocker, _search(doc)),
        _response(mocker, _search()),
    ]
    client = PrismicClient(API, access_token="secret", session=session)

    results = client.query(
        [at("document.type", "posts")],
        orderings=[ordering("document.first_publication_date", descending=True)],
        page_size=1,
        after="X0",
    )
    client.query([at("document.type", "posts")])

    assert [item.uid for item in results] == ["hooks-guide"]
    assert session.get.call_count == 3, "master ref should be fetched only once"
    assert session.get.call_args_list[0].args[0] == API
    search_call = session.get.call_args_list[1]
    assert search_call.args[0] == f"{API}/documents/search"
    params = search_call.kwargs["params"]
    assert params == {
        "ref": "master-ref-123",
        "q": '[[at(document.type, "posts")]]',
        "pageSize": "1",
        "orderings": "[document.first_publication_date desc]",
        "after": "X0",
        "access_token": "secret",
    }


def test_get_by_uid_with_preview_ref_skips_master_lookup(
    mocker: MockerFixture, session: typ.Any
) -> None:
    """A preview ref is sent as-is and the master ref is never requested."""
    doc = {"id": "X1", "uid": "draft", "type": "posts", "first_publication_date": None}
    session.get.return_value = _response(mocker, _search(doc))
    client = PrismicClient(API, session=session)

    document = client.get_by_uid("posts", "draft", ref="preview-ref")

    assert document.id == "X1"
    assert document.first_publication_date is None
    session.get.assert_called_once()
    params = session.get.call_args.kwargs["params"]
    assert params["ref"] == "preview-ref"
    assert params["q"] == '[[at(my.posts.uid, "draft")]]'
    assert "access_token" not in params


def test_get_by_uid_raises_not_found(mocker: MockerFixture, session: typ.Any) -> None:
    """An empty result set for a slug is a PostNotFoundError."""
    session.get.return_value = _response(mocker, _search())
    client = PrismicClient(API, session=session)
    with pytest.raises(PostNotFoundError) as excinfo:
        client.get_by_uid("posts", "missing", ref="r")
    assert excinfo.value.ref == "r"


def test_transport_errors_become_source_unavailable(session: typ.Any) -> None:
    """Connection failures are translated into SourceUnavailableError."""
    session.get.side_effect = requests.ConnectionError("refused")
    client = PrismicClient(API, session=session)
    with pytest.raises(SourceUnavailableError) as excinfo:
        client.query([at("document.type", "posts")], ref="r")
    assert excinfo.value.endpoint == API


def test_http_errors_become_source_unavailable(
    mocker: MockerFixture, session: typ.Any
) -> None:
    """HTTP error statuses are reported with a snippet of the body."""
    session.get.return_value = _response(mocker, {"error": "bad ref"}, status=400)
    client = PrismicClient(API, session=session)
    with pytest.raises(SourceUnavailableError, match="HTTP 400"):
        client.query([at("document.type", "posts")], ref="stale")


def test_malformed_payload_becomes_source_unavailable(
    mocker: MockerFixture, session: typ.Any
) -> None:
    """Payloads that do not match the wire types are rejected."""
    session.get.return_value = _response(mocker, {"results": "nope"})
    client = PrismicClient(API, session=session)
    with pytest.raises(SourceUnavailableError, match="malformed"):
        client.query([at("document.type", "posts")], ref="r")


def test_missing_master_ref_is_an_error(mocker: MockerFixture, session: typ.Any) -> None:
    """An API entry point without a master ref cannot serve published content."""
    session.get.return_value = _response(mocker, {"refs": []})
    client = PrismicClient(API, session=session)
    with pytest.raises(SourceUnavailableError, match="master ref"):
        client.master_ref()
