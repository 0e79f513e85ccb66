import pytest

from canvas_fetch.api.errors import MalformedJsonError, UnexpectedContentError
from canvas_fetch.api.pagination import FetchRequest, mask_token, next_link, parse_page_body


def test_single_object_is_wrapped():
    assert parse_page_body('{"id":1}') == [{"id": 1}]


def test_array_keeps_order():
    assert parse_page_body('[{"id":1},{"id":2}]') == [{"id": 1}, {"id": 2}]


def test_empty_array_yields_no_records():
    assert parse_page_body("[]") == []


def test_parsing_is_repeatable():
    body = '[{"id": 1, "tags": ["a"]}, {"id": 2}]'
    first = parse_page_body(body)
    first[0]["tags"].append("b")
    assert parse_page_body(body) == [{"id": 1, "tags": ["a"]}, {"id": 2}]


@pytest.mark.parametrize("body", ['"not json"', "", " {}", "\n[]", "null", "<html>"])
def test_other_leading_characters_are_rejected(body):
    with pytest.raises(UnexpectedContentError):
        parse_page_body(body, url="https://x/a")


def test_unexpected_content_names_url_and_truncates_body():
    body = "x" * 500
    with pytest.raises(UnexpectedContentError) as excinfo:
        parse_page_body(body, url="https://x/a", status=200)

    err = excinfo.value
    assert err.url == "https://x/a"
    assert err.snippet == "x" * 200
    assert "https://x/a" in str(err)


@pytest.mark.parametrize("body", ['{"id": ', "[{}", '{"id": 1} trailing'])
def test_broken_json_is_malformed(body):
    with pytest.raises(MalformedJsonError) as excinfo:
        parse_page_body(body, url="https://x/a")
    assert excinfo.value.url == "https://x/a"
    assert isinstance(excinfo.value.__cause__, ValueError)


def test_array_of_non_objects_is_malformed():
    with pytest.raises(MalformedJsonError, match="array element 1"):
        parse_page_body('[{"id": 1}, 2]')


def test_next_link_absent():
    assert next_link({}) is None
    assert next_link({"Link": '<https://x/a?page=1>; rel="prev"'}) is None


def test_next_link_requires_exact_format():
    # The separator must be exactly "; " before rel.
    assert next_link({"Link": '<https://x/a?page=2>;rel="next"'}) is None
    assert next_link({"Link": '<https://x/a?page=2>; rel=next'}) is None


def test_next_link_first_match_wins():
    headers = [
        ("Link", '<https://x/one>; rel="next"'),
        ("Link", '<https://x/two>; rel="next"'),
    ]
    assert next_link(headers) == "https://x/one"


def test_request_repr_and_mask_hide_token():
    request = FetchRequest(url="https://x/a", token="abcdefgh1234")
    assert "abcdefgh1234" not in repr(request)
    assert request.masked_token == "****1234"
    assert mask_token("short") == "****"
