import pytest

from merge_api.utils.completion_payload import CompletionPayloadError, extract_snippet_items


def test_plain_object():
    items = extract_snippet_items('{"snippets": [{"code": "a", "isValid": true}]}')
    assert items == [{"code": "a", "isValid": True}]


def test_fenced_object():
    text = '```json\n{"snippets": [{"code": "fn main() {}", "isValid": true}]}\n```'
    assert extract_snippet_items(text)[0]["code"] == "fn main() {}"


def test_object_surrounded_by_prose():
    text = 'Here you go:\n{"snippets": [{"code": "if (x) { y(\\"}\\") }"}]}\nEnjoy!'
    assert extract_snippet_items(text)[0]["code"] == 'if (x) { y("}") }'


def test_bare_list_of_snippets():
    assert extract_snippet_items('[{"code": "x"}, {"code": "y"}]') == [{"code": "x"}, {"code": "y"}]


def test_empty_snippets_list_in_object():
    assert extract_snippet_items('{"snippets": []}') == []


@pytest.mark.parametrize(
    "text",
    [
        None,
        "   ",
        "definitely not json",
        '{"items": [{"code": "x"}]}',
        '{"snippets": "nope"}',
        '{"snippets": [1, 2]}',
        '["a", "b"]',
    ],
)
def test_unusable_completion(text):
    with pytest.raises(CompletionPayloadError):
        extract_snippet_items(text)
