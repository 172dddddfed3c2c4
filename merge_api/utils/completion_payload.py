"""Recover the ``snippets`` list from a generation completion.

The model is asked for one JSON object, but answers sometimes arrive inside
a Markdown fence or with a sentence before or after it. Decoding is tried
from every opening bracket, so any such wrapping is skipped.
"""

from __future__ import annotations

import json
from typing import Any, Iterator, List, Optional

_decoder = json.JSONDecoder()


class CompletionPayloadError(ValueError):
    """The completion holds no usable list of snippet objects."""


def _json_documents(text: str) -> Iterator[Any]:
    """Yield the top-level JSON values embedded in ``text``, left to right."""
    index = 0
    while index < len(text):
        if text[index] not in "{[":
            index += 1
            continue
        try:
            document, end = _decoder.raw_decode(text, index)
        except json.JSONDecodeError:
            index += 1
            continue
        yield document
        index = end


def _as_snippet_items(document: Any) -> Optional[List[dict]]:
    if isinstance(document, dict):
        items = document.get("snippets")
        if isinstance(items, list) and all(isinstance(item, dict) for item in items):
            return items
        return None
    # A bare array is accepted only when it clearly holds snippet objects.
    if isinstance(document, list) and document and all(isinstance(item, dict) for item in document):
        return document
    return None


def extract_snippet_items(text: Optional[str]) -> List[dict]:
    """Return the raw snippet dicts found in ``text``.

    >>> extract_snippet_items('```json\\n{"snippets": [{"code": "x"}]}\\n```')
    [{'code': 'x'}]
    """
    if not text or not text.strip():
        raise CompletionPayloadError("empty completion")

    for document in _json_documents(text):
        items = _as_snippet_items(document)
        if items is not None:
            return items
    raise CompletionPayloadError("no snippets list in completion")
