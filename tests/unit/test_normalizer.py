"""
tests/unit/test_normalizer.py

Unit tests for normalize_response() and detect_soft_failure().

Verifies:
✔ Candidate shape → candidates[0].content.parts[0].text
✔ Chat shape → choices[0].message.content
✔ Candidate shape is probed before chat shape
✔ A null or non-list candidates key never blocks a valid chat reply
✔ Top-level error object surfaces its message
✔ Unparseable / non-object / empty-shape bodies raise ResponseFormatError
✔ Soft-failure scan is case-insensitive and covers the whole body
"""

import json

import pytest

from inference.errors import ResponseFormatError
from inference.normalizer import SOFT_FAILURE_REASON, detect_soft_failure, normalize_response


def dumps(data) -> bytes:
    return json.dumps(data).encode()


class TestKnownShapes:
    def test_chat_completion_text(self):
        body = dumps({"choices": [{"message": {"content": "X"}}]})
        assert normalize_response(body) == "X"

    def test_candidate_text(self):
        body = dumps({"candidates": [{"content": {"parts": [{"text": "Y"}]}}]})
        assert normalize_response(body) == "Y"

    def test_accepts_str_body(self):
        assert normalize_response('{"choices": [{"message": {"content": "Z"}}]}') == "Z"

    def test_candidates_probed_first(self):
        body = dumps({
            "candidates": [{"content": {"parts": [{"text": "from candidates"}]}}],
            "choices": [{"message": {"content": "from choices"}}],
        })
        assert normalize_response(body) == "from candidates"

    def test_empty_candidates_falls_through_to_choices(self):
        body = dumps({"candidates": [], "choices": [{"message": {"content": "chat"}}]})
        assert normalize_response(body) == "chat"

    @pytest.mark.parametrize("candidates", [None, "oops", {"content": {}}, 0])
    def test_non_list_candidates_falls_through_to_choices(self, candidates):
        body = dumps({"candidates": candidates, "choices": [{"message": {"content": "X"}}]})
        assert normalize_response(body) == "X"

    def test_populated_shape_with_missing_text_is_empty(self):
        body = dumps({"candidates": [{"finishReason": "SAFETY"}]})
        assert normalize_response(body) == ""

    def test_null_chat_content_is_empty(self):
        body = dumps({"choices": [{"message": {"content": None}}]})
        assert normalize_response(body) == ""

    def test_extra_fields_ignored(self):
        body = dumps({
            "id": "chatcmpl-1",
            "usage": {"total_tokens": 10},
            "choices": [{"index": 0, "finish_reason": "stop",
                         "message": {"role": "assistant", "content": "ok"}}],
        })
        assert normalize_response(body) == "ok"


class TestErrors:
    def test_api_error_message(self):
        with pytest.raises(ResponseFormatError, match="bad key"):
            normalize_response(dumps({"error": {"message": "bad key"}}))

    def test_api_error_string(self):
        with pytest.raises(ResponseFormatError, match="forbidden"):
            normalize_response(dumps({"error": "forbidden"}))

    def test_error_wins_over_content(self):
        body = dumps({"error": {"message": "bad key"},
                      "choices": [{"message": {"content": "X"}}]})
        with pytest.raises(ResponseFormatError, match="bad key"):
            normalize_response(body)

    def test_null_error_is_ignored(self):
        body = dumps({"error": None, "choices": [{"message": {"content": "X"}}]})
        assert normalize_response(body) == "X"

    def test_invalid_json(self):
        with pytest.raises(ResponseFormatError, match="JSON Parse Error"):
            normalize_response(b"<html>502 Bad Gateway</html>")

    def test_non_object_json(self):
        with pytest.raises(ResponseFormatError):
            normalize_response(b"[1, 2, 3]")

    def test_no_content_found(self):
        with pytest.raises(ResponseFormatError, match="No response content found"):
            normalize_response(dumps({"candidates": [], "choices": []}))

    def test_wrong_types_are_format_errors(self):
        with pytest.raises(ResponseFormatError):
            normalize_response(dumps({"choices": "not a list"}))

    def test_malformed_populated_shape(self):
        with pytest.raises(ResponseFormatError, match="Unrecognized response shape"):
            normalize_response(dumps({"choices": [{"message": "not an object"}]}))


class TestSoftFailureScan:
    @pytest.mark.parametrize("body", [
        b'{"error": {"message": "Quota exceeded"}}',
        b'{"error": {"message": "The model is overloaded"}}',
        b'{"error": {"message": "Rate limit reached for requests"}}',
        b'{"choices": [{"message": {"content": "mind the RATE LIMIT"}}]}',
    ])
    def test_tokens_detected(self, body):
        assert detect_soft_failure(body) == SOFT_FAILURE_REASON

    def test_clean_body(self):
        assert detect_soft_failure(b'{"choices": [{"message": {"content": "hi"}}]}') is None

    def test_rate_limit_with_valid_content_is_still_flagged(self):
        body = dumps({"choices": [{"message": {"content": "```lua\n-- no rate limit here\n```"}}]})
        assert normalize_response(body)
        assert detect_soft_failure(body) == SOFT_FAILURE_REASON
