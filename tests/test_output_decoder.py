from __future__ import annotations

import json

import pytest

from app.services.offer_copy.errors import FailureKind, MalformedOutputError, SchemaViolationError
from app.services.offer_copy.output_decoder import (
    ParseFailure,
    ParseSuccess,
    SchemaFailure,
    ValidRecord,
    decode_offer_copy,
    parse_document,
    strip_code_fence,
    validate_document,
)
from tests.conftest import VALID_COPY


def test_decode_plain_json_keeps_fields_verbatim() -> None:
    copy = decode_offer_copy(json.dumps(VALID_COPY), "20% off shoes")

    assert copy.headline == "Save 20%"
    assert copy.subheadline is None
    assert copy.body == VALID_COPY["body"]
    assert copy.call_to_action == "Shop Now"
    assert copy.legal_disclaimer is None
    assert copy.model_dump(by_alias=True) == VALID_COPY


@pytest.mark.parametrize(
    "wrapped",
    [
        "```json\n{payload}\n```",
        "```JSON {payload} ```",
        "```\n{payload}\n```",
        "  ```json\n{payload}",
        "{payload}\n```  ",
    ],
)
def test_fenced_reply_decodes_like_unwrapped(wrapped: str) -> None:
    payload = json.dumps(VALID_COPY, indent=2)
    text = wrapped.replace("{payload}", payload)

    assert decode_offer_copy(text, "desc") == decode_offer_copy(payload, "desc")


def test_strip_code_fence_is_idempotent_and_leaves_plain_text_alone() -> None:
    payload = json.dumps(VALID_COPY)
    fenced = f"```json\n{payload}\n```"

    once = strip_code_fence(fenced)
    assert once == payload
    assert strip_code_fence(once) == once
    assert strip_code_fence(f"  {payload}\n") == payload


def test_non_json_is_malformed_output_with_bounded_excerpts() -> None:
    raw = "Sure! Here is your copy: " + "x" * 500
    description = "D" * 100

    with pytest.raises(MalformedOutputError) as exc_info:
        decode_offer_copy(raw, description)

    error = exc_info.value
    message = str(error)
    assert error.kind is FailureKind.MALFORMED_OUTPUT
    assert raw[:200] in message
    assert raw[:201] not in message
    assert "D" * 60 in message
    assert "D" * 61 not in message
    assert error.raw_excerpt == raw[:200]


@pytest.mark.parametrize("raw", ["", "not json at all", "{'headline': 'single quotes'}", "```json\n```"])
def test_non_json_never_yields_a_record(raw: str) -> None:
    assert isinstance(parse_document(raw), ParseFailure)
    with pytest.raises(MalformedOutputError):
        decode_offer_copy(raw, "desc")


def test_missing_call_to_action_is_schema_violation() -> None:
    document = {k: v for k, v in VALID_COPY.items() if k != "callToAction"}

    with pytest.raises(SchemaViolationError) as exc_info:
        decode_offer_copy(json.dumps(document), "desc")

    assert exc_info.value.kind is FailureKind.SCHEMA_VIOLATION
    assert "callToAction" in str(exc_info.value)


def test_numeric_subheadline_is_schema_violation() -> None:
    document = {**VALID_COPY, "subheadline": 42}

    with pytest.raises(SchemaViolationError) as exc_info:
        decode_offer_copy(json.dumps(document), "desc")

    assert [detail["loc"] for detail in exc_info.value.details] == [("subheadline",)]


@pytest.mark.parametrize(
    "document",
    [
        {**VALID_COPY, "cta": "Shop"},
        {**{k: v for k, v in VALID_COPY.items() if k != "callToAction"}, "call_to_action": "Shop"},
        {k: v for k, v in VALID_COPY.items() if k != "subheadline"},
        {**VALID_COPY, "headline": None},
        {**VALID_COPY, "body": ["a", "b"]},
        [VALID_COPY],
        "just a string",
    ],
)
def test_wrong_shapes_are_schema_violations(document) -> None:
    with pytest.raises(SchemaViolationError):
        decode_offer_copy(json.dumps(document), "desc")


def test_stages_return_tagged_results() -> None:
    parsed = parse_document(json.dumps(VALID_COPY))
    assert isinstance(parsed, ParseSuccess)

    validated = validate_document(parsed.document)
    assert isinstance(validated, ValidRecord)
    assert validated.copy.headline == "Save 20%"

    assert isinstance(validate_document({"headline": "only"}), SchemaFailure)


def test_explicit_nulls_and_strings_for_optional_fields() -> None:
    document = {**VALID_COPY, "subheadline": "This week only", "legalDisclaimer": "Excludes sale items."}

    copy = decode_offer_copy(json.dumps(document), "desc")

    assert copy.subheadline == "This week only"
    assert copy.legal_disclaimer == "Excludes sale items."
