import json

import pytest

from core.config import TransformSettings
from core.transform import BodyTransformer, apply_transforms


@pytest.fixture
def transformer():
    return BodyTransformer(TransformSettings(inject_email_type="work"))


def test_injects_type_into_first_email(transformer):
    text = json.dumps({"userName": "test", "emails": [{"value": "a@b.com", "primary": True}]})
    result = json.loads(transformer.apply(text))
    assert result["emails"][0] == {"value": "a@b.com", "primary": True, "type": "work"}
    assert result["userName"] == "test"


def test_does_not_overwrite_existing_type(transformer):
    text = json.dumps({"emails": [{"value": "a@b.com", "type": "home"}]})
    assert transformer.apply(text) == text


def test_empty_type_counts_as_missing(transformer):
    text = json.dumps({"emails": [{"value": "a@b.com", "type": ""}]})
    assert json.loads(transformer.apply(text))["emails"][0]["type"] == "work"


def test_only_first_email_is_touched(transformer):
    text = json.dumps({"emails": [{"value": "a@b.com"}, {"value": "c@d.com"}]})
    emails = json.loads(transformer.apply(text))["emails"]
    assert emails[0]["type"] == "work"
    assert "type" not in emails[1]


@pytest.mark.parametrize(
    "text",
    [
        "not json",
        json.dumps({"userName": "test"}),
        json.dumps({"emails": []}),
        json.dumps({"emails": "a@b.com"}),
        json.dumps({"emails": ["a@b.com"]}),
        json.dumps([{"emails": [{"value": "a@b.com"}]}]),
        "",
    ],
)
def test_no_op_inputs_are_returned_unchanged(transformer, text):
    assert transformer.apply(text) == text


def test_no_op_when_unconfigured():
    text = json.dumps({"emails": [{"value": "a@b.com"}]})
    assert BodyTransformer().apply(text) == text
    assert BodyTransformer(TransformSettings(inject_email_type="")).apply(text) == text


@pytest.mark.parametrize(
    "text",
    [
        json.dumps({"emails": [{"value": "a@b.com"}]}),
        json.dumps({"emails": [{"value": "a@b.com", "type": "home"}]}),
        json.dumps({"emails": []}),
        "{broken",
    ],
)
def test_apply_is_idempotent(transformer, text):
    once = transformer.apply(text)
    assert transformer.apply(once) == once


def test_apply_bytes_returns_original_bytes_when_unchanged(transformer):
    raw = b'{ "userName" : "caf\xc3\xa9" }'
    assert transformer.apply_bytes(raw) is raw


def test_apply_bytes_reencodes_transformed_body(transformer):
    raw = '{"emails":[{"value":"josé@b.com"}]}'.encode()
    assert transformer.apply_bytes(raw) == '{"emails":[{"value":"josé@b.com","type":"work"}]}'.encode()


def test_apply_transforms_reads_config(make_config):
    config = make_config(inject_email_type="work")
    result = apply_transforms('{"emails":[{"value":"a@b.com"}]}', config)
    assert json.loads(result)["emails"][0]["type"] == "work"
