"""Tests for parse_decision(): merge over defaults and the two fallback policies."""

import json

import pytest

from npc_sandbox.models import ACTION_TYPES, Decision
from npc_sandbox.pipeline import parse_decision


def _full(**overrides) -> str:
    data = {
        "thought": "Need wood before nightfall.",
        "move_to": "forest",
        "action_type": "GATHER",
        "target": "Wood",
        "speech": "I'll be back soon.",
    }
    data.update(overrides)
    return json.dumps(data)


def test_full_decision_parsed():
    d = parse_decision(_full(), "camp")
    assert d.thought == "Need wood before nightfall."
    assert d.move_to == "forest"
    assert d.action_type == "GATHER"
    assert d.target == "Wood"
    assert d.speech == "I'll be back soon."
    assert d.parsed is True


def test_fenced_output_parsed():
    d = parse_decision(f"```json\n{_full()}\n```", "camp")
    assert d.action_type == "GATHER"
    assert d.parsed is True


def test_missing_fields_keep_defaults():
    d = parse_decision('{"action_type": "BUILD"}', "camp")
    assert d.action_type == "BUILD"
    assert d.move_to == "camp"
    assert d.thought == "..."
    assert d.speech == "..."
    assert d.target == "Self"


def test_lowercase_action_normalized():
    d = parse_decision(_full(action_type=" rest "), "camp")
    assert d.action_type == "REST"


def test_unknown_action_is_kept_as_flavor_request():
    d = parse_decision(_full(action_type="dance", target="fire"), "camp")
    assert d.action_type == "UNKNOWN"
    assert d.requested_action == "DANCE"
    assert d.action_name == "DANCE"
    assert d.parsed is True
    assert d.speech == "I'll be back soon."
    assert d.move_to == "forest"


def test_known_action_has_no_requested_name():
    d = parse_decision(_full(action_type="Build"), "camp")
    assert d.action_type == "BUILD"
    assert d.requested_action is None
    assert d.action_name == "BUILD"


def test_blank_action_keeps_rest():
    d = parse_decision(_full(action_type="  "), "camp")
    assert d.action_type == "REST"
    assert d.requested_action is None


@pytest.mark.parametrize("raw", ["Here you go: {}", "{}", "```json\n{}\n```"])
def test_empty_object_merges_as_defaults(raw):
    d = parse_decision(raw, "lake")
    assert d.parsed is True
    assert d.action_type == "REST"
    assert d.thought == "..."
    assert d.move_to == "lake"


@pytest.mark.parametrize("raw", ["{", "} then {", "no object here"])
def test_text_without_brace_pair_is_a_parse_failure(raw):
    d = parse_decision(raw, "camp")
    assert d.parsed is False
    assert d.thought == raw.strip()


def test_wrong_field_types_keep_defaults():
    d = parse_decision(_full(speech=42, target=None, move_to=["lake"]), "camp")
    assert d.speech == "..."
    assert d.target == "Self"
    assert d.move_to == "camp"
    assert d.action_type == "GATHER"


def test_null_or_blank_move_to_means_stay():
    assert parse_decision(_full(move_to=None), "lake").move_to == "lake"
    assert parse_decision(_full(move_to="  "), "lake").move_to == "lake"


def test_unknown_keys_ignored():
    d = parse_decision(_full(parsed=False, hp_delta=-50), "camp")
    assert d.parsed is True
    assert not hasattr(d, "hp_delta")


def test_invalid_json_passthrough_keeps_raw_text():
    raw = '{"thought": "I am so hungry", "action_type": GATHER'
    d = parse_decision(raw, "camp", policy="passthrough")
    assert d.parsed is False
    assert d.thought == raw
    assert d.action_type == "REST"
    assert d.move_to == "camp"


def test_prose_passthrough_keeps_raw_text():
    d = parse_decision("I think I will go fishing today.", "lake")
    assert d.parsed is False
    assert d.thought == "I think I will go fishing today."
    assert d.action_type == "REST"


def test_invalid_json_defaults_policy_drops_raw_text():
    d = parse_decision("not json at all", "camp", policy="defaults")
    assert d.parsed is False
    assert d.thought == "..."
    assert d.action_type == "REST"


def test_json_array_is_a_parse_failure():
    d = parse_decision('["GATHER"]', "camp")
    assert d.parsed is False
    assert d.action_type == "REST"


@pytest.mark.parametrize("raw", [None, "", "   "])
def test_gateway_failure_gives_default_decision(raw):
    d = parse_decision(raw, "ruins")
    assert d.parsed is False
    assert d.action_type == "REST"
    assert d.move_to == "ruins"
    assert d.thought == "..."


@pytest.mark.parametrize("raw", [
    "{", "}", "{}", "{{}}", '{"action_type": 5}', "```json```", "null", "123",
    '{"thought": {"nested": true}}', '{"move_to": 3.5, "speech": []}',
])
def test_malformed_input_never_raises_and_is_complete(raw):
    d = parse_decision(raw, "camp")
    assert isinstance(d, Decision)
    assert d.action_type in ACTION_TYPES
    assert isinstance(d.thought, str)
    assert isinstance(d.speech, str)
    assert isinstance(d.target, str)
    assert d.move_to
