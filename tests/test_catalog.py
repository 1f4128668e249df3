"""Tests for normalizing decoded providers into canonical records."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from provcat.core.catalog import (
    Model,
    Provider,
    index_by_id,
    normalize_catalog,
    normalize_model,
    normalize_provider,
)
from provcat.core.schema import RawModel, RawProvider, decode_catalog


def _raw_provider(provider_id: str, contexts: dict[str, int]) -> RawProvider:
    return RawProvider(
        id=provider_id,
        name=provider_id.title(),
        api=f"https://{provider_id}.example/v1",
        models={
            key: RawModel(id=key, name=key, limit={"context": context, "output": 10})
            for key, context in contexts.items()
        },
    )


def test_one_canonical_provider_per_catalog_key(catalog_payload):
    raw = decode_catalog(catalog_payload)
    providers = normalize_catalog(raw)
    assert len(providers) == len(raw)


def test_providers_are_ordered_by_catalog_key(catalog_payload):
    providers = normalize_catalog(decode_catalog(catalog_payload))
    assert [provider.id for provider in providers] == ["anthropic", "empty", "openai"]


def test_provider_identity_fields_are_copied():
    provider = normalize_provider(_raw_provider("groq", {"llama": 8192}))

    assert provider.id == "groq"
    assert provider.name == "Groq"
    assert provider.api_endpoint == "https://groq.example/v1"
    assert provider.type == "groq"


def test_defaults_pick_largest_and_smallest_context():
    provider = normalize_provider(_raw_provider("p", {"a": 100, "b": 500, "c": 50}))

    assert provider.default_large_model_id == "b"
    assert provider.default_small_model_id == "c"
    assert provider.default_large_model.context_window == 500
    assert provider.default_small_model.context_window == 50


@pytest.mark.parametrize(
    "contexts",
    [
        {"a": 1, "b": 2, "c": 3},
        {"z": 8000, "y": 8000, "x": 32000, "w": 4000},
        {"only": 128_000},
        {"m1": 0, "m2": 0},
    ],
)
def test_defaults_bound_every_other_model(contexts):
    provider = normalize_provider(_raw_provider("p", contexts))
    windows = [model.context_window for model in provider.models]

    assert provider.default_large_model.context_window == max(windows)
    assert provider.default_small_model.context_window == min(windows)


def test_single_model_is_both_defaults():
    provider = normalize_provider(_raw_provider("p", {"solo": 4096}))
    assert provider.default_large_model_id == "solo"
    assert provider.default_small_model_id == "solo"


def test_single_zero_context_model_is_both_defaults():
    provider = normalize_provider(_raw_provider("p", {"tiny": 0}))
    assert provider.default_large_model_id == "tiny"
    assert provider.default_small_model_id == "tiny"


def test_provider_without_models_has_empty_defaults():
    provider = normalize_provider(RawProvider(id="empty", name="Empty"))

    assert provider.models == ()
    assert provider.default_large_model_id == ""
    assert provider.default_small_model_id == ""
    assert provider.default_large_model is None
    assert provider.default_small_model is None


def test_ties_go_to_first_model_in_key_order():
    provider = normalize_provider(_raw_provider("p", {"b": 1000, "a": 1000, "c": 1000}))

    assert [model.id for model in provider.models] == ["a", "b", "c"]
    assert provider.default_large_model_id == "a"
    assert provider.default_small_model_id == "a"


def test_cost_rates_map_without_scaling():
    raw = RawModel(
        id="m",
        name="M",
        cost={"input": 1.5, "output": 2.0, "cache_read": 0.1, "cache_write": 0.2},
    )
    model = normalize_model(raw)

    assert model.cost_per_1m_in == 1.5
    assert model.cost_per_1m_out == 2.0
    assert model.cost_per_1m_in_cached == 0.1
    assert model.cost_per_1m_out_cached == 0.2


def test_model_flags_and_limits_map_directly():
    raw = RawModel(
        id="vision-reasoner",
        name="Vision Reasoner",
        attachment=True,
        reasoning=True,
        tool_call=True,
        limit={"context": 200_000, "output": 64_000},
    )
    model = normalize_model(raw)

    assert model.id == "vision-reasoner"
    assert model.name == "Vision Reasoner"
    assert model.context_window == 200_000
    assert model.default_max_tokens == 64_000
    assert model.can_reason is True
    assert model.supports_images is True
    assert model.has_reasoning_effort is False


def test_duplicate_inner_model_ids_are_emitted_once():
    raw = RawProvider(
        id="p",
        models={
            "alias-b": RawModel(id="shared", limit={"context": 10}),
            "alias-a": RawModel(id="shared", limit={"context": 20}),
        },
    )
    provider = normalize_provider(raw)

    assert [model.id for model in provider.models] == ["shared"]
    assert provider.models[0].context_window == 20
    assert provider.default_large_model_id == "shared"


def test_canonical_records_are_immutable():
    provider = normalize_provider(_raw_provider("p", {"a": 1}))

    with pytest.raises(ValidationError):
        provider.default_large_model_id = "other"
    with pytest.raises(ValidationError):
        provider.models[0].context_window = 2


def test_canonical_model_rejects_negative_context():
    with pytest.raises(ValidationError):
        Model(id="m", name="m", context_window=-1)


def test_get_model_and_index_by_id(catalog_payload):
    providers = normalize_catalog(decode_catalog(catalog_payload))
    index = index_by_id(providers)

    assert set(index) == {"anthropic", "empty", "openai"}
    openai = index["openai"]
    assert isinstance(openai, Provider)
    assert openai.get_model("o3").can_reason is True
    assert openai.get_model("missing") is None
    assert openai.default_large_model_id == "o3"
    assert openai.default_small_model_id == "gpt-4o"


def test_negative_rates_and_limits_are_clamped_to_zero():
    raw = RawModel(
        id="m",
        cost={"input": -1.0, "output": 2.0, "cache_read": -0.1},
        limit={"context": -5, "output": -1},
    )
    model = normalize_model(raw)

    assert model.cost_per_1m_in == 0.0
    assert model.cost_per_1m_out == 2.0
    assert model.cost_per_1m_in_cached == 0.0
    assert model.context_window == 0
    assert model.default_max_tokens == 0


def test_one_bad_model_does_not_drop_other_providers():
    payload = (
        b'{"a": {"id": "a", "models": {"x": {"id": "x", "limit": {"context": 10}}}},'
        b' "b": {"id": "b", "models": {"x": {"id": "x", "cost": {"input": -1}}}}}'
    )
    providers = normalize_catalog(decode_catalog(payload))

    assert [provider.id for provider in providers] == ["a", "b"]
    assert providers[1].models[0].cost_per_1m_in == 0.0
