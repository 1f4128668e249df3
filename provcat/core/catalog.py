"""Canonical provider/model records and the catalog normalizer."""

from __future__ import annotations

from typing import Dict, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from provcat.core.schema import RawModel, RawProvider
from provcat.utils.log import get_logger

logger = get_logger()


class Model(BaseModel):
    """Normalized model record consumed by provider selection."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    # USD per 1M tokens.
    cost_per_1m_in: float = Field(default=0.0, ge=0)
    cost_per_1m_out: float = Field(default=0.0, ge=0)
    cost_per_1m_in_cached: float = Field(default=0.0, ge=0)
    cost_per_1m_out_cached: float = Field(default=0.0, ge=0)
    context_window: int = Field(default=0, ge=0)
    default_max_tokens: int = Field(default=0, ge=0)
    can_reason: bool = False
    # The upstream schema has no reasoning-effort signal yet.
    has_reasoning_effort: bool = False
    supports_images: bool = False


class Provider(BaseModel):
    """Normalized provider record with its models and default selections."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    api_endpoint: str = ""
    type: str = ""
    models: Tuple[Model, ...] = ()
    default_large_model_id: str = ""
    default_small_model_id: str = ""

    def get_model(self, model_id: str) -> Optional[Model]:
        """Return the model with ``model_id``, if this provider offers it."""
        for model in self.models:
            if model.id == model_id:
                return model
        return None

    @property
    def default_large_model(self) -> Optional[Model]:
        return self.get_model(self.default_large_model_id) if self.default_large_model_id else None

    @property
    def default_small_model(self) -> Optional[Model]:
        return self.get_model(self.default_small_model_id) if self.default_small_model_id else None


def _clamped(raw: RawModel, field: str, value: Union[int, float]) -> Union[int, float]:
    if value >= 0:
        return value
    logger.debug(
        "[catalog] Clamping negative value to zero",
        extra={"model": raw.id, "field": field, "value": value},
    )
    return 0


def normalize_model(raw: RawModel) -> Model:
    """Map a raw model entry onto the canonical record field by field.

    Negative rates or limits published upstream become 0.
    """
    return Model(
        id=raw.id,
        name=raw.name,
        cost_per_1m_in=_clamped(raw, "cost.input", raw.cost.input),
        cost_per_1m_out=_clamped(raw, "cost.output", raw.cost.output),
        cost_per_1m_in_cached=_clamped(raw, "cost.cache_read", raw.cost.cache_read),
        cost_per_1m_out_cached=_clamped(raw, "cost.cache_write", raw.cost.cache_write),
        context_window=_clamped(raw, "limit.context", raw.limit.context),
        default_max_tokens=_clamped(raw, "limit.output", raw.limit.output),
        can_reason=raw.reasoning,
        has_reasoning_effort=False,
        supports_images=raw.attachment,
    )


def normalize_provider(raw: RawProvider) -> Provider:
    """Build a canonical provider and pick its default large/small models.

    Models are visited in sorted key order. The largest context window wins
    the "large" slot and the smallest wins the "small" slot; on ties the
    first model visited keeps the slot.
    """
    models = []
    seen: set[str] = set()
    largest: Optional[Model] = None
    smallest: Optional[Model] = None

    for key in sorted(raw.models):
        model = normalize_model(raw.models[key])
        if model.id in seen:
            logger.debug(
                "[catalog] Skipping duplicate model id",
                extra={"provider": raw.id, "key": key, "model": model.id},
            )
            continue
        seen.add(model.id)
        models.append(model)

        if largest is None or model.context_window > largest.context_window:
            largest = model
        if smallest is None or model.context_window < smallest.context_window:
            smallest = model

    return Provider(
        id=raw.id,
        name=raw.name,
        api_endpoint=raw.api,
        type=raw.id,
        models=tuple(models),
        default_large_model_id=largest.id if largest is not None else "",
        default_small_model_id=smallest.id if smallest is not None else "",
    )


def normalize_catalog(raw: Mapping[str, RawProvider]) -> Tuple[Provider, ...]:
    """Normalize every provider in the decoded catalog, sorted by catalog key."""
    providers = tuple(normalize_provider(raw[key]) for key in sorted(raw))
    logger.debug(
        "[catalog] Normalized catalog",
        extra={
            "providers": len(providers),
            "models": sum(len(provider.models) for provider in providers),
        },
    )
    return providers


def index_by_id(providers: Tuple[Provider, ...]) -> Dict[str, Provider]:
    """Map provider id -> provider; later duplicates do not replace earlier ones."""
    index: Dict[str, Provider] = {}
    for provider in providers:
        index.setdefault(provider.id, provider)
    return index


__all__ = [
    "Model",
    "Provider",
    "index_by_id",
    "normalize_catalog",
    "normalize_model",
    "normalize_provider",
]
