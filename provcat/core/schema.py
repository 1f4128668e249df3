"""Raw models.dev catalog schema and its decoder.

These records mirror the upstream JSON as received from
https://models.dev/api.json. Unknown fields are ignored and missing (or null)
fields take their zero value, so only structural mismatches fail decoding.
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Union

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    TypeAdapter,
    ValidationError,
    model_validator,
)

from provcat.core.errors import CatalogDecodeError
from provcat.utils.log import get_logger

logger = get_logger()


def _null_as_empty_text(value: Any) -> Any:
    return "" if value is None else value


def _null_as_empty_record(value: Any) -> Any:
    return {} if value is None else value


# List items and map values have no field default to fall back on, so null
# becomes an empty string or an all-defaults record in place.
Text = Annotated[StrictStr, BeforeValidator(_null_as_empty_text)]


class _RawRecord(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        # null behaves like an absent field and falls back to the default.
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class RawModalities(_RawRecord):
    """Input/output kinds a model accepts and produces, in upstream order."""

    input: List[Text] = Field(default_factory=list)
    output: List[Text] = Field(default_factory=list)


class RawCost(_RawRecord):
    """Per-million-token rates in USD, as published (not range-checked)."""

    input: StrictFloat = 0.0
    output: StrictFloat = 0.0
    cache_read: StrictFloat = 0.0
    cache_write: StrictFloat = 0.0


class RawLimit(_RawRecord):
    """Token limits."""

    context: StrictInt = 0
    output: StrictInt = 0


class RawModel(_RawRecord):
    """A model entry as published upstream."""

    id: StrictStr = ""
    name: StrictStr = ""
    attachment: StrictBool = False
    reasoning: StrictBool = False
    temperature: StrictBool = False
    tool_call: StrictBool = False
    knowledge: StrictStr = ""
    release_date: StrictStr = ""
    last_updated: StrictStr = ""
    modalities: RawModalities = Field(default_factory=RawModalities)
    open_weights: StrictBool = False
    cost: RawCost = Field(default_factory=RawCost)
    limit: RawLimit = Field(default_factory=RawLimit)


class RawProvider(_RawRecord):
    """A provider entry as published upstream."""

    id: StrictStr = ""
    name: StrictStr = ""
    api: StrictStr = ""
    env: List[Text] = Field(default_factory=list)
    npm: StrictStr = ""
    doc: StrictStr = ""
    models: Dict[str, Annotated[RawModel, BeforeValidator(_null_as_empty_record)]] = Field(
        default_factory=dict
    )


RawCatalog = Dict[str, RawProvider]

_CATALOG_ADAPTER: TypeAdapter[RawCatalog] = TypeAdapter(
    Dict[str, Annotated[RawProvider, BeforeValidator(_null_as_empty_record)]]
)


def decode_catalog(payload: Union[bytes, str]) -> RawCatalog:
    """Decode a catalog document into a provider-key -> RawProvider mapping.

    The mapping keys are taken as-is; they are not checked against the ``id``
    inside each provider.

    Raises:
        CatalogDecodeError: the payload is not JSON, its top level is not an
            object, or a field has the wrong type.
    """
    try:
        catalog = _CATALOG_ADAPTER.validate_json(payload)
    except ValidationError as exc:
        first = exc.errors()[0] if exc.error_count() else {}
        location = ".".join(str(part) for part in first.get("loc", ())) or "<root>"
        raise CatalogDecodeError(
            f"Invalid catalog payload at {location}: {first.get('msg', exc)}"
        ) from exc

    logger.debug(
        "[catalog] Decoded catalog payload",
        extra={"providers": len(catalog), "bytes": len(payload)},
    )
    return catalog


__all__ = [
    "RawCatalog",
    "RawCost",
    "RawLimit",
    "RawModalities",
    "RawModel",
    "RawProvider",
    "decode_catalog",
]
