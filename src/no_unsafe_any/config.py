import os
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from no_unsafe_any.errors import InvalidOptionsError

ENV_ALLOW_ANNOTATION_ON_DYNAMIC_INIT = "NO_UNSAFE_ANY_ALLOW_ANNOTATION_ON_DYNAMIC_INIT"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


class RuleOptions(BaseModel):
    """Options accepted by the rule. Immutable for the lifetime of one traversal."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True, strict=True)

    allow_annotation_on_dynamic_init: bool = Field(default=False, alias="allowAnnotationOnDynamicInit")


def load_options(raw: RuleOptions | Mapping[str, Any] | None = None) -> RuleOptions:
    if raw is None:
        return RuleOptions()
    if isinstance(raw, RuleOptions):
        return raw
    try:
        return RuleOptions.model_validate(dict(raw))
    except ValidationError as exc:
        problems = "; ".join(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors())
        raise InvalidOptionsError(f"Invalid rule options: {problems}") from exc


def options_from_env() -> dict[str, bool]:
    """Read option overrides from the environment; unset variables contribute nothing."""
    value = os.getenv(ENV_ALLOW_ANNOTATION_ON_DYNAMIC_INIT)
    if value is None:
        return {}
    normalized = value.strip().lower()
    if normalized in _TRUTHY:
        return {"allowAnnotationOnDynamicInit": True}
    if normalized in _FALSY:
        return {"allowAnnotationOnDynamicInit": False}
    raise InvalidOptionsError(f"{ENV_ALLOW_ANNOTATION_ON_DYNAMIC_INIT} must be a boolean, got '{value}'")


def merge_options(*layers: Mapping[str, Any]) -> dict[str, Any]:
    """Merge raw option mappings; later layers win. Field names are folded onto their wire aliases."""
    aliases = {name: field.alias for name, field in RuleOptions.model_fields.items() if field.alias}
    merged: dict[str, Any] = {}
    for layer in layers:
        for key, value in layer.items():
            merged[aliases.get(key, key)] = value
    return merged
