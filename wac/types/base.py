from pydantic import BaseModel, ConfigDict


def to_camel(field_name: str) -> str:
    """snake_case to camelCase, leaving digit groups alone (volume_24h -> volume24h)."""
    head, *rest = field_name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


class CamelModel(BaseModel):
    """Model serialized with the camelCase keys the web client expects."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )
