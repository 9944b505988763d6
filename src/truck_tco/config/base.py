"""Shared pydantic base — camelCase wire names, strict numbers."""

from pydantic import BaseModel, ConfigDict


def to_camel(name: str) -> str:
    """``h2ice_consumption`` → ``h2iceConsumption``.

    Digits do not start a new word (``co2_emissions`` → ``co2Emissions``).
    """
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


class CamelModel(BaseModel):
    """Base for every input and output contract.

    Fields are declared in snake_case and exchanged in camelCase, which is
    the shape the web front end persists.  Both spellings are accepted on
    input.  Unknown keys and non-finite floats are rejected.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        allow_inf_nan=False,
    )
