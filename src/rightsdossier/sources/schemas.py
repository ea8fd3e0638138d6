"""Pydantic models for schema-constrained LLM output."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator


class SourceMatch(BaseModel):
    """One source the extraction model selected, by candidate index."""

    model_config = ConfigDict(populate_by_name=True)

    url_index: StrictInt = Field(alias="urlIndex")
    title: str = ""
    reference: str = ""
    year: str | None = None

    @field_validator("title", "reference", mode="before")
    @classmethod
    def _none_as_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("year", mode="before")
    @classmethod
    def _year_as_text(cls, v: Any) -> Any:
        """Models often emit the year as a number."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class ExtractionSchema(BaseModel):
    """Shape the extraction model is constrained to."""

    model_config = ConfigDict(populate_by_name=True)

    source_matches: list[SourceMatch] = Field(alias="sourceMatches")


class ExtractionEnvelope(BaseModel):
    """Envelope the extraction response is validated against.

    Matches stay raw here and are validated one by one, so a single
    bad match is dropped without discarding its siblings.
    """

    model_config = ConfigDict(populate_by_name=True)

    source_matches: list[dict[str, Any]] = Field(alias="sourceMatches")


class SemanticMatchResponse(BaseModel):
    """Right identifiers relevant to a free-text term."""

    model_config = ConfigDict(populate_by_name=True)

    right_ids: list[str] = Field(alias="rightIds")


def response_format_for(
    model: type[BaseModel], name: str
) -> dict[str, Any]:
    """litellm ``response_format`` constraining output to ``model``."""
    # Aliases are the wire names the prompts ask for.
    return {
        "type": "json_schema",
        "json_schema": {
            "name": name,
            "schema": model.model_json_schema(by_alias=True),
        },
    }
