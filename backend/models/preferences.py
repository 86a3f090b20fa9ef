"""Viewer preference models."""
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ViewerPreferences(BaseModel):
    """
    Reading preferences shared by every document.

    Stored and serialized with camelCase keys (fontSize, darkMode, ...);
    snake_case field names are accepted on input as well.
    """
    model_config = ConfigDict(extra="ignore", alias_generator=to_camel, populate_by_name=True)

    font_size: int = Field(default=16, ge=8, le=48)
    dark_mode: bool = False
    line_spacing: float = Field(default=1.5, ge=1.0, le=3.0)
    text_wrap: bool = True
    show_line_numbers: bool = False
