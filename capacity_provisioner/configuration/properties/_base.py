from pydantic import BaseModel, ConfigDict


def _kebab_case(string: str) -> str:
    return string.replace('_', '-')


class BaseConfig(BaseModel):
    """
    Configuration section, read from kebab-case YAML keys.

    Unknown keys are rejected so that a typo never silently falls back to a default.
    """

    model_config = ConfigDict(
        extra='forbid',
        alias_generator=_kebab_case,
        populate_by_name=True,
        str_strip_whitespace=True,
    )
