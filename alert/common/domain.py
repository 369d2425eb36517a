from typing import Any, Dict

from pydantic import BaseModel, ConfigDict

BaseDomainConfig = ConfigDict(
    extra='forbid',
    use_enum_values=True,
    # Read domains are validated straight off ORM rows
    from_attributes=True,
    # Rows are snapshots, edits go back through the repository
    frozen=True,
)


class BaseDomain(BaseModel):
    """
    Typed boundary between the repository and its callers
    """

    model_config = BaseDomainConfig

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()

    def __repr_str__(self, join_str: str) -> str:  # type: ignore[override]
        tab = '\n    '
        return (
            tab
            + f'{join_str}{tab}'.join(repr(v) if a is None else f'{a}={v!r}' for a, v in self.__repr_args__())
            + '\n'
        )
