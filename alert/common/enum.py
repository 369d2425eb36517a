import enum
from typing import Any, Optional, TypeVar

EnumType = TypeVar('EnumType', bound='BaseEnum')


class BaseEnum(str, enum.Enum):
    @classmethod
    def has(cls, item: Any) -> bool:
        try:
            cls(item)
        except ValueError:
            return False
        else:
            return True

    @classmethod
    def parse_or_none(cls: type[EnumType], item: Any) -> Optional[EnumType]:
        """
        Lenient parse for values coming off a command line, None and
        empty strings mean "no filter"
        """
        if item is None or item == '':
            return None
        return cls(str(item).lower())

    def __str__(self) -> str:
        return str(self.value)

    @classmethod
    def list_all(cls) -> list[str]:
        return [e.value for e in cls]
