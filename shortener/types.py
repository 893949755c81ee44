from typing import Any


# Type aliases for Python dictionaries
type JSONBody = dict[str, Any] | list[Any]
type ShortURLRecord = dict[str, Any]
