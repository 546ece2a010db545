"""Shared type aliases used across perch modules."""

from collections.abc import Callable, Mapping
from typing import Any, TypeAlias

# A route callable reference as written in a mapping source:
# a function, a "module:attr" / "service:method" string, or an (object, "method") pair
CallableRef: TypeAlias = Callable[..., Any] | str | tuple[Any, str] | list[Any]

# Parsed-but-unvalidated content of one mapping file
Fragment: TypeAlias = dict[Any, Any] | list[Any]

# Declared route parameters: name -> constraint (type name or converter callable)
ParameterMap: TypeAlias = Mapping[str, Any]
