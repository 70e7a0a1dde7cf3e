"""Class decorators that select a record or enum shape for a Python class.

Plain dataclasses already map onto named-field records. Two shapes have no
native Python spelling and are opted into here:

- ``@positional`` turns a dataclass into a positional (tuple-like) record::

      @positional
      @dataclass
      class Meters:
          value: float            # renders as Meters(1.5)

- ``@rust_enum`` marks a base class as a tagged union; each dataclass
  subclass becomes one variant::

      @rust_enum
      class Shape: ...

      @positional
      @dataclass
      class Circle(Shape):
          radius: float           # renders as Shape::Circle(3.5)

Both accept ``name=`` to override the emitted type name.
"""

from __future__ import annotations

from typing import Any, TypeVar, overload

__all__ = ["enum_base", "is_positional", "positional", "rust_enum", "type_name"]

C = TypeVar("C", bound=type)

_NAME_ATTR = "__uneval_name__"
_POSITIONAL_ATTR = "__uneval_positional__"
_ENUM_ATTR = "__uneval_enum__"


def _mark(cls: C, attr: str, name: str | None) -> C:
    setattr(cls, attr, True)
    if name is not None:
        setattr(cls, _NAME_ATTR, name)
    return cls


@overload
def positional(cls: C, /) -> C: ...
@overload
def positional(*, name: str | None = None) -> Any: ...
def positional(cls: Any = None, /, *, name: str | None = None) -> Any:
    """Render a dataclass as a positional record (``Name(a, b)``)."""
    if cls is None:
        return lambda inner: _mark(inner, _POSITIONAL_ATTR, name)
    return _mark(cls, _POSITIONAL_ATTR, name)


@overload
def rust_enum(cls: C, /) -> C: ...
@overload
def rust_enum(*, name: str | None = None) -> Any: ...
def rust_enum(cls: Any = None, /, *, name: str | None = None) -> Any:
    """Mark a base class whose dataclass subclasses are enum variants."""
    if cls is None:
        return lambda inner: _mark(inner, _ENUM_ATTR, name)
    return _mark(cls, _ENUM_ATTR, name)


def is_positional(cls: type) -> bool:
    # Looked up on the class itself: subclasses do not inherit the shape.
    return bool(cls.__dict__.get(_POSITIONAL_ATTR, False))


def enum_base(cls: type) -> type | None:
    """Return the nearest ``@rust_enum`` ancestor of ``cls`` (excluding ``cls``)."""
    for base in cls.__mro__[1:]:
        if base.__dict__.get(_ENUM_ATTR, False):
            return base
    return None


def type_name(cls: type) -> str:
    """Emitted name for ``cls``: the ``name=`` override, else ``__name__``."""
    override = cls.__dict__.get(_NAME_ATTR)
    return override if override is not None else cls.__name__
