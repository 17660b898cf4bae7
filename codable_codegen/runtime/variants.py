"""
Sum types declared as classes of ``Case`` descriptors.

Example::

    class Shape(Variant):
        circle = Case(radius=float)
        rectangle = Case(width=float, height=float)
        point = Case()

    Shape.circle(radius=2.0)      # a Shape value tagged "circle"
    Shape.point                   # zero-parameter cases are singletons
"""

from __future__ import annotations

from typing import Any


class Case:
    """Declares one case of a ``Variant``.

    Positional arguments declare unlabeled parameters, keyword arguments
    declare labeled ones. Unlabeled and labeled parameters keep declaration
    order, positional ones first.
    """

    def __init__(self, *types: Any, **labeled_types: Any):
        self.parameters: tuple[tuple[str | None, Any], ...] = tuple((None, tp) for tp in types) + tuple(
            labeled_types.items()
        )
        self.name: str | None = None
        self._singletons: dict[type, Variant] = {}

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, instance: Any, owner: type) -> Any:
        if not self.parameters:
            singleton = self._singletons.get(owner)
            if singleton is None:
                singleton = owner._make(self.name, ())
                self._singletons[owner] = singleton
            return singleton

        def construct(*args: Any, **kwargs: Any) -> Variant:
            return owner._make(self.name, self._bind(args, kwargs))

        construct.__name__ = self.name
        construct.__qualname__ = f"{owner.__qualname__}.{self.name}"
        return construct

    def _bind(self, args: tuple, kwargs: dict) -> tuple:
        if len(args) > len(self.parameters):
            raise TypeError(f"{self.name}() takes {len(self.parameters)} arguments but {len(args)} were given")
        values = list(args)
        for label, _ in self.parameters[len(args) :]:
            if label is None or label not in kwargs:
                raise TypeError(f"{self.name}() missing argument {label or len(values)!r}")
            values.append(kwargs.pop(label))
        if kwargs:
            raise TypeError(f"{self.name}() got unexpected arguments {sorted(kwargs)}")
        return tuple(values)

    @property
    def labels(self) -> tuple[str | None, ...]:
        return tuple(label for label, _ in self.parameters)


class Variant:
    """Base class for case-based sum types.

    A value holds the name of its ``case`` and the tuple of associated
    ``values``; labeled values are also readable as attributes.
    """

    __slots__ = ("case", "values")

    case: str
    values: tuple

    @classmethod
    def _make(cls, case: str, values: tuple) -> Variant:
        instance = object.__new__(cls)
        object.__setattr__(instance, "case", case)
        object.__setattr__(instance, "values", values)
        return instance

    @classmethod
    def cases(cls) -> dict[str, Case]:
        """Declared cases in declaration order."""
        found: dict[str, Case] = {}
        for klass in reversed(cls.__mro__):
            for name, attr in vars(klass).items():
                if isinstance(attr, Case):
                    found[name] = attr
        return found

    def _descriptor(self) -> Case:
        return self.cases()[self.case]

    def __getattr__(self, name: str) -> Any:
        if name in ("case", "values"):
            raise AttributeError(name)
        labels = self._descriptor().labels
        if name in labels:
            return self.values[labels.index(name)]
        raise AttributeError(f"{type(self).__name__}.{self.case} has no parameter {name!r}")

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} values are immutable")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Variant):
            return NotImplemented
        return type(self) is type(other) and self.case == other.case and self.values == other.values

    def __hash__(self) -> int:
        return hash((type(self), self.case, self.values))

    def __repr__(self) -> str:
        descriptor = self._descriptor()
        if not descriptor.parameters:
            return f"{type(self).__name__}.{self.case}"
        rendered = ", ".join(
            f"{label}={value!r}" if label else repr(value) for label, value in zip(descriptor.labels, self.values)
        )
        return f"{type(self).__name__}.{self.case}({rendered})"
