"""
Attribute-keyed method dispatch (a.k.a. "control-path" templating) via decorators.

This module provides a small mechanism for routing a single method call to
one of several registered implementations based on the value of an attribute
on the receiving object.

Core idea
---------
- You define a *base* method on a class (its signature becomes the canonical one).
- You then register multiple "control paths" for that method, each keyed by:
    (ClassName, MethodName, StateVal)
- At runtime, the installed wrapper reads ``getattr(self, state_attr)`` and
  dispatches to the implementation registered for that value.

Intended use-cases
------------------
- Closed tagged-variant types (e.g., graph nodes keyed by operator kind) where
  each variant's behavior lives in its own function instead of a subclass.
- Keeping per-variant behaviors isolated as separate functions for readability.

Important notes
---------------
- This design mutates the class: the first time you decorate a control path,
  the original method name is replaced with a wrapper that performs dispatch.
- Registered implementations are stored in a closure-local mapping owned by
  `create_path_builder()`. Different builders do not share mappings.
- Implementations are called like bound methods: ``impl(self, *args, **kwargs)``.
- For closed key sets (e.g., an `Enum`), `missing_paths` reports which keys
  lack an implementation so callers can fail fast at import time.
"""

from typing import (
    Any,
    Callable,
    Dict,
    Hashable,
    Iterable,
    List,
    Type,
)
from typing_extensions import ParamSpec, TypeVar
from collections import namedtuple
from functools import wraps

P = ParamSpec("P")
R = TypeVar("R")


class ControlPathBuilder:
    """
    Registry and decorator factory for attribute-keyed control paths.

    Instances are callable with ``(cls, method, state)``
    and return a decorator that registers the decorated function as the
    implementation of ``cls.method`` for objects whose ``state_attr`` equals
    ``state``.

    Parameters
    ----------
    state_attr : str
        Name of the attribute read from ``self`` to select an implementation.
    """

    MethodKey = namedtuple(
        "MethodKey",
        [
            "ClassName",
            "MethodName",
            "StateVal",
        ],
    )
    """
    Tuple-like key used to uniquely identify a control path.

    Fields
    ------
    ClassName : str
        The owning class name.
    MethodName : str
        The base method name being templated.
    StateVal : Hashable
        The attribute value that selects this implementation.
    """

    def __init__(self, state_attr: str) -> None:
        self.state_attr = state_attr
        self._methods_map: Dict["ControlPathBuilder.MethodKey", Callable] = {}

    def __call__(
        self,
        cls: Type,
        method: Callable[P, R],
        state: Hashable,
    ) -> Callable[[Callable[P, R]], Callable[P, R]]:
        """
        Build a decorator that registers a control path implementation.

        Parameters
        ----------
        cls : Type
            The class whose method should be wrapped for attribute-based
            dispatch. The wrapper is installed on this class under
            `method.__name__`.
        method : Callable[P, R]
            The base method being templated. Its name and metadata are reused
            for the installed wrapper via `functools.wraps(method)`.
        state : Hashable
            The attribute value that selects the decorated implementation.

        Returns
        -------
        Callable[[Callable[P, R]], Callable[P, R]]
            A decorator that registers `sub_method` and installs/updates the
            dispatcher wrapper.

        Raises
        ------
        TypeError
            If `state` is not hashable.
        """
        try:
            hash(state)
        except TypeError:
            raise TypeError(f"The control path state must be hashable. Got {state!r}")

        methods_map = self._methods_map
        state_attr = self.state_attr
        smk = self.MethodKey(cls.__name__, method.__name__, state)

        def decorator(sub_method: Callable[P, R]) -> Callable[P, R]:
            """
            Register `sub_method` as the implementation for the configured state.

            Returns
            -------
            Callable[P, R]
                The original `sub_method`, unchanged, so decorators can stack.
            """
            methods_map[smk] = sub_method

            @wraps(method)
            def wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
                """Dispatch to the implementation registered for ``self.<state_attr>``."""
                if not hasattr(self, state_attr):
                    raise NotImplementedError(
                        "{} is missing attribute {}".format(type(self), repr(state_attr))
                    )
                cur = getattr(self, state_attr)
                sm = methods_map.get(
                    ControlPathBuilder.MethodKey(cls.__name__, method.__name__, cur)
                )
                if sm is not None:
                    return sm(self, *args, **kwargs)
                raise NotImplementedError(
                    "Missing control path ({}={}) for {}".format(
                        state_attr, repr(cur), method.__name__
                    )
                )

            setattr(cls, method.__name__, wrapper)
            return sub_method

        return decorator

    def registered(self, cls: Type, method: Callable) -> List[Hashable]:
        """Return the states that have an implementation for ``cls.method``."""
        return [
            k.StateVal
            for k in self._methods_map
            if k.ClassName == cls.__name__ and k.MethodName == method.__name__
        ]

    def missing_paths(
        self, cls: Type, method: Callable, states: Iterable[Hashable]
    ) -> List[Hashable]:
        """
        Return the states from `states` that lack an implementation.

        Intended for closed key sets: pass every member of an `Enum` and
        assert the result is empty.
        """
        have = set(self.registered(cls, method))
        return [s for s in states if s not in have]


def create_path_builder(state_attr: str) -> ControlPathBuilder:
    """
    Create a control-path builder keyed on `state_attr`.

    Typical usage::

        node_control_path_manager = create_path_builder("kind")

        @node_control_path_manager(Node, Node.forward, OpKind.ADD)
        def _add_forward(node, arena): ...

    Parameters
    ----------
    state_attr : str
        Attribute of the receiving object used to select an implementation.

    Returns
    -------
    ControlPathBuilder
        A fresh builder with its own registry.
    """
    return ControlPathBuilder(state_attr)
