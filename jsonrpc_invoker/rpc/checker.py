"""
Interface validity checks

The invoker delegates the decision whether a class can back a stub to an
InterfaceChecker. DefaultInterfaceChecker accepts classes whose public
members are plain instance methods with bindable parameters.
"""

import abc
import inspect
import typing
from typing import Callable, Dict

from jsonrpc_invoker.rpc.errors import InvalidArgument


def interface_methods(interface: type) -> Dict[str, Callable]:
    """Public instance methods of an interface, including inherited ones"""
    methods = {}
    for name in dir(interface):
        if name.startswith("_"):
            continue
        attr = inspect.getattr_static(interface, name)
        if inspect.isfunction(attr):
            methods[name] = attr
    return methods


class InterfaceChecker(abc.ABC):
    """Policy deciding whether a class can be turned into a stub"""

    @abc.abstractmethod
    def check(self, interface: type) -> None:
        """Validate an interface

        Args:
            interface: Class describing the remote operations

        Raises:
            InvalidArgument: The interface cannot back a stub
        """
        pass


class DefaultInterfaceChecker(InterfaceChecker):
    """Rejects non-classes, static/class methods, abstract non-methods,
    variadic parameters and unresolvable type hints."""

    def check(self, interface: type) -> None:
        if not inspect.isclass(interface):
            raise InvalidArgument(f"{interface!r} is not a class")

        name = interface.__name__
        methods = 0
        for member in dir(interface):
            if member.startswith("_"):
                continue
            attr = inspect.getattr_static(interface, member)
            if isinstance(attr, (staticmethod, classmethod)):
                raise InvalidArgument(f"{name}.{member} must be an instance method")
            if inspect.isfunction(attr):
                self._check_method(name, attr)
                methods += 1
            elif getattr(attr, "__isabstractmethod__", False):
                raise InvalidArgument(f"{name}.{member} is abstract but not a method")

        if methods == 0:
            raise InvalidArgument(f"{name} declares no public methods")

    def _check_method(self, interface_name: str, func: Callable) -> None:
        qualified = f"{interface_name}.{func.__name__}"
        parameters = list(inspect.signature(func).parameters.values())
        if not parameters or parameters[0].kind not in (
                inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD):
            raise InvalidArgument(f"{qualified} must take self as its first parameter")

        for param in parameters[1:]:
            if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
                raise InvalidArgument(f"{qualified} has variadic parameter '{param.name}'")

        try:
            typing.get_type_hints(func, include_extras=True)
        except (NameError, TypeError) as e:
            raise InvalidArgument(f"cannot resolve type hints of {qualified}: {e}") from e
