"""
Parameter binding

Interface methods declare wire parameter names with JsonRpcParam inside
typing.Annotated:

    class Calculator:
        def add(self,
                a: Annotated[int, JsonRpcParam("a")],
                b: Annotated[int, JsonRpcParam("b")]) -> int: ...

A method whose parameters all carry a name sends params as an object; a
method with no names sends a positional list. Mixing the two is rejected
when the method is called.
"""

import inspect
import typing
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from jsonrpc_invoker.rpc.errors import ConfigurationError, InvalidArgument


@dataclass(frozen=True)
class JsonRpcParam:
    """Wire name of a method parameter"""
    name: str

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise InvalidArgument("JsonRpcParam name must be a non-empty string")


@dataclass(frozen=True)
class MethodDescriptor:
    """Static description of one interface method"""
    name: str
    signature: inspect.Signature
    param_names: Tuple[Optional[str], ...]
    return_type: Any
    is_void: bool


def _declared_name(hint: Any) -> Optional[str]:
    if typing.get_origin(hint) is not typing.Annotated:
        return None
    for meta in hint.__metadata__:
        if isinstance(meta, JsonRpcParam):
            return meta.name
    return None


def describe_method(func: Callable) -> MethodDescriptor:
    """Build the descriptor of an interface method

    Args:
        func: Function object as found on the interface class, including self

    Returns:
        MethodDescriptor: Signature without self, wire names and return type

    Raises:
        NameError: A type hint cannot be resolved
    """
    extra_hints = typing.get_type_hints(func, include_extras=True)
    hints = typing.get_type_hints(func)

    parameters = list(inspect.signature(func).parameters.values())[1:]
    signature = inspect.Signature(parameters)
    param_names = tuple(_declared_name(extra_hints.get(p.name)) for p in parameters)

    return_type = hints.get("return", Any)
    return MethodDescriptor(
        name=func.__name__,
        signature=signature,
        param_names=param_names,
        return_type=return_type,
        is_void=return_type is type(None),
    )


def bind_params(descriptor: MethodDescriptor,
                args: tuple,
                kwargs: Dict[str, Any],
                encode: Callable[[Any], Any]) -> Optional[Union[List[Any], Dict[str, Any]]]:
    """Bind call arguments to the request params

    Args:
        descriptor: Descriptor of the invoked method
        args: Positional call arguments (without self)
        kwargs: Keyword call arguments
        encode: Converts an argument into a JSON-ready value

    Returns:
        None when the call has no arguments, a list in declaration order when
        no parameter is named, or a name -> value dict when all are named

    Raises:
        TypeError: The arguments do not match the method signature
        ConfigurationError: Parameter names are declared on some but not all
            parameters, or declared twice
    """
    bound = descriptor.signature.bind(*args, **kwargs)
    bound.apply_defaults()

    values = []
    for param in descriptor.signature.parameters.values():
        if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
            raise ConfigurationError(
                f"Parameter '{param.name}' of method {descriptor.name} is variadic and cannot be bound"
            )
        values.append(bound.arguments[param.name])

    named = [name for name in descriptor.param_names if name is not None]
    if not named:
        if not values:
            return None
        return [encode(value) for value in values]

    if len(named) != len(descriptor.param_names):
        raise ConfigurationError(
            "JsonRpcParam is used on some but not all method parameters, the request "
            "object sent to the server would not contain the unannotated parameters. "
            f"Violating method is {descriptor.name}"
        )
    if len(set(named)) != len(named):
        raise ConfigurationError(f"Duplicate JsonRpcParam names on method {descriptor.name}: {named}")

    return {name: encode(value) for name, value in zip(named, values)}
