"""Signature introspection: what parameters does a callable have, which ones are
required, and what are the defaults of the others.

>>> def func(required, optional=True, *, args):
...     pass
>>> sig_info = SigInfo.from_callable(func)
>>> sig_info.names
['required', 'optional', 'args']
>>> sig_info.required_names
('required', 'args')
>>> sig_info.min_args, sig_info.max_args
(2, 3)

Each parameter is described by a ``ParamDescriptor``:

>>> p = sig_info['optional']
>>> p.kind, p.has_default, p.default
(<ParamType.OPTIONAL: 'optional'>, True, True)
>>> sig_info['required'].kind
<ParamType.REQUIRED: 'required'>

**Notes to the reader**

As in ``inspect``, we use short hands for parameter kinds.

    - PK = Parameter.POSITIONAL_OR_KEYWORD

    - VP = Parameter.VAR_POSITIONAL

    - VK = Parameter.VAR_KEYWORD

    - PO = Parameter.POSITIONAL_ONLY

    - KO = Parameter.KEYWORD_ONLY

"""

from inspect import Parameter, signature
from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property, partial, partialmethod
from operator import attrgetter
from typing import Any, Callable, Tuple, Union

from variadic.errors import NotCallable

empty = Parameter.empty

PK = Parameter.POSITIONAL_OR_KEYWORD
VP, VK = Parameter.VAR_POSITIONAL, Parameter.VAR_KEYWORD
PO, KO = Parameter.POSITIONAL_ONLY, Parameter.KEYWORD_ONLY
var_param_kinds = frozenset({VP, VK})


class ParamType(str, Enum):
    REQUIRED = 'required'
    OPTIONAL = 'optional'


@dataclass(frozen=True)
class ParamDescriptor:
    """One parameter of a callable.

    ``default`` is only meaningful when ``has_default`` is true (otherwise it's
    ``Parameter.empty``).
    """

    name: str
    kind: ParamType = ParamType.REQUIRED
    has_default: bool = False
    default: Any = empty
    param_kind: Any = field(default=PK, compare=False)

    @classmethod
    def from_parameter(cls, p: Parameter) -> 'ParamDescriptor':
        """
        >>> ParamDescriptor.from_parameter(Parameter('x', PK, default=0)).kind
        <ParamType.OPTIONAL: 'optional'>
        >>> d = ParamDescriptor.from_parameter(Parameter('args', VP))
        >>> d.kind, d.has_default, d.initial_value
        (<ParamType.OPTIONAL: 'optional'>, False, ())
        """
        if p.kind in var_param_kinds:
            return cls(p.name, ParamType.OPTIONAL, False, empty, p.kind)
        elif p.default is not empty:
            return cls(p.name, ParamType.OPTIONAL, True, p.default, p.kind)
        else:
            return cls(p.name, ParamType.REQUIRED, False, empty, p.kind)

    @property
    def is_required(self) -> bool:
        return self.kind is ParamType.REQUIRED

    @property
    def is_var_positional(self) -> bool:
        return self.param_kind == VP

    @property
    def is_var_keyword(self) -> bool:
        return self.param_kind == VK

    @property
    def initial_value(self):
        """The value the parameter takes when no argument is given for it"""
        if self.has_default:
            return self.default
        elif self.param_kind == VP:
            return ()
        elif self.param_kind == VK:
            return {}
        return None


@dataclass(frozen=True)
class SigInfo:
    """The (cached) description of a callable's signature.

    ``min_args`` is the number of required parameters, ``max_args`` the total
    number of parameters.
    """

    params: Tuple[ParamDescriptor, ...]
    min_args: int
    max_args: int

    @classmethod
    def from_params(cls, params) -> 'SigInfo':
        params = tuple(params)
        n_required = sum(1 for p in params if p.is_required)
        return cls(params, n_required, len(params))

    @classmethod
    def from_callable(cls, func: Callable) -> 'SigInfo':
        return cls.from_params(describe_callable(func))

    @property
    def names(self):
        return [p.name for p in self.params]

    @property
    def required_names(self):
        return tuple(p.name for p in self.params if p.is_required)

    def __contains__(self, name):
        return any(p.name == name for p in self.params)

    def __getitem__(self, name) -> ParamDescriptor:
        for p in self.params:
            if p.name == name:
                return p
        raise KeyError(name)

    def __iter__(self):
        return iter(self.params)

    def __len__(self):
        return len(self.params)


def _signature_of(func: Callable):
    try:
        return signature(func)
    except (TypeError, ValueError) as e:
        raise NotCallable(f'Could not find a signature for {func!r}: {e}') from e


def describe_callable(func: Callable) -> Tuple[ParamDescriptor, ...]:
    """Get the parameters of ``func``, in declaration order.

    >>> [p.name for p in describe_callable(lambda a, b=2, *args, c, **kwargs: None)]
    ['a', 'b', 'args', 'c', 'kwargs']
    >>> describe_callable(42)  # doctest: +ELLIPSIS
    Traceback (most recent call last):
      ...
    variadic.errors.NotCallable: Could not find a signature for 42: ...
    """
    return tuple(
        ParamDescriptor.from_parameter(p) for p in _signature_of(func).parameters.values()
    )


def _return_none(o: object) -> None:
    return None


def name_of_obj(
    o: object,
    *,
    base_name_of_obj: Callable = attrgetter('__name__'),
    caught_exceptions: Tuple = (AttributeError,),
    default_factory: Callable = _return_none,
) -> Union[str, None]:
    """
    Tries to find the (or "a") name for an object, even if `__name__` doesn't exist.

    >>> name_of_obj(map)
    'map'
    >>> name_of_obj([1, 2, 3])
    'list'
    >>> name_of_obj(lambda x: x)
    '<lambda>'
    >>> name_of_obj(partial(print, sep=","))
    'print'

    If you want the qualified name of an object, you can do:

    >>> from inspect import Signature
    >>> alt = partial(name_of_obj, base_name_of_obj=attrgetter('__qualname__'))
    >>> alt(Signature.replace)
    'Signature.replace'

    """
    try:
        return base_name_of_obj(o)
    except caught_exceptions:
        kwargs = dict(
            base_name_of_obj=base_name_of_obj,
            caught_exceptions=caught_exceptions,
            default_factory=default_factory,
        )
        if isinstance(o, (cached_property, partial, partialmethod)) and hasattr(
            o, 'func'
        ):
            return name_of_obj(o.func, **kwargs)
        elif isinstance(o, property) and hasattr(o, 'fget'):
            return name_of_obj(o.fget, **kwargs)
        elif hasattr(o, '__class__'):
            return name_of_obj(type(o), **kwargs)
        return default_factory(o)


_qualname_of_obj = partial(name_of_obj, base_name_of_obj=attrgetter('__qualname__'))


def qualified_name(o: object) -> str:
    """The ``module.qualname`` of an object (falling back on its type's).

    >>> qualified_name(SigInfo)
    'variadic.signatures.SigInfo'
    >>> qualified_name(print)
    'builtins.print'
    >>> qualified_name(partial(print))
    'functools.partial'
    """
    if not hasattr(o, '__qualname__'):
        o = type(o)
    module = getattr(o, '__module__', None)
    name = _qualname_of_obj(o)
    if module:
        return f'{module}.{name}'
    return name
