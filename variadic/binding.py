"""Bind a mix of positional and named arguments to the parameters of a signature.

The arguments are given as a flat list where named arguments are marked with
``Kwarg``, or as a mapping whose ``str`` keys are names (other keys mark positional
arguments).

>>> from variadic.signatures import SigInfo
>>> def some_function(required, optional=True, *, args):
...     return required, optional, args
>>> sig_info = SigInfo.from_callable(some_function)
>>> bind_arguments(sig_info, [1, 2])
{'required': 1, 'optional': True, 'args': [2]}
>>> bind_arguments(sig_info, [1, 2, 3, 4, 5])
{'required': 1, 'optional': 2, 'args': [3, 4, 5]}
>>> bind_arguments(sig_info, [2, Kwarg('required', 1), 3, 4, 5])
{'required': 1, 'optional': 2, 'args': [3, 4, 5]}
>>> bind_arguments(sig_info, {0: 2, 'required': 1, 'args': [3], 1: 4, 2: 5})
{'required': 1, 'optional': 2, 'args': [[3], 4, 5]}

Once bound, the arguments can be turned into the ``args`` and ``kwargs`` of a call:

>>> args, kwargs = mk_args_and_kwargs(sig_info, bind_arguments(sig_info, [1, 2]))
>>> args, kwargs
((1, True), {'args': [2]})
>>> some_function(*args, **kwargs)
(1, True, [2])

"""

from collections import deque
from collections.abc import Mapping
from typing import Any, Iterable, List, NamedTuple, Tuple, Union

from variadic.errors import (
    InvalidKeywordArguments,
    MissingRequiredParameter,
    TooFewArguments,
    TooManyArguments,
    UnknownParameter,
)
from variadic.signatures import KO, PK, PO, VK, VP, SigInfo

DFLT_USE_VARGS = True
DFLT_KEYWORD = 'args'

container_types = (list, tuple)


class Kwarg(NamedTuple):
    """A named argument in a flat list of arguments"""

    name: str
    value: Any


Arguments = Union[Iterable, Mapping]


def flatten_kwargs(names: Iterable[str], args) -> List:
    """Turn ``name, value`` pairs of a flat list of arguments into ``Kwarg`` items.

    A non-empty string that is one of the ``names``, and is not the last item, is
    taken as the name of the item that follows it.

    >>> names = ['required', 'optional', 'args']
    >>> flatten_kwargs(names, ['required', 1, 'args', 2])
    [Kwarg(name='required', value=1), Kwarg(name='args', value=2)]
    >>> flatten_kwargs(names, ['required', 1, '', 2])
    [Kwarg(name='required', value=1), '', 2]
    >>> flatten_kwargs(names, [1, 2, 3])
    [1, 2, 3]
    >>> flatten_kwargs(names, [1, 'required'])
    [1, 'required']

    Note that this is a greedy heuristic: A value that happens to be equal to a name
    will always be taken as a name if something follows it.

    >>> flatten_kwargs(names, [1, 'args', 2])
    [1, Kwarg(name='args', value=2)]
    """
    names = set(names)
    args = list(args)
    last_index = len(args) - 1
    flat = []
    key = None
    for i, arg in enumerate(args):
        if key is None and isinstance(arg, str) and arg in names and i < last_index:
            # a key is a non-empty string (a name) followed by a value
            key = arg
        elif key is not None:
            flat.append(Kwarg(key, arg))
            key = None
        else:
            flat.append(arg)
    return flat


def split_arguments(args: Arguments) -> Tuple[list, dict]:
    """Split arguments into a list of positional ones and a dict of named ones.

    >>> split_arguments([1, Kwarg('x', 2), 3, Kwarg('x', 4)])
    ([1, 3], {'x': 4})
    >>> split_arguments({0: 1, 'x': 2, 1: 3})
    ([1, 3], {'x': 2})
    """
    positional, named = [], {}
    if isinstance(args, Mapping):
        for k, v in args.items():
            if isinstance(k, str):
                named[k] = v
            else:
                positional.append(v)
    else:
        for arg in args:
            if isinstance(arg, Kwarg):
                named[arg.name] = arg.value
            else:
                positional.append(arg)
    return positional, named


def bind_arguments(
    sig_info: SigInfo,
    args: Arguments = (),
    *,
    use_vargs: bool = DFLT_USE_VARGS,
    keyword: str = DFLT_KEYWORD,
) -> dict:
    """Bind arguments to the parameters of ``sig_info``.

    :param sig_info: The signature information of the callable
    :param args: The arguments (see ``split_arguments``)
    :param use_vargs: Whether the ``keyword`` parameter (if any) collects the
        positional arguments that are left over
    :param keyword: The name of the parameter that collects left over arguments
    :return: A ``{name: value, ...}`` dict, in the order of the signature

    Named arguments take their slot first. Then positional arguments fill the
    remaining slots in order: Required ones always, and optional ones only as long as
    there's some "optional budget" left (the number of arguments given beyond the
    required ones).

    >>> from variadic.signatures import SigInfo
    >>> sig_info = SigInfo.from_callable(lambda a, b=2, c=3, args=(): None)
    >>> bind_arguments(sig_info, [1])
    {'a': 1, 'b': 2, 'c': 3, 'args': ()}
    >>> bind_arguments(sig_info, [1, 'B', 'C', 'x', 'y'])
    {'a': 1, 'b': 'B', 'c': 'C', 'args': ['x', 'y']}
    >>> bind_arguments(sig_info, [1, Kwarg('c', 'C'), 'B'])
    {'a': 1, 'b': 'B', 'c': 'C', 'args': ()}
    >>> bind_arguments(sig_info, [])
    Traceback (most recent call last):
      ...
    variadic.errors.TooFewArguments: Missing arguments. Need at least 1 arguments, got 0.

    Without a ``keyword`` parameter, left over arguments go to a ``*args`` parameter
    if there's one, and are dropped if not:

    >>> bind_arguments(SigInfo.from_callable(lambda a, *rest: None), [1, 2, 3])
    {'a': 1, 'rest': [2, 3]}
    >>> bind_arguments(SigInfo.from_callable(lambda a, b=2: None), [1, 2, 3])
    {'a': 1, 'b': 2}
    """
    positional, named = split_arguments(args)
    n_args = len(positional) + len(named)
    min_args, max_args = sig_info.min_args, sig_info.max_args
    if n_args < min_args:
        raise TooFewArguments(n_args=n_args, min_args=min_args, max_args=max_args)
    elif not use_vargs and n_args > max_args:
        raise TooManyArguments(n_args=n_args, min_args=min_args, max_args=max_args)

    names = sig_info.names
    for name in named:
        if name not in sig_info:
            raise UnknownParameter(name, names)
        if sig_info[name].is_var_keyword:
            _validate_var_keyword(sig_info, name, named[name])

    arguments = {p.name: p.initial_value for p in sig_info}
    arguments.update(named)
    filled = set(named)

    remaining = deque(positional)
    optional_budget = n_args - min_args
    for p in sig_info:
        if p.name in filled:
            continue
        if p.is_required:
            if not remaining:
                raise MissingRequiredParameter(p.name)
            arguments[p.name] = remaining.popleft()
            filled.add(p.name)
        elif p.is_var_keyword:
            continue  # only filled by name
        elif optional_budget > 0 and remaining:
            arguments[p.name] = remaining.popleft()
            filled.add(p.name)
            optional_budget -= 1

    leftover = list(remaining)
    if use_vargs and keyword in sig_info and not sig_info[keyword].is_var_keyword:
        current = arguments[keyword]
        if not leftover:
            if not isinstance(current, container_types):
                arguments[keyword] = [current]
        else:
            arguments[keyword] = [current, *leftover]
    else:
        # a *args parameter that took a positional value passes the leftovers on,
        # otherwise they're dropped
        var_positional = _var_positional_name(sig_info)
        if var_positional in filled and var_positional not in named:
            arguments[var_positional] = [arguments[var_positional], *leftover]
    return arguments


def _var_positional_name(sig_info: SigInfo):
    return next((p.name for p in sig_info if p.is_var_positional), None)


def _validate_var_keyword(sig_info: SigInfo, name, value):
    if not isinstance(value, Mapping):
        raise InvalidKeywordArguments(
            name, f"The '{name}' parameter takes a mapping. Was: {value!r}"
        )
    clashes = [
        k for k in value if k in sig_info and sig_info[k].param_kind in (PK, KO)
    ]
    if clashes:
        raise InvalidKeywordArguments(
            name,
            f"The '{name}' parameter can't hold values for other parameters: "
            f'{", ".join(map(repr, clashes))}',
        )


def mk_args_and_kwargs(sig_info: SigInfo, arguments: dict) -> Tuple[tuple, dict]:
    """Make the ``(args, kwargs)`` to call a function of signature ``sig_info`` with
    the bound ``arguments``.

    >>> from variadic.signatures import SigInfo
    >>> def foo(w, /, x, *args, y=1, **kwargs):
    ...     return w, x, args, y, kwargs
    >>> sig_info = SigInfo.from_callable(foo)
    >>> mk_args_and_kwargs(sig_info, dict(w=1, x=2, args=[3, 4], y=5, kwargs={'z': 6}))
    ((1, 2, 3, 4), {'y': 5, 'z': 6})
    """
    args, kwargs = [], {}
    for p in sig_info:
        value = arguments[p.name]
        if p.param_kind in (PO, PK):
            args.append(value)
        elif p.param_kind == VP:
            if isinstance(value, container_types):
                args.extend(value)
            else:
                args.append(value)
        elif p.param_kind == KO:
            kwargs[p.name] = value
        elif p.param_kind == VK:
            kwargs.update(value)
    return tuple(args), kwargs
