"""Call callables with a variable number of (positional and named) arguments.

>>> def some_function(required, optional=True, *, args):
...     return required, optional, args
>>> v = Variadic()
>>> v.call_variadic(some_function, 1, 2)
(1, True, [2])
>>> v.call_variadic(some_function, 1, 2, 3, 4)
(1, 2, [3, 4])

Named arguments can be given as keyword arguments, or (by default) as flat
``name, value`` pairs:

>>> v.call_variadic(some_function, 2, 3, required=1)
(1, 2, [3])
>>> v.call_variadic(some_function, 1, 'args', 2)
(1, True, [2])

You can control that "flattening" with ``flatten_kwargs``:

>>> v.flatten_kwargs('once')
<FlattenMode.ONCE: 'once'>
>>> v.call_variadic(some_function, 1, 'args', 2)
(1, True, [2])
>>> v.flatten_kwargs()  # 'once' only lasts one call
<FlattenMode.OFF: 'off'>
>>> v.call_variadic(some_function, 1, 'args', 2)
(1, 'args', [2])

"""

from enum import Enum
from functools import partial, wraps
from threading import RLock
from typing import Callable, Optional

from variadic.binding import (
    DFLT_KEYWORD,
    DFLT_USE_VARGS,
    Kwarg,
    bind_arguments,
    flatten_kwargs,
    mk_args_and_kwargs,
)
from variadic.caching import SignatureCache, signature_cache
from variadic.callables import get_type, resolve_callable
from variadic.errors import InvalidOption
from variadic.signatures import describe_callable


class FlattenMode(str, Enum):
    ON = 'on'  # allow flat name, value pairs, e.g. call_variadic(f, 'value', 2)
    OFF = 'off'  # disable them
    ONCE = 'once'  # allow them for the next call only (then OFF)
    TOGGLE = 'toggle'  # disable them for the next call only (then ON)


DFLT_FLATTEN_MODE = FlattenMode.ON

# mode: (whether the call flattens, mode after the call)
flatten_mode_transitions = {
    FlattenMode.ON: (True, FlattenMode.ON),
    FlattenMode.OFF: (False, FlattenMode.OFF),
    FlattenMode.ONCE: (True, FlattenMode.OFF),
    FlattenMode.TOGGLE: (False, FlattenMode.ON),
}


def ensure_flatten_mode(option) -> FlattenMode:
    """
    >>> ensure_flatten_mode('toggle')
    <FlattenMode.TOGGLE: 'toggle'>
    >>> ensure_flatten_mode('sometimes')
    Traceback (most recent call last):
      ...
    variadic.errors.InvalidOption: Unknown option 'sometimes'. It has to be one of the following options: 'on', 'off', 'once' or 'toggle'.
    """
    try:
        return FlattenMode(option)
    except (ValueError, TypeError):
        raise InvalidOption(option, [m.value for m in FlattenMode]) from None


class Variadic:
    """Dispatcher that binds arguments to callables and calls them.

    :param flatten_mode: The initial flatten mode (see ``FlattenMode``). Empty means
        ``'on'``.
    :param use_vargs: Whether the ``keyword`` parameter collects left over positional
        arguments
    :param keyword: Name of the parameter collecting left over positional arguments
    :param cache: The ``SignatureCache`` to use. Defaults to the process-wide one.

    >>> def head_and_rest(a, rest=None):
    ...     return a, rest
    >>> v = Variadic('off', keyword='rest')
    >>> v.call_variadic(head_and_rest, 1, 2, 3)
    (1, [2, 3])
    >>> v.use_vargs = False
    >>> v.call_variadic(head_and_rest, 1, 2, 3)
    Traceback (most recent call last):
      ...
    variadic.errors.TooManyArguments: Too many parameters. Need at least 1 argument(s) and at most 2, got 3.
    """

    get_type = staticmethod(get_type)

    def __init__(
        self,
        flatten_mode=DFLT_FLATTEN_MODE,
        *,
        use_vargs: bool = DFLT_USE_VARGS,
        keyword: str = DFLT_KEYWORD,
        cache: Optional[SignatureCache] = None,
        lock_factory: Callable = RLock,
    ):
        self.use_vargs = use_vargs
        self.keyword = keyword
        self.cache = signature_cache if cache is None else cache
        self._lock = lock_factory()
        self._flatten_mode = None
        self.flatten_kwargs(flatten_mode or DFLT_FLATTEN_MODE)

    def __repr__(self):
        return (
            f'{type(self).__name__}({self._flatten_mode.value!r}, '
            f'use_vargs={self.use_vargs}, keyword={self.keyword!r})'
        )

    @property
    def flatten_mode(self) -> FlattenMode:
        return self._flatten_mode

    def flatten_kwargs(self, option=None) -> FlattenMode:
        """Get (no ``option``), or set, the flatten mode.

        >>> v = Variadic()
        >>> v.flatten_kwargs()
        <FlattenMode.ON: 'on'>
        >>> v.flatten_kwargs('toggle')
        <FlattenMode.TOGGLE: 'toggle'>

        An invalid option raises an ``InvalidOption`` error, leaving the mode as is.

        >>> v.flatten_kwargs('never')  # doctest: +ELLIPSIS
        Traceback (most recent call last):
          ...
        variadic.errors.InvalidOption: Unknown option 'never'. ...
        >>> v.flatten_kwargs()
        <FlattenMode.TOGGLE: 'toggle'>
        """
        if option is None or option == '':
            return self._flatten_mode
        mode = ensure_flatten_mode(option)
        with self._lock:
            self._flatten_mode = mode
        return mode

    def _transition(self, mode: FlattenMode, next_mode: FlattenMode):
        if next_mode is mode:
            return
        with self._lock:
            # only if nobody changed the mode while we were calling
            if self._flatten_mode is mode:
                self._flatten_mode = next_mode

    def get_arg_names(self, obj) -> dict:
        """Get the ``{name: ParamDescriptor, ...}`` of a callable reference.

        This always introspects ``obj`` (it doesn't use the cache).

        >>> v = Variadic()
        >>> params = v.get_arg_names(lambda required, optional=True: None)
        >>> list(params)
        ['required', 'optional']
        >>> params['optional'].default
        True
        """
        func = resolve_callable(obj, get_type(obj))
        return {p.name: p for p in describe_callable(func)}

    def bind(self, func, params=()) -> dict:
        """Bind ``params`` to the parameters of ``func``, without calling it.

        >>> def pad(a, b=2, *args):
        ...     pass
        >>> Variadic().bind(pad, [1, 2, 3, 4])
        {'a': 1, 'b': 2, 'args': [3, 4]}
        """
        sig_info = self.cache.resolve(func)
        return bind_arguments(
            sig_info, params, use_vargs=self.use_vargs, keyword=self.keyword
        )

    def call_variadic_array(self, func, params=()):
        """Call ``func`` with a list of parameters (where named ones are ``Kwarg``
        items), or a mapping of parameters (where ``str`` keys are names).

        >>> def other_function(required, optional=True, *, args):
        ...     return required, optional, args
        >>> v = Variadic()
        >>> v.call_variadic_array(other_function, [1, Kwarg('args', 2)])
        (1, True, [2])
        >>> v.call_variadic_array(other_function, {'args': 2, 'required': 1, 0: 3})
        (1, 3, [2])

        There's no flattening of name, value pairs here:

        >>> v.call_variadic_array(other_function, [1, 'args', 2])
        (1, 'args', [2])
        """
        sig_info, target = self.cache.resolve_with_callable(func)
        arguments = bind_arguments(
            sig_info, params, use_vargs=self.use_vargs, keyword=self.keyword
        )
        args, kwargs = mk_args_and_kwargs(sig_info, arguments)
        return target(*args, **kwargs)

    def call_variadic(self, func, /, *args, **kwargs):
        """Call ``func`` with the given arguments, flattening ``name, value`` pairs of
        ``args`` according to the flatten mode (see ``flatten_kwargs``).

        The flatten mode is read when the call starts, and moves on (for ``'once'`` and
        ``'toggle'``) when the call is over, whether it succeeded or not.
        """
        with self._lock:
            mode = self._flatten_mode
        flatten, next_mode = flatten_mode_transitions[mode]
        try:
            if flatten:
                names = self.cache.resolve(func).names
                args = flatten_kwargs(names, args)
            params = [*args, *(Kwarg(k, v) for k, v in kwargs.items())]
            return self.call_variadic_array(func, params)
        finally:
            self._transition(mode, next_mode)


_default_variadic = None
_default_variadic_lock = RLock()


def get_default_variadic() -> Variadic:
    """The ``Variadic`` instance used by the module-level functions (made on first
    use)."""
    global _default_variadic
    if _default_variadic is None:
        with _default_variadic_lock:
            if _default_variadic is None:
                _default_variadic = Variadic()
    return _default_variadic


def call_variadic_array(func, params=()):
    """Call ``func`` with a list (or mapping) of parameters, using the default
    ``Variadic``.

    >>> def triple(a, b=2, *args):
    ...     return a, b, args
    >>> call_variadic_array(triple, [1, 2, 3])
    (1, 2, (3,))
    """
    return get_default_variadic().call_variadic_array(func, params)


def call_variadic(func, /, *args, **kwargs):
    """Call ``func`` with the given arguments, using the default ``Variadic``.

    >>> call_variadic('operator.add', 3, 4)
    7
    """
    return get_default_variadic().call_variadic(func, *args, **kwargs)


def variadic_func(func=None, *, variadic: Optional[Variadic] = None):
    """Decorate a function so that its calls are dispatched with ``call_variadic``.

    >>> @variadic_func
    ... def decorated(required, optional=True, *, args):
    ...     return required, optional, args
    >>> decorated(1, 2, 3, 4)
    (1, 2, [3, 4])
    >>> decorated(1, 'args', 2)
    (1, True, [2])
    """
    if func is None:
        return partial(variadic_func, variadic=variadic)

    @wraps(func)
    def variadic_wrapper(*args, **kwargs):
        return (variadic or get_default_variadic()).call_variadic(
            func, *args, **kwargs
        )

    return variadic_wrapper
