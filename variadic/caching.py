"""A process-wide cache of callable signatures.

The ``SignatureCache`` is a (read-only) ``Mapping`` from the identity of a callable
to its ``SigInfo``. Entries are made on demand, by ``resolve``, and are never evicted:
the signature of a callable is assumed to never change during the life of the
process.

>>> cache = SignatureCache()
>>> def func(required, optional=True, *, args):
...     pass
>>> sig_info = cache.resolve(func)
>>> sig_info.min_args, sig_info.max_args
(2, 3)
>>> list(cache) == [cache.key_of(func)]
True
>>> cache.resolve(func) is sig_info
True

"""

from collections.abc import Mapping
from inspect import isbuiltin, isclass, isfunction, ismodule
from threading import RLock
from typing import Callable, Optional
from warnings import warn

from variadic.callables import CallableType, get_type, identity_of, resolve_callable
from variadic.errors import SignatureAliasWarning
from variadic.signatures import SigInfo, describe_callable

_NOT_FOUND = object()


def _underlying_function(func):
    """What we compare to detect two different callables under the same identity.

    Bound methods, builtin bound methods and callable instances are new (or
    different) objects for every instance, so we use what they have in common.
    """
    if hasattr(func, '__func__'):
        return func.__func__
    self_ = getattr(func, '__self__', None)
    if self_ is not None and not ismodule(self_) and hasattr(func, '__name__'):
        owner = self_ if isclass(self_) else type(self_)
        return owner, func.__name__
    if not (isfunction(func) or isclass(func) or isbuiltin(func)):
        call = getattr(type(func), '__call__', None)
        if isfunction(call):
            return call
    return func


class SignatureCache(Mapping):
    """Cache of ``SigInfo``, keyed by callable identity.

    :param describe: The function that gets the parameter descriptors of a callable.
    :param lock_factory: Factory function to create the lock protecting writes.
    :param alias_by_name: If True (default), callables that have the same identity
        string share an entry (e.g. two lambdas of a same scope). If False, the
        underlying function is part of the key, so they don't.

    Keys are identity strings (when ``alias_by_name=True``):

    >>> cache = SignatureCache()
    >>> _ = cache.resolve('fractions.Fraction::from_float')
    >>> list(cache)
    ['fractions.Fraction::from_float']
    >>> cache['fractions.Fraction::from_float'].names
    ['f']

    """

    def __init__(
        self,
        describe: Callable = describe_callable,
        *,
        lock_factory: Callable = RLock,
        alias_by_name: bool = True,
    ):
        self.describe = describe
        self.lock = lock_factory()
        self.alias_by_name = alias_by_name
        self._sig_infos = {}
        self._funcs = {}
        self._aliased_keys = set()

    def __getitem__(self, k) -> SigInfo:
        return self._sig_infos[k]

    def __iter__(self):
        return iter(self._sig_infos)

    def __len__(self):
        return len(self._sig_infos)

    def __repr__(self):
        return f'{type(self).__name__}({list(self)})'

    def key_of(
        self,
        obj,
        callable_type: Optional[CallableType] = None,
        func: Optional[Callable] = None,
    ):
        """The key ``obj`` has (or would have) in the cache."""
        key = str(identity_of(obj, callable_type))
        if not self.alias_by_name:
            if func is None:
                func = resolve_callable(obj, callable_type)
            return key, _underlying_function(func)
        return key

    def resolve(self, obj, callable_type: Optional[CallableType] = None) -> SigInfo:
        """Get the ``SigInfo`` of a callable reference, computing it if missing."""
        sig_info, _ = self.resolve_with_callable(obj, callable_type)
        return sig_info

    def resolve_with_callable(
        self, obj, callable_type: Optional[CallableType] = None
    ):
        """Get the ``(SigInfo, func)`` pair for a callable reference, where ``func`` is
        the python callable ``obj`` refers to."""
        callable_type = callable_type or get_type(obj)
        func = resolve_callable(obj, callable_type)
        key = self.key_of(obj, callable_type, func)
        sig_info = self._sig_infos.get(key, _NOT_FOUND)
        if sig_info is _NOT_FOUND:
            with self.lock:
                # Double-check: another thread may have filled it while we waited
                sig_info = self._sig_infos.get(key, _NOT_FOUND)
                if sig_info is _NOT_FOUND:
                    sig_info = SigInfo.from_params(self.describe(func))
                    self._funcs[key] = _underlying_function(func)
                    self._sig_infos[key] = sig_info
                    return sig_info, func
        self._check_aliasing(key, func)
        return sig_info, func

    def _check_aliasing(self, key, func):
        if key in self._aliased_keys:
            return
        if self._funcs.get(key, _NOT_FOUND) != _underlying_function(func):
            self._aliased_keys.add(key)
            warn(
                f'Different callables share the identity {key!r}, so the signature '
                f'cached for the first one is used for {func!r}. Use '
                f'SignatureCache(alias_by_name=False) if that is not what you want.',
                SignatureAliasWarning,
            )


# The cache shared by all dispatchers that aren't given their own
signature_cache = SignatureCache()
