"""Classify callable references, give them a canonical identity, and resolve them to
actual python callables.

A callable reference can be:

    - a callable object (function, lambda, class, builtin, bound method, callable
      instance...)

    - a dotted path string: ``'os.path.join'`` (bare names are looked up in
      ``builtins``), or ``'pkg.mod.Cls::method'`` for a method of a class

    - an ``(instance, 'method')`` pair

    - a ``(cls, 'method')`` pair (``cls`` can be a dotted path string), or
      ``(cls, 'parent::method')`` to get the method of the immediate superclass.

>>> get_type(len)
<CallableType.FUNCTION: 'function'>
>>> get_type('os.path.join')
<CallableType.FUNCTION: 'function'>
>>> get_type('collections.OrderedDict::fromkeys')
<CallableType.STATIC: 'static'>
>>> get_type(([], 'append'))
<CallableType.METHOD: 'method'>
>>> get_type((dict, 'fromkeys'))
<CallableType.STATIC: 'static'>
>>> get_type((dict, 'parent::fromkeys'))
<CallableType.RELATIVE: 'relative'>

The identity is what the signature of a callable is cached under:

>>> str(identity_of((dict, 'parent::fromkeys')))
'builtins.dict::parent::fromkeys'
>>> str(identity_of(([], 'append')))
'builtins.list->append'

"""

from dataclasses import dataclass
from enum import Enum
from functools import partial, reduce
from importlib import import_module
from inspect import isbuiltin, isclass, isfunction, ismethod, ismodule
from typing import Any, Callable, Optional

from variadic.errors import NotCallable
from variadic.signatures import qualified_name

SCOPE_SEP = '::'
METHOD_SEP = '->'
PARENT = 'parent'
PARENT_PREFIX = PARENT + SCOPE_SEP


class CallableType(str, Enum):
    FUNCTION = 'function'  # simple callback
    METHOD = 'method'  # method of an object
    STATIC = 'static'  # method referenced through a class
    RELATIVE = 'relative'  # method referenced through the superclass of a class


def _is_pair(obj) -> bool:
    return isinstance(obj, (tuple, list)) and len(obj) == 2 and isinstance(obj[1], str)


def _is_scope(obj) -> bool:
    return isinstance(obj, str) or isclass(obj)


def _bound_self(obj):
    """The object a (python or builtin) method is bound to, or None if not bound"""
    if ismethod(obj):
        return obj.__self__
    elif isbuiltin(obj):
        self_ = getattr(obj, '__self__', None)
        if self_ is not None and not ismodule(self_):
            return self_
    return None


def get_type(obj) -> CallableType:
    """Get the type of a callable reference.

    The classification only looks at the shape of ``obj``: a reference that has the
    right shape but doesn't resolve (say, an unknown method name) will only fail
    when it's resolved.

    >>> class A:
    ...     def meth(self): ...
    ...     @classmethod
    ...     def cmeth(cls): ...
    ...     def __call__(self): ...
    >>> get_type(A().meth)
    <CallableType.METHOD: 'method'>
    >>> get_type(A.cmeth)
    <CallableType.STATIC: 'static'>
    >>> get_type(A())
    <CallableType.METHOD: 'method'>
    >>> get_type(A)
    <CallableType.FUNCTION: 'function'>
    >>> get_type(None)
    Traceback (most recent call last):
      ...
    variadic.errors.NotCallable: Callback None is not callable.
    """
    if isinstance(obj, str):
        if SCOPE_SEP in obj:
            return CallableType.STATIC
        return CallableType.FUNCTION
    elif _is_pair(obj):
        scope, name = obj
        if _is_scope(scope):
            if SCOPE_SEP in name:
                return CallableType.RELATIVE
            return CallableType.STATIC
        return CallableType.METHOD
    elif callable(obj):
        self_ = _bound_self(obj)
        if self_ is not None:
            if isclass(self_):
                return CallableType.STATIC
            return CallableType.METHOD
        elif isfunction(obj) or isclass(obj) or isbuiltin(obj):
            return CallableType.FUNCTION
        elif isfunction(getattr(type(obj), '__call__', None)):
            # an instance of a python class defining __call__
            return CallableType.METHOD
        return CallableType.FUNCTION
    raise NotCallable(f"Callback {obj!r} is not callable.")


@dataclass(frozen=True)
class CallableIdentity:
    """The canonical identity of a callable reference.

    Two references with the same identity are considered to have the same
    signature.

    >>> str(CallableIdentity(CallableType.FUNCTION, None, 'os.path.join'))
    'os.path.join'
    >>> str(CallableIdentity(CallableType.METHOD, 'pkg.A', 'meth'))
    'pkg.A->meth'
    >>> str(CallableIdentity(CallableType.STATIC, 'pkg.A', 'meth'))
    'pkg.A::meth'
    >>> str(CallableIdentity(CallableType.RELATIVE, 'pkg.A', 'meth'))
    'pkg.A::parent::meth'
    """

    type: CallableType
    scope: Optional[str]
    name: str

    def __str__(self):
        if self.type is CallableType.METHOD:
            return f'{self.scope}{METHOD_SEP}{self.name}'
        elif self.type is CallableType.STATIC:
            return f'{self.scope}{SCOPE_SEP}{self.name}'
        elif self.type is CallableType.RELATIVE:
            return f'{self.scope}{SCOPE_SEP}{PARENT_PREFIX}{self.name}'
        return self.name


def _scope_name(scope) -> str:
    if isinstance(scope, str):
        return scope
    return qualified_name(scope)


def _strip_parent(name: str) -> str:
    qualifier, _, method_name = name.rpartition(SCOPE_SEP)
    if qualifier != PARENT:
        raise NotCallable(
            f"Only '{PARENT_PREFIX}' qualified method names are supported. "
            f'Was: {name!r}'
        )
    return method_name


def identity_of(obj, callable_type: Optional[CallableType] = None) -> CallableIdentity:
    """Make the ``CallableIdentity`` of a callable reference.

    >>> str(identity_of('collections.OrderedDict::fromkeys'))
    'collections.OrderedDict::fromkeys'
    >>> from collections import OrderedDict
    >>> identity_of((OrderedDict, 'fromkeys')) == identity_of(OrderedDict.fromkeys)
    True
    >>> str(identity_of(len))
    'builtins.len'
    """
    callable_type = callable_type or get_type(obj)
    if isinstance(obj, str):
        if callable_type is CallableType.STATIC:
            scope, _, name = obj.partition(SCOPE_SEP)
            return CallableIdentity(callable_type, scope, name)
        return CallableIdentity(callable_type, None, obj)
    elif _is_pair(obj):
        scope, name = obj
        if callable_type is CallableType.METHOD:
            return CallableIdentity(callable_type, qualified_name(type(scope)), name)
        elif callable_type is CallableType.RELATIVE:
            name = _strip_parent(name)
        return CallableIdentity(callable_type, _scope_name(scope), name)
    else:
        self_ = _bound_self(obj)
        if self_ is not None:
            scope = self_ if callable_type is CallableType.STATIC else type(self_)
            return CallableIdentity(callable_type, qualified_name(scope), obj.__name__)
        elif callable_type is CallableType.METHOD:
            return CallableIdentity(callable_type, qualified_name(type(obj)), '__call__')
        elif isinstance(obj, partial):
            name = f'{qualified_name(obj)}({qualified_name(obj.func)})'
            return CallableIdentity(callable_type, None, name)
        return CallableIdentity(callable_type, None, qualified_name(obj))


def import_object(dotted_path: str) -> Any:
    """Get an object from its dotted path. Names without dots are taken from builtins.

    >>> import_object('os.path.join').__name__
    'join'
    >>> import_object('len')
    <built-in function len>
    >>> import_object('collections.OrderedDict.fromkeys')  # doctest: +ELLIPSIS
    <built-in method fromkeys of type object at ...>
    >>> import_object('no.such.thing')
    Traceback (most recent call last):
      ...
    variadic.errors.NotCallable: Could not resolve 'no.such.thing'.
    """
    parts = dotted_path.split('.')
    if len(parts) == 1:
        parts = ['builtins'] + parts
    for i in range(len(parts) - 1, 0, -1):
        try:
            module = import_module('.'.join(parts[:i]))
        except (ImportError, ValueError, TypeError):  # empty or relative module names
            continue
        try:
            return reduce(getattr, parts[i:], module)
        except AttributeError:
            break
    raise NotCallable(f'Could not resolve {dotted_path!r}.')


def _parent_of(cls: type) -> type:
    parents = cls.__mro__[1:]
    if not parents:
        raise NotCallable(f'{cls!r} has no parent class.')
    return parents[0]


def _get_method(scope, name: str) -> Callable:
    try:
        method = getattr(scope, name)
    except AttributeError:
        raise NotCallable(f'{scope!r} has no method {name!r}.') from None
    if not callable(method):
        raise NotCallable(f'{scope!r}.{name} is not callable.')
    return method


def resolve_callable(obj, callable_type: Optional[CallableType] = None) -> Callable:
    """Get the python callable a callable reference refers to.

    >>> class A:
    ...     @staticmethod
    ...     def who():
    ...         return 'A'
    >>> class B(A):
    ...     @staticmethod
    ...     def who():
    ...         return 'B'
    >>> resolve_callable((B, 'who'))()
    'B'
    >>> resolve_callable((B, 'parent::who'))()
    'A'
    >>> resolve_callable(('os.path', 'join')).__name__
    'join'
    """
    callable_type = callable_type or get_type(obj)
    if isinstance(obj, str):
        if callable_type is CallableType.STATIC:
            scope, _, name = obj.partition(SCOPE_SEP)
            return _get_method(import_object(scope), name)
        func = import_object(obj)
        if not callable(func):
            raise NotCallable(f'{obj!r} is not callable.')
        return func
    elif _is_pair(obj):
        scope, name = obj
        if isinstance(scope, str):
            scope = import_object(scope)
        if callable_type is CallableType.RELATIVE:
            if not isclass(scope):
                raise NotCallable(f'{scope!r} is not a class.')
            return _get_method(_parent_of(scope), _strip_parent(name))
        return _get_method(scope, name)
    return obj
