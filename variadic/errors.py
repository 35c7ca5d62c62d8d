"""Errors and warnings raised when binding arguments to callables.

All errors derive from ``VariadicError``, and also from the builtin exception a
python caller would expect in the same situation, so you can catch them either way:

>>> try:
...     raise UnknownParameter('z', names=['x', 'y'])
... except TypeError as e:
...     print(e)
Unknown parameter name 'z'. Parameter has to be one of the following names: 'x' or 'y'.

"""

from typing import Iterable, Optional


def _or_list(items: Iterable[str]) -> str:
    """Quote items and join them as an "or" enumeration.

    >>> _or_list(['a', 'b', 'c'])
    "'a', 'b' or 'c'"
    >>> _or_list(['a'])
    "'a'"
    """
    items = [f"'{x}'" for x in items]
    if len(items) > 1:
        *first, last = items
        return f"{', '.join(first)} or {last}"
    return ''.join(items)


class VariadicError(Exception):
    """Base of all errors raised while resolving, binding or dispatching"""


class NotCallable(VariadicError, TypeError):
    """Raise when an object can't be resolved to a callable, or its signature
    can't be found"""


class InvalidOption(VariadicError, ValueError):
    """Raise when an unknown option is given (e.g. an unknown flatten mode)"""

    def __init__(self, option, options: Iterable[str] = ()):
        self.option = option
        self.options = tuple(options)
        msg = f"Unknown option '{option}'."
        if self.options:
            msg += (
                f" It has to be one of the following options: {_or_list(self.options)}."
            )
        super().__init__(msg)


TOO_FEW = 'too_few'
TOO_MANY = 'too_many'


class ArityError(VariadicError, TypeError):
    """Raise when the number of arguments doesn't fit the signature.

    ``reason`` is ``'too_few'`` or ``'too_many'``.
    """

    reason: Optional[str] = None

    def __init__(self, msg='', *, n_args=None, min_args=None, max_args=None):
        self.n_args = n_args
        self.min_args = min_args
        self.max_args = max_args
        super().__init__(msg)


class TooFewArguments(ArityError):
    reason = TOO_FEW

    def __init__(self, *, n_args, min_args, max_args=None):
        msg = f'Missing arguments. Need at least {min_args} arguments, got {n_args}.'
        super().__init__(msg, n_args=n_args, min_args=min_args, max_args=max_args)


class TooManyArguments(ArityError):
    reason = TOO_MANY

    def __init__(self, *, n_args, min_args, max_args, msg=None):
        msg = msg or (
            f'Too many parameters. Need at least {min_args} argument(s) '
            f'and at most {max_args}, got {n_args}.'
        )
        super().__init__(msg, n_args=n_args, min_args=min_args, max_args=max_args)


class UnknownParameter(VariadicError, TypeError):
    """Raise when a named argument doesn't match any parameter of the signature"""

    def __init__(self, name, names: Iterable[str] = ()):
        self.name = name
        self.names = tuple(names)
        msg = f"Unknown parameter name '{name}'."
        if self.names:
            msg += (
                ' Parameter has to be one of the following names: '
                f'{_or_list(self.names)}.'
            )
        super().__init__(msg)


class InvalidKeywordArguments(VariadicError, TypeError):
    """Raise when the value given to a ``**kwargs`` parameter is not a mapping, or
    has keys that are also names of other parameters"""

    def __init__(self, name, msg=''):
        self.name = name
        super().__init__(msg or f"Invalid value for the '{name}' parameter.")


class MissingRequiredParameter(VariadicError, TypeError):
    """Raise when a required parameter didn't get a value"""

    def __init__(self, name):
        self.name = name
        super().__init__(f"Missing required parameter for '{name}'.")


class SignatureAliasWarning(UserWarning):
    """Two different callables were cached under the same identity, so they share a
    signature"""
