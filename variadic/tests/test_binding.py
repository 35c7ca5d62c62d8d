"""Test binding arguments to parameters"""

import pytest

from variadic.binding import (
    Kwarg,
    bind_arguments,
    flatten_kwargs,
    mk_args_and_kwargs,
    split_arguments,
)
from variadic.caching import SignatureCache
from variadic.dispatch import Variadic
from variadic.errors import (
    InvalidKeywordArguments,
    MissingRequiredParameter,
    TooFewArguments,
    TooManyArguments,
    UnknownParameter,
)
from variadic.signatures import SigInfo, describe_callable
from variadic.tests.utils_for_tests import (
    CountingDescribe,
    no_rest,
    some_function,
    with_rest_default,
    with_var_keyword,
    with_var_positional,
)

some_sig = SigInfo.from_callable(some_function)


@pytest.mark.parametrize(
    'args, expected',
    [
        ([1, 2], dict(required=1, optional=True, args=[2])),
        ([1, 2, 3], dict(required=1, optional=2, args=[3])),
        ([1, 2, 3, 4, 5], dict(required=1, optional=2, args=[3, 4, 5])),
        ([1, 2, [3], 4, 5], dict(required=1, optional=2, args=[[3], 4, 5])),
        ([1, Kwarg('args', 2)], dict(required=1, optional=True, args=[2])),
        (
            [Kwarg('args', 2), Kwarg('required', 1), 3],
            dict(required=1, optional=3, args=[2]),
        ),
        (
            [2, Kwarg('required', 1), 3, 4, 5],
            dict(required=1, optional=2, args=[3, 4, 5]),
        ),
        (
            [2, Kwarg('required', 1), Kwarg('args', [3]), 4, 5],
            dict(required=1, optional=2, args=[[3], 4, 5]),
        ),
        (
            {'args': 2, 'required': 1, 0: 3},
            dict(required=1, optional=3, args=[2]),
        ),
    ],
)
def test_bind_arguments(args, expected):
    result = bind_arguments(some_sig, args)
    assert result == expected
    assert list(result) == ['required', 'optional', 'args']


def test_optional_slots_are_only_filled_within_budget():
    sig_info = SigInfo.from_callable(with_rest_default)
    assert bind_arguments(sig_info, [1]) == dict(
        required=1, optional='dflt', args=[None]
    )
    assert bind_arguments(sig_info, [1, 2]) == dict(required=1, optional=2, args=[None])
    assert bind_arguments(sig_info, [1, 2, 3]) == dict(required=1, optional=2, args=[3])


def test_named_arguments_win_over_positional_ones():
    result = bind_arguments(some_sig, [Kwarg('optional', 'O'), 1, 2])
    assert result == dict(required=1, optional='O', args=[2])


def test_binding_a_bound_result_again_changes_nothing():
    first = bind_arguments(some_sig, [1, 2, 3, 4])
    assert bind_arguments(some_sig, first) == first


def test_binding_twice_through_a_shared_cache_gives_the_same_result():
    describe = CountingDescribe(describe_callable)
    v = Variadic(cache=SignatureCache(describe))
    params = [2, Kwarg('required', 1), 3, 4]
    first = v.bind(some_function, params)
    second = v.bind(some_function, params)
    assert first == second == dict(required=1, optional=2, args=[3, 4])
    assert v.call_variadic(some_function, 1, 2, 3) == v.call_variadic(
        some_function, 1, 2, 3
    )
    assert describe.calls == [some_function]


def test_too_few_arguments():
    with pytest.raises(TooFewArguments) as exc_info:
        bind_arguments(some_sig, [1])
    assert (exc_info.value.n_args, exc_info.value.min_args) == (1, 2)


def test_too_many_arguments_without_vargs():
    sig_info = SigInfo.from_callable(no_rest)
    assert bind_arguments(sig_info, [1, 3], use_vargs=False) == dict(a=1, b=3)
    with pytest.raises(TooManyArguments) as exc_info:
        bind_arguments(sig_info, [1, 2, 3], use_vargs=False)
    assert exc_info.value.max_args == 2
    # even with a rest parameter
    with pytest.raises(TooManyArguments):
        bind_arguments(some_sig, [1, 2, 3, 4], use_vargs=False)


def test_leftovers_with_no_rest_parameter_are_dropped():
    assert bind_arguments(SigInfo.from_callable(no_rest), [1, 2, 3]) == dict(a=1, b=2)
    # a rest keyword the signature doesn't have collects nothing either
    assert bind_arguments(some_sig, [1, 2, 3, 4], keyword='rest') == dict(
        required=1, optional=2, args=3
    )


def test_leftovers_go_to_a_var_positional_parameter():
    sig_info = SigInfo.from_callable(with_var_positional)
    arguments = bind_arguments(sig_info, [1, 2, 3, 4], keyword='rest')
    assert arguments == dict(required=1, optional=2, args=[3, 4])
    args, kwargs = mk_args_and_kwargs(sig_info, arguments)
    assert with_var_positional(*args, **kwargs) == (1, 2, (3, 4))

    # a single positional value is passed as is, even if it's a list
    arguments = bind_arguments(sig_info, [1, 2, [3]], keyword='rest')
    args, kwargs = mk_args_and_kwargs(sig_info, arguments)
    assert with_var_positional(*args, **kwargs) == (1, 2, ([3],))

    # as is the case with use_vargs=False
    arguments = bind_arguments(sig_info, [1, 2, 3], use_vargs=False)
    assert arguments == dict(required=1, optional=2, args=[3])


def test_unknown_parameter():
    with pytest.raises(UnknownParameter) as exc_info:
        bind_arguments(some_sig, [1, 2, Kwarg('z', 3)])
    assert exc_info.value.name == 'z'
    # even if the function has a **kwargs parameter
    sig_info = SigInfo.from_callable(with_var_keyword)
    with pytest.raises(UnknownParameter):
        bind_arguments(sig_info, [1, Kwarg('z', 3)])


def test_missing_required_parameter():
    with pytest.raises(MissingRequiredParameter) as exc_info:
        bind_arguments(some_sig, [Kwarg('optional', 1), 2])
    assert exc_info.value.name == 'args'


def test_var_positional_as_rest_parameter():
    sig_info = SigInfo.from_callable(with_var_positional)

    arguments = bind_arguments(sig_info, [1, 2, 3, 4])
    assert arguments == dict(required=1, optional=2, args=[3, 4])
    args, kwargs = mk_args_and_kwargs(sig_info, arguments)
    assert with_var_positional(*args, **kwargs) == (1, 2, (3, 4))

    arguments = bind_arguments(sig_info, [1])
    assert arguments == dict(required=1, optional=True, args=())
    args, kwargs = mk_args_and_kwargs(sig_info, arguments)
    assert with_var_positional(*args, **kwargs) == (1, True, ())


def test_var_keyword_is_only_filled_by_name():
    sig_info = SigInfo.from_callable(with_var_keyword)

    arguments = bind_arguments(sig_info, [1, 2, Kwarg('kwargs', {'z': 3})])
    assert arguments == dict(a=1, args=[2], b=2, kwargs={'z': 3})
    args, kwargs = mk_args_and_kwargs(sig_info, arguments)
    assert (args, kwargs) == ((1, 2), {'b': 2, 'z': 3})
    assert with_var_keyword(*args, **kwargs) == (1, (2,), 2, {'z': 3})

    # a **kwargs parameter never collects the left over arguments, *args does
    arguments = bind_arguments(sig_info, [1, 2, 3, 4], keyword='kwargs')
    assert arguments == dict(a=1, args=[2, 4], b=3, kwargs={})


def test_var_keyword_value_has_to_be_a_mapping():
    sig_info = SigInfo.from_callable(with_var_keyword)
    with pytest.raises(InvalidKeywordArguments, match='takes a mapping') as exc_info:
        bind_arguments(sig_info, [1, Kwarg('kwargs', 5)])
    assert exc_info.value.name == 'kwargs'
    assert isinstance(exc_info.value, TypeError)


def test_var_keyword_value_cannot_hold_other_parameters():
    sig_info = SigInfo.from_callable(with_var_keyword)
    for name in ['a', 'b']:
        with pytest.raises(InvalidKeywordArguments, match=repr(name)):
            bind_arguments(sig_info, [1, Kwarg('kwargs', {name: 9})])
    # the name of a *args parameter is fine
    arguments = bind_arguments(sig_info, [1, Kwarg('kwargs', {'args': 9})])
    args, kwargs = mk_args_and_kwargs(sig_info, arguments)
    assert with_var_keyword(*args, **kwargs) == (1, (), 2, {'args': 9})


def test_mk_args_and_kwargs_appends_a_scalar_var_positional_value():
    sig_info = SigInfo.from_callable(with_var_positional)
    assert mk_args_and_kwargs(sig_info, dict(required=1, optional=2, args=3)) == (
        (1, 2, 3),
        {},
    )


def test_mk_args_and_kwargs_passes_keyword_only_by_name():
    arguments = bind_arguments(some_sig, [1, 2, 3])
    assert mk_args_and_kwargs(some_sig, arguments) == ((1, 2), {'args': [3]})


@pytest.mark.parametrize(
    'args, expected',
    [
        (['required', 1, 'args', 2], [Kwarg('required', 1), Kwarg('args', 2)]),
        (['required', 1, '', 2], [Kwarg('required', 1), '', 2]),
        (['required', 1, '', 'val'], [Kwarg('required', 1), '', 'val']),
        ([1, 2, 3], [1, 2, 3]),
        ([1, 'required'], [1, 'required']),
        ([1, 'args', 2], [1, Kwarg('args', 2)]),
        (['required', 'args'], [Kwarg('required', 'args')]),
        (['nope', 1], ['nope', 1]),
        ([], []),
    ],
)
def test_flatten_kwargs(args, expected):
    assert flatten_kwargs(['required', 'optional', 'args'], args) == expected


def test_split_arguments_last_named_value_wins():
    assert split_arguments([Kwarg('a', 1), 2, Kwarg('a', 3)]) == ([2], {'a': 3})
    assert split_arguments({1: 'one', 0: 'zero'}) == (['one', 'zero'], {})
