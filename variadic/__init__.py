"""Call functions with a variable number of arguments, mixing positional and named
ones, and let a "rest" parameter collect what's left over"""

from variadic.dispatch import (
    Variadic,  # the dispatcher: binds arguments to callables and calls them
    FlattenMode,  # whether flat name, value pairs of arguments are taken as named
    call_variadic,  # call a callable with *args and **kwargs (default Variadic)
    call_variadic_array,  # call a callable with a list of arguments (default Variadic)
    get_default_variadic,  # the Variadic instance used by the functions above
    variadic_func,  # decorator to dispatch calls of a function with call_variadic
    DFLT_FLATTEN_MODE,
)

from variadic.binding import (
    Kwarg,  # marks a named argument in a flat list of arguments
    bind_arguments,  # bind arguments to the parameters of a signature
    flatten_kwargs,  # turn flat name, value pairs into Kwarg items
    mk_args_and_kwargs,  # make the (args, kwargs) of a call from bound arguments
    DFLT_KEYWORD,
    DFLT_USE_VARGS,
)

from variadic.caching import (
    SignatureCache,  # cache of signature information, keyed by callable identity
    signature_cache,  # the process-wide SignatureCache
)

from variadic.callables import (
    CallableType,  # function, method, static or relative
    CallableIdentity,  # the canonical identity of a callable reference
    get_type,  # get the CallableType of a callable reference
    identity_of,  # get the CallableIdentity of a callable reference
    resolve_callable,  # get the python callable a callable reference refers to
)

from variadic.signatures import (
    ParamDescriptor,  # a parameter: name, required/optional, default
    ParamType,  # required or optional
    SigInfo,  # the parameters of a callable, with min and max number of arguments
    describe_callable,  # get the ParamDescriptors of a callable
)

from variadic.errors import (
    VariadicError,
    NotCallable,
    InvalidOption,
    ArityError,
    TooFewArguments,
    TooManyArguments,
    UnknownParameter,
    InvalidKeywordArguments,
    MissingRequiredParameter,
    SignatureAliasWarning,
)
