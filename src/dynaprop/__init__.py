"""dynaprop: runtime member resolution and invocation for template hosts.

Usage::

    from dynaprop import Host, FunctionRegistry, install_default_functions, Short

    class TextFunctions:
        @staticmethod
        def repeat(value: str, times: Short) -> str:
            return value * times

    registry = FunctionRegistry()
    install_default_functions(registry)
    registry.register_function_classes(str, TextFunctions)

    host = Host(registry)
    host.evaluate("ab", "repeat", "3")          # "ababab"
    host.evaluate(123, "add", "1")              # 124
    host.evaluate("ABC", "substring", "1", "1") # ""
"""

from .types import (
    Char, Byte, Short, Int, Long,
    ParamType, TypeKey,
    p_char, p_byte, p_short, p_int, p_long,
    infer_type_key, type_name,
)
from .converters import TypeConverter, ConverterTable, DEFAULT_CONVERTERS
from .members import (
    MemberInvoker, FieldInvoker, MethodInvoker, StaticInvoker, ValueInjectedInvoker,
    TypeIndexMap, InvokerIndex, EMPTY_INDEX,
    ClassMembers, CatalogCache, build_catalog, member,
)
from .registry import (
    FunctionRegistry, TypeFunctions, default_registry, reset_default_registry, resolve_name,
)
from .functions import (
    ObjectFunctions, NumberFunctions, StringFunctions, install_default_functions,
)
from .dispatch import TypeDispatchMap
from .diagnostics import render_path, render_arg, register_formatter
from .adaptor import (
    InvokeAdaptor, ObjectAdaptor, NumberAdaptor, StringAdaptor,
    ArgsAdaptor, ArgsAdaptorHandler, State,
)
from .host import Host
from .config import load_config, registry_from_config
from .exc import (
    DispatchError, ConversionError, ConfigurationError, AdaptorStateError,
    NoSuchPropertyError, NoMatchError, InvocationError,
)

__version__ = "0.1.0"

__all__ = [
    # Types
    'Char', 'Byte', 'Short', 'Int', 'Long',
    'ParamType', 'TypeKey',
    'p_char', 'p_byte', 'p_short', 'p_int', 'p_long',
    'infer_type_key', 'type_name',
    # Converters
    'TypeConverter', 'ConverterTable', 'DEFAULT_CONVERTERS',
    # Members
    'MemberInvoker', 'FieldInvoker', 'MethodInvoker', 'StaticInvoker',
    'ValueInjectedInvoker', 'TypeIndexMap', 'InvokerIndex', 'EMPTY_INDEX',
    'ClassMembers', 'CatalogCache', 'build_catalog', 'member',
    # Registry
    'FunctionRegistry', 'TypeFunctions', 'default_registry', 'reset_default_registry',
    'resolve_name',
    'ObjectFunctions', 'NumberFunctions', 'StringFunctions', 'install_default_functions',
    # Host side
    'TypeDispatchMap', 'render_path', 'render_arg', 'register_formatter',
    'InvokeAdaptor', 'ObjectAdaptor', 'NumberAdaptor', 'StringAdaptor',
    'ArgsAdaptor', 'ArgsAdaptorHandler', 'State', 'Host',
    'load_config', 'registry_from_config',
    # Exceptions
    'DispatchError', 'ConversionError', 'ConfigurationError', 'AdaptorStateError',
    'NoSuchPropertyError', 'NoMatchError', 'InvocationError',
]
