from .invoker import (
    MemberInvoker, FieldInvoker, MethodInvoker, StaticInvoker, ValueInjectedInvoker,
    NO_CONVERTERS,
)
from .typeindex import TypeIndexMap
from .index import InvokerIndex, EMPTY_INDEX
from .catalog import ClassMembers, CatalogCache, build_catalog, member, is_public

__all__ = [
    'MemberInvoker', 'FieldInvoker', 'MethodInvoker', 'StaticInvoker',
    'ValueInjectedInvoker', 'NO_CONVERTERS',
    'TypeIndexMap', 'InvokerIndex', 'EMPTY_INDEX',
    'ClassMembers', 'CatalogCache', 'build_catalog', 'member', 'is_public',
]
