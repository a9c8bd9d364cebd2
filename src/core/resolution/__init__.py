"""Field resolution over raw vendor records."""

from .resolvers import (
    CandidateList,
    CustomResolver,
    FieldResolver,
    ResolverKind,
    ResolverSpec,
    as_resolver,
    resolve,
)

__all__ = [
    "CandidateList",
    "CustomResolver",
    "FieldResolver",
    "ResolverKind",
    "ResolverSpec",
    "as_resolver",
    "resolve",
]
