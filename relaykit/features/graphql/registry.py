"""Schema field to resolver registry.

Every field of the GraphQL root types (Query, Mutation, Subscription) must be
bound to exactly one resolver, and every resolver to exactly one declared
field. The registry is assembled once at startup:

1. Declare the schema fields (``declare_schema`` reads them off a schema).
2. Register resolvers, one by one or per feature.
3. ``build()`` validates everything in a single pass and freezes the result.
4. ``install_registry()`` makes it the process-wide registry.

Any inconsistency aborts startup with a ``RegistryValidationError`` listing
every violation at once. After ``build()`` the field set and the dispatch
table never change.

Usage:
    builder = ResolverRegistryBuilder()
    builder.declare_schema(schema)

    @builder.resolver("Query.users")
    async def users(info, first=None, after=None, last=None, before=None): ...

    builder.register_feature("posts", queries=[post_query, posts_query])

    install_registry(builder.build())
    users_resolver = get_registry().dispatch("Query.users")
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from graphql import GraphQLSchema, build_schema
from strawberry.utils.str_converters import to_camel_case

from relaykit.core.exceptions import (
    AppException,
    DuplicateResolverError,
    MissingResolverError,
    OrphanResolverError,
    RegistryValidationError,
    SharedResolverError,
)

logger = logging.getLogger(__name__)

__all__ = [
    "ResolverRegistry",
    "ResolverRegistryBuilder",
    "get_registry",
    "install_registry",
    "uninstall_registry",
]

Resolver = Callable[..., Any]

# Root type and resolver name suffix for each feature resolver kind
_FEATURE_KINDS = (
    ("queries", "Query", "_query"),
    ("mutations", "Mutation", "_mutation"),
    ("subscriptions", "Subscription", "_subscription"),
)


def _check_field_name(field: str) -> str:
    type_name, dot, field_name = field.partition(".")
    if not dot or not type_name or not field_name or "." in field_name:
        raise ValueError(f"Field must be written as 'Type.field', got {field!r}")
    return field


def _handle_of(resolver: Resolver) -> str:
    module = getattr(resolver, "__module__", None) or "<unknown>"
    name = getattr(resolver, "__qualname__", None) or getattr(resolver, "__name__", None)
    if name is None:
        name = type(resolver).__qualname__
    return f"{module}.{name}"


@dataclass(frozen=True, slots=True)
class Registration:
    """One resolver bound to one field.

    Attributes:
        field: Qualified field name (``Type.field``).
        handle: Stable resolver identifier used in error reports.
        resolver: The resolver callable.
    """

    field: str
    handle: str
    resolver: Resolver


class ResolverRegistry(Mapping[str, Resolver]):
    """Frozen, validated dispatch table from field name to resolver.

    Behaves as a read-only mapping ``{"Query.users": resolver, ...}``.
    """

    __slots__ = ("_handles", "_resolvers")

    def __init__(self, registrations: Iterable[Registration]) -> None:
        registrations = list(registrations)
        self._resolvers = MappingProxyType({r.field: r.resolver for r in registrations})
        self._handles = MappingProxyType({r.field: r.handle for r in registrations})

    def __getitem__(self, field: str) -> Resolver:
        return self._resolvers[field]

    def __iter__(self) -> Iterator[str]:
        return iter(self._resolvers)

    def __len__(self) -> int:
        return len(self._resolvers)

    def __repr__(self) -> str:
        return f"ResolverRegistry({len(self)} fields)"

    @property
    def fields(self) -> frozenset[str]:
        return frozenset(self._resolvers)

    def handle_for(self, field: str) -> str:
        return self._handles[field]

    def dispatch(self, field: str) -> Resolver:
        """Return the resolver bound to ``field``.

        Raises:
            MissingResolverError: ``field`` is not part of the registry.
        """
        try:
            return self._resolvers[field]
        except KeyError:
            raise MissingResolverError(field) from None


class ResolverRegistryBuilder:
    """Collect field declarations and resolver registrations, then validate.

    A builder produces at most one registry; reuse after ``build()`` raises
    ``RuntimeError``.
    """

    def __init__(self) -> None:
        self._declared: dict[str, None] = {}
        self._registrations: list[Registration] = []
        self._built = False

    def _ensure_open(self) -> None:
        if self._built:
            raise RuntimeError("Registry already built; the field set is frozen")

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def declare(self, field: str) -> None:
        self._ensure_open()
        self._declared[_check_field_name(field)] = None

    def declare_many(self, fields: Iterable[str]) -> None:
        for field in fields:
            self.declare(field)

    def declare_schema(self, schema: GraphQLSchema | str | Any) -> list[str]:
        """Declare every root field of a schema.

        Args:
            schema: A graphql-core schema, SDL text, or any object exposing
                ``as_str()`` (such as a ``strawberry.Schema``).

        Returns:
            The qualified field names declared, in schema order.
        """
        if isinstance(schema, str):
            schema = build_schema(schema)
        elif not isinstance(schema, GraphQLSchema):
            schema = build_schema(schema.as_str())

        fields = [
            f"{root.name}.{name}"
            for root in (schema.query_type, schema.mutation_type, schema.subscription_type)
            if root is not None
            for name in root.fields
        ]
        self.declare_many(fields)
        return fields

    @property
    def declared(self) -> tuple[str, ...]:
        return tuple(self._declared)

    # ------------------------------------------------------------------
    # Registrations
    # ------------------------------------------------------------------

    def register(self, field: str, resolver: Resolver, handle: str | None = None) -> None:
        self._ensure_open()
        field = _check_field_name(field)
        if handle is None:
            handle = self._default_handle(resolver)
        self._registrations.append(Registration(field, handle, resolver))

    def _default_handle(self, resolver: Resolver) -> str:
        """Qualified name of the resolver, suffixed when another resolver already uses it."""
        base = _handle_of(resolver)
        taken: dict[str, Resolver] = {}
        for registration in self._registrations:
            taken.setdefault(registration.handle, registration.resolver)

        handle, n = base, 1
        while taken.get(handle, resolver) is not resolver:
            n += 1
            handle = f"{base}#{n}"
        return handle

    def register_many(self, resolvers: Mapping[str, Resolver]) -> None:
        for field, resolver in resolvers.items():
            self.register(field, resolver)

    def resolver(self, field: str, *, handle: str | None = None) -> Callable[[Resolver], Resolver]:
        """Decorator form of :meth:`register`."""

        def decorator(func: Resolver) -> Resolver:
            self.register(field, func, handle)
            return func

        return decorator

    def register_feature(
        self,
        name: str,
        *,
        queries: Iterable[Resolver] = (),
        mutations: Iterable[Resolver] = (),
        subscriptions: Iterable[Resolver] = (),
        enabled: bool = True,
    ) -> None:
        """Register a feature's resolvers by naming convention.

        ``users_query`` binds to ``Query.users``, ``update_user_mutation`` to
        ``Mutation.updateUser`` and ``user_events_subscription`` to
        ``Subscription.userEvents``. A disabled feature registers nothing.

        Raises:
            ValueError: A resolver name lacks the suffix of its kind.
        """
        if not enabled:
            logger.info("Feature %s disabled, resolvers not registered", name)
            return

        groups = {"queries": queries, "mutations": mutations, "subscriptions": subscriptions}
        count = 0
        for kind, root, suffix in _FEATURE_KINDS:
            for resolver in groups[kind]:
                func_name = getattr(resolver, "__name__", "")
                if not func_name.endswith(suffix) or func_name == suffix:
                    raise ValueError(
                        f"Feature {name!r}: resolver {func_name!r} in {kind} must end with {suffix!r}"
                    )
                self.register(f"{root}.{to_camel_case(func_name[: -len(suffix)])}", resolver)
                count += 1

        logger.debug("Registered feature %s (%d resolvers)", name, count)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate(self) -> list[AppException]:
        """Collect every inconsistency without building."""
        # Bookkeeping is keyed on resolver identity; handles only name them in reports
        by_field: dict[str, dict[int, str]] = {}
        by_resolver: dict[int, tuple[str, list[str]]] = {}
        for registration in self._registrations:
            key = id(registration.resolver)
            by_field.setdefault(registration.field, {}).setdefault(key, registration.handle)
            _, fields = by_resolver.setdefault(key, (registration.handle, []))
            if registration.field not in fields:
                fields.append(registration.field)

        violations: list[AppException] = [
            MissingResolverError(field) for field in self._declared if field not in by_field
        ]
        violations.extend(
            OrphanResolverError(handle, field)
            for field, resolvers in by_field.items()
            if field not in self._declared
            for handle in resolvers.values()
        )
        violations.extend(
            DuplicateResolverError(field, list(resolvers.values()))
            for field, resolvers in by_field.items()
            if len(resolvers) > 1
        )
        violations.extend(
            SharedResolverError(handle, fields)
            for handle, fields in by_resolver.values()
            if len(fields) > 1
        )
        return violations

    def build(self) -> ResolverRegistry:
        """Validate and freeze the registry.

        Raises:
            RegistryValidationError: One or more inconsistencies (all listed).
            RuntimeError: The builder was already built.
        """
        self._ensure_open()
        violations = self.validate()
        if violations:
            for violation in violations:
                logger.error(
                    "Resolver registry violation: %s",
                    violation.detail,
                    extra={"code": violation.code, **violation.extra},
                )
            raise RegistryValidationError(violations)

        self._built = True
        registry = ResolverRegistry(self._registrations)
        logger.info(
            "Resolver registry built",
            extra={"fields": len(registry)},
        )
        return registry


# Process-wide registry, installed once at startup
_INSTALLED: ResolverRegistry | None = None


def install_registry(registry: ResolverRegistry) -> ResolverRegistry:
    """Install the process-wide registry.

    Raises:
        RuntimeError: A registry is already installed.
    """
    global _INSTALLED
    if _INSTALLED is not None:
        raise RuntimeError("A resolver registry is already installed")
    _INSTALLED = registry
    return registry


def get_registry() -> ResolverRegistry:
    """Get the installed registry.

    Raises:
        RuntimeError: No registry has been installed yet.
    """
    if _INSTALLED is None:
        raise RuntimeError("No resolver registry installed; call install_registry() at startup")
    return _INSTALLED


def uninstall_registry() -> None:
    """Remove the installed registry (test teardown)."""
    global _INSTALLED
    _INSTALLED = None
