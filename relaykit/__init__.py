"""Identity, pagination and mutation-merge primitives for GraphQL API layers."""

__version__ = "0.1.0"
