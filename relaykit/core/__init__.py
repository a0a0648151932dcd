"""Identity, pagination and mutation primitives."""
