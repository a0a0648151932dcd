"""Feature surfaces built on the core codecs and resolvers."""
