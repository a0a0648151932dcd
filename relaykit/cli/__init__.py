"""Developer command line interface."""
