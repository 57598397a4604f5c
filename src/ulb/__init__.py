"""Universal Live Builder: terminal front-end for the ulb build backend."""

__version__ = "0.2.0"
