"""Agent engine and the assistant built on it."""
