"""Tool definitions and the tool executor."""
