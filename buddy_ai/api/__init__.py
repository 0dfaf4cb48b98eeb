"""HTTP app and service functions."""
