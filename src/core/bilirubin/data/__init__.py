"""Reference curve tables."""
