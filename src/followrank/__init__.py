"""followrank - follower graph influence ranking."""

__version__ = "0.1.0"
