"""Contact loaders that pull campaign contacts from external organizing APIs."""

__version__ = "0.1.0"
