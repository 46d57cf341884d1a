"""LaunchScope: SpaceX launch data joined with NASA near-Earth context."""

__version__ = "0.1.0"
