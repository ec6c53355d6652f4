"""mrmm: manage milestones of a group of GitHub repositories at once."""

__version__ = "0.1.0"
