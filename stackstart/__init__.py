"""StackStart: project scaffolding with an enhancement recommendation engine."""

__version__ = "0.1.0"
