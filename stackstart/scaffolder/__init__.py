"""Project scaffolding: template copy, deployment config, demo, install, git."""

from .demo_gen import DemoGenerator
from .deploy_gen import DeploymentGenerator
from .generator import ProjectGenerator, ScaffoldError

__all__ = [
    "DemoGenerator",
    "DeploymentGenerator",
    "ProjectGenerator",
    "ScaffoldError",
]
