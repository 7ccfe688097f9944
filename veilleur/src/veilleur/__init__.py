"""
veilleur - continuous-integration poller for local git repositories.

Polls repositories, tests branches whose latest commit has not been
tested yet and reports failures.
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
