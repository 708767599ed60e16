"""
yaib Sandbox Module

- DockerSandbox: availability probes and session constructor
- DockerMachine: one sandbox session (volumes, images, forwarded run)
"""

from .docker import DockerSandbox, DockerMachine

__all__ = ['DockerSandbox', 'DockerMachine']
