"""
claudia-build - Cross-platform build and release tool for Claudia.

Resolves platform targets, validates build resources, drives the native
toolchain and packages release archives.
"""

__version__ = "0.1.0"
