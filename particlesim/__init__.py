"""Particle simulation: vectors, particles, force generators, emitters, particle systems, fireworks and a camera."""

__version__ = "0.1.0"