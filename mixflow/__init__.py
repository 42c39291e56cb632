"""MixFlow - harmonic track ordering for DJ mixes"""

__version__ = "0.1.0"
