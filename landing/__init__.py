"""
Animated waitlist landing page: glow-streak background renderer and the
waitlist store, countdown and signup form behind it.
"""

__version__ = "0.1.0"
