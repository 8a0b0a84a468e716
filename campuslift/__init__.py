"""
campuslift - Course modules as floors of a library building.

Turns a snapshot of course module progress into a catalog of floors and
drives the elevator (floor selector) and floor-to-floor transitions.
"""

__version__ = "0.1.0"
