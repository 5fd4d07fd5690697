"""
Live Poll Results Engine

Turns the live stream of participant answers for one poll question into
the derived views a results screen renders.

ARCHITECTURAL GUARANTEE:
------------------------
This package contains ZERO knowledge of:
    - Document storage and change notifications
    - Authentication
    - Drawing, styling or routing

It only consumes plain answer records and produces plain data:
    - Numeric histograms and robust statistics
    - Category totals
    - Ranked term weights for a word cloud
    - Card geometry for free-text answers
    - Synthesis cache state

Everything that talks to the outside world is a collaborator passed in.
"""

__version__ = "0.1.0"
