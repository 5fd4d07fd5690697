"""
Configuration for the livepoll engine.

Tuning constants are fixed here. Settings for the hosted synthesis
collaborator are read from the environment (and a local .env file).
"""

import os
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env from the working directory without clobbering the real environment
load_dotenv(Path.cwd() / ".env", override=False)

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Synthesis collaborator (OpenAI chat completions)
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL")
SYNTHESIS_MODEL = os.getenv("SYNTHESIS_MODEL", "gpt-4o-mini")
SYNTHESIS_TEMPERATURE = float(os.getenv("SYNTHESIS_TEMPERATURE", "0.3"))
SYNTHESIS_TIMEOUT = float(os.getenv("SYNTHESIS_TIMEOUT", "60"))

# Upstream cap on items sent to the synthesis collaborator
MAX_SYNTHESIS_ITEMS = 200

# Frequency ranking
DEFAULT_TOP_N = 80
WORD_CLOUD_TOP_N = 90
MIN_TOKEN_LENGTH = 3

STOP_WORDS = frozenset("""
a an and are as at be but by for if in into is it no not of on or s such t
that the their then there these they this to was will with we you your i me
my our ours from have has had were been can could should would what when
where who why how do does did so than too very now
""".split()) | frozenset([
    # classroom filler
    "like", "just", "also", "really",
])

# Card layout
CARD_MIN_WIDTH = 120
CARD_MAX_WIDTH = 320
CARD_CHAR_WIDTH = 7
CARD_HORIZONTAL_PADDING = 24
CARD_MIN_HEIGHT = 36
CARD_CHARS_PER_LINE = 32
CARD_LINE_HEIGHT = 20
CARD_VERTICAL_PADDING = 16
CARD_MARGIN = 8
MAX_PLACEMENT_ATTEMPTS = 60


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging for scripts. Library modules never call this."""
    name = (level or LOG_LEVEL).upper()
    logging.basicConfig(level=getattr(logging, name, logging.INFO), format=LOG_FORMAT)
