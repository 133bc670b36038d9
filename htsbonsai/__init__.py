"""HMM-based speech synthesis: voice file parsing, voice interpolation and vocoding."""

__version__ = "0.1.0"