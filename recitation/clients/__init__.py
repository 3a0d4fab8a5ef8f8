from .protocols import TextGenerator, SpeechSynthesizer
from .gemini import GeminiTextGenerator, GeminiSpeechSynthesizer

__all__ = ["GeminiSpeechSynthesizer", "GeminiTextGenerator", "SpeechSynthesizer", "TextGenerator"]
