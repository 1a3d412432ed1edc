import math

EXCERPT_LENGTH = 150


def calculate_reading_time(text: str) -> str:
    words = text.split()
    minutes = math.ceil(len(words) / 200) or 1
    return f"{minutes} min"


def make_excerpt(text: str, length: int = EXCERPT_LENGTH) -> str:
    text = text or ""
    if len(text) <= length:
        return text
    return text[:length] + "..."
