from quizbank.errors import ValidationError


def clean_title(title: str) -> str:
    """Strip surrounding whitespace and reject empty titles."""
    title = title.strip()
    if not title:
        raise ValidationError("Title cannot be empty")
    return title
