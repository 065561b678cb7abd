import re
from typing import Optional


class TextValidator:
    """Basic checks and clean-up for free-text fields typed at the CLI."""

    @staticmethod
    def normalize(text: Optional[str]) -> str:
        if text is None:
            return ""
        # collapse runs of whitespace (including tabs/newlines) to single spaces
        return re.sub(r"\s+", " ", text).strip()

    @staticmethod
    def validate_title(title: Optional[str]) -> bool:
        return bool(TextValidator.normalize(title))

    @staticmethod
    def validate_author(author: Optional[str]) -> bool:
        # must not be digits only
        t = TextValidator.normalize(author)
        if not t:
            return False
        return not t.isdigit()

    @staticmethod
    def validate_name(name: Optional[str]) -> bool:
        return TextValidator.validate_author(name)

    @staticmethod
    def clean(value: Optional[str], field: str) -> str:
        """Return the normalized value or raise ValueError naming the field."""
        checks = {
            "title": TextValidator.validate_title,
            "author": TextValidator.validate_author,
            "name": TextValidator.validate_name,
        }
        check = checks.get(field, TextValidator.validate_title)
        if not check(value):
            if not TextValidator.normalize(value):
                raise ValueError(f"{field.capitalize()} cannot be empty.")
            raise ValueError(f"{field.capitalize()} cannot be only digits.")
        return TextValidator.normalize(value)
