"""Required-field checks shared by the browser UI and the Backend API."""

from kudos.errors import ValidationError
from kudos.models import CATEGORIES


def _blank(data, key):
    value = data.get(key)
    return value is None or (isinstance(value, str) and not value.strip())


def validate_board(data):
    """Return the list of problems with a board submission (empty when valid)."""
    errors = []
    if _blank(data, "title"):
        errors.append("Title is required")
    if _blank(data, "category"):
        errors.append("Category is required")
    elif data["category"] not in CATEGORIES:
        errors.append(f"Category must be one of: {', '.join(CATEGORIES)}")
    if _blank(data, "image"):
        errors.append("Image is required")
    return errors


def validate_card(data):
    """Return the list of problems with a card submission (empty when valid)."""
    errors = []
    if _blank(data, "title"):
        errors.append("Title is required")
    if _blank(data, "image"):
        errors.append("Image is required")
    return errors


def validate_comment(data):
    """Return the list of problems with a comment submission (empty when valid)."""
    if _blank(data, "message"):
        return ["Message is required"]
    return []


def _require(checker, data):
    errors = checker(data)
    if errors:
        raise ValidationError(errors)
    return data


def require_board(data):
    return _require(validate_board, data)


def require_card(data):
    return _require(validate_card, data)


def require_comment(data):
    return _require(validate_comment, data)
