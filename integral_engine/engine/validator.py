"""Allow-list validation for user supplied expressions."""

from __future__ import annotations

import re
from typing import Iterable, List, Optional

from .errors import ValidationError
from .parser import TOKEN_REGEX

ALLOWED_FUNCTIONS = frozenset(
    {
        # trigonometric
        "sin",
        "cos",
        "tan",
        "asin",
        "acos",
        "atan",
        "atan2",
        # hyperbolic
        "sinh",
        "cosh",
        "tanh",
        "asinh",
        "acosh",
        "atanh",
        # roots and powers
        "sqrt",
        "cbrt",
        "abs",
        "exp",
        "log",
        "log10",
        "log2",
        "pow",
        # rounding and sign
        "sign",
        "floor",
        "ceil",
        "round",
        # comparison
        "min",
        "max",
        "mod",
        "random",
    }
)

ALLOWED_VARIABLES = frozenset({"t", "pi", "e"})

DEFAULT_BLOCKED_PATTERNS = (
    "__",
    "eval",
    "exec",
    "import",
    "compile",
    "lambda",
    "globals",
    "getattr",
    "builtins",
    "subprocess",
    "function",
    "require",
    "process",
    "global",
    "window",
)

DEFAULT_MAX_LENGTH = 400

SAFE_CHARS_REGEX = re.compile(r"^[a-zA-Z0-9_+\-*/^().,\s]+$")

_FUNCTION_CALL_REGEX = re.compile(r"\b({})\s*\(".format("|".join(sorted(ALLOWED_FUNCTIONS))), re.IGNORECASE)
_VARIABLE_REGEX = re.compile(r"\b({})\b".format("|".join(sorted(ALLOWED_VARIABLES))), re.IGNORECASE)

_UNICODE_REPLACEMENTS = {
    "−": "-",
    "–": "-",
    "—": "-",
    "×": "*",
    "÷": "/",
    "·": "*",
    "∙": "*",
    "⁄": "/",
    "π": "pi",
}

_SUPERSCRIPT_MAP = {
    "⁰": "0",
    "¹": "1",
    "²": "2",
    "³": "3",
    "⁴": "4",
    "⁵": "5",
    "⁶": "6",
    "⁷": "7",
    "⁸": "8",
    "⁹": "9",
    "⁺": "+",
    "⁻": "-",
}


def validate(
    expression: str,
    max_length: int = DEFAULT_MAX_LENGTH,
    blocked_patterns: Optional[Iterable[str]] = None,
) -> str:
    """Checks an expression against the allowed vocabulary.

    Args:
        expression: Raw expression text supplied by the caller.
        max_length: Maximum accepted length after normalization.
        blocked_patterns: Keywords rejected once the expression references the
            math vocabulary. Defaults to ``DEFAULT_BLOCKED_PATTERNS``.

    Returns:
        The normalized expression text.

    Raises:
        ValidationError: If the expression is empty, too long, or contains a
            forbidden keyword, character or identifier.
    """
    if not isinstance(expression, str):
        raise ValidationError("Expression must be a string.", reason="empty")

    normalized = _normalize_math_unicode(expression.strip())
    if not normalized:
        raise ValidationError("Expression cannot be empty.", expression=expression, reason="empty")
    if len(normalized) > max_length:
        raise ValidationError(
            "Expression exceeds max length of {} characters.".format(max_length),
            expression=expression,
            reason="too_long",
        )

    if _references_vocabulary(normalized):
        cleaned = re.sub(r"\s", "", normalized).lower()
        patterns = DEFAULT_BLOCKED_PATTERNS if blocked_patterns is None else tuple(blocked_patterns)
        for pattern in patterns:
            if pattern and pattern.lower() in cleaned:
                raise ValidationError(
                    "Expression contains blocked pattern '{}': {}".format(pattern, expression),
                    expression=expression,
                    reason="forbidden_token",
                )

    if not SAFE_CHARS_REGEX.match(normalized):
        raise ValidationError(
            "Expression contains unsupported characters: {}".format(expression),
            expression=expression,
            reason="unsupported_character",
        )

    for name in _identifiers(normalized):
        if name not in ALLOWED_FUNCTIONS and name not in ALLOWED_VARIABLES:
            raise ValidationError(
                "Unknown identifier '{}' in expression: {}".format(name, expression),
                expression=expression,
                reason="unknown_identifier",
            )

    return normalized


def _references_vocabulary(expression: str) -> bool:
    return bool(_FUNCTION_CALL_REGEX.search(expression) or _VARIABLE_REGEX.search(expression))


def _identifiers(expression: str) -> List[str]:
    # Same tokens as the parser, so the exponent in 1e-3 stays part of its number
    # while the x in 2x is still reported.
    return [match.group("name") for match in TOKEN_REGEX.finditer(expression) if match.group("name")]


def _normalize_math_unicode(expression: str) -> str:
    if not expression:
        return expression

    for source, target in _UNICODE_REPLACEMENTS.items():
        expression = expression.replace(source, target)

    result_chars = []
    i = 0
    while i < len(expression):
        char = expression[i]
        if char in _SUPERSCRIPT_MAP:
            superscript_tokens = []
            while i < len(expression) and expression[i] in _SUPERSCRIPT_MAP:
                superscript_tokens.append(_SUPERSCRIPT_MAP[expression[i]])
                i += 1
            result_chars.append("^" + "".join(superscript_tokens))
            continue

        result_chars.append(char)
        i += 1

    return "".join(result_chars)
