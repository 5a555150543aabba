"""
Message Template Parser
=======================

Bounded Context: Template Rendering

Parses message template text into text and property tokens.

Syntax:
    {Name}            named property
    {0}               positional property
    {@Name} {$Name}   destructure / stringify hints
    {Name,10}         right-aligned in 10 characters (-10: left-aligned)
    {Name:D4}         format specifier
    {Name,-10:D4}     alignment and format
    {{ }}             literal braces

Parsing is total: a malformed hole becomes literal text, it never raises.
"""

from functools import lru_cache
from typing import List, Optional

from .template import (
    Destructuring,
    MessageTemplate,
    MessageTemplateToken,
    PropertyToken,
    TextToken,
)


_HINTS = {
    "@": Destructuring.DESTRUCTURE,
    "$": Destructuring.STRINGIFY,
}


class MessageTemplateParser:
    """
    Parser for message template text.

    Stateless; one instance can be shared between threads.

    Example:
        >>> template = MessageTemplateParser().parse("Value: {Value:D4}")
        >>> template.property_tokens[0].format
        'D4'
    """

    def parse(self, text: str) -> MessageTemplate:
        """Parse text into a MessageTemplate."""
        if text is None:
            text = ""
        return MessageTemplate(text=text, tokens=tuple(self._tokenize(text)))

    def _tokenize(self, text: str) -> List[MessageTemplateToken]:
        tokens: List[MessageTemplateToken] = []
        literal: List[str] = []
        i = 0
        n = len(text)

        def flush():
            if literal:
                tokens.append(TextToken("".join(literal)))
                literal.clear()

        while i < n:
            ch = text[i]

            if ch == "{":
                if i + 1 < n and text[i + 1] == "{":
                    literal.append("{")
                    i += 2
                    continue

                close = text.find("}", i + 1)
                reopen = text.find("{", i + 1)
                if close == -1:
                    literal.append(text[i:])
                    break
                if reopen != -1 and reopen < close:
                    literal.append(text[i:reopen])
                    i = reopen
                    continue

                raw = text[i:close + 1]
                token = self._parse_property(raw)
                if token is None:
                    literal.append(raw)
                else:
                    flush()
                    tokens.append(token)
                i = close + 1
                continue

            if ch == "}":
                literal.append("}")
                i += 2 if i + 1 < n and text[i + 1] == "}" else 1
                continue

            literal.append(ch)
            i += 1

        flush()
        return tokens

    def _parse_property(self, raw: str) -> Optional[PropertyToken]:
        """Parse a '{...}' hole; None when it is not a valid property."""
        content = raw[1:-1]
        if not content:
            return None

        destructuring = Destructuring.DEFAULT
        if content[0] in _HINTS:
            destructuring = _HINTS[content[0]]
            content = content[1:]

        head, colon, format_spec = content.partition(":")
        if colon and not format_spec:
            return None

        name, comma, width = head.partition(",")
        if not name or not all(c.isalnum() or c == "_" for c in name):
            return None

        alignment = None
        if comma:
            alignment = _parse_alignment(width)
            if alignment is None:
                return None

        return PropertyToken(
            property_name=name,
            raw_text=raw,
            format=format_spec if colon else None,
            alignment=alignment,
            destructuring=destructuring,
        )


def _parse_alignment(text: str) -> Optional[int]:
    digits = text[1:] if text.startswith("-") else text
    if not digits.isdigit():
        return None
    value = int(text)
    return value if value != 0 else None


_PARSER = MessageTemplateParser()


@lru_cache(maxsize=1000)
def parse_template(text: str) -> MessageTemplate:
    """Parse template text, caching the result by text."""
    return _PARSER.parse(text)
