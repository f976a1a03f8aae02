"""Pull the model's answer text out of a recommendation response.

Upstreams disagree on where the text lives. Each extractor probes one
location; they are tried in order and the first non-empty string wins.
The last extractor understands the proxy's normalized ``{"titles": [...]}``
shape and joins the list back into comma-separated text.
"""

from __future__ import annotations

from typing import Any, Callable, NamedTuple

from anirec.shared.errors import ErrorCode, create_parse_error


class ResponseExtractor(NamedTuple):
    name: str
    extract: Callable[[Any], str | None]


def _dig(payload: Any, *path: str | int) -> Any:
    current = payload
    for step in path:
        if isinstance(step, int):
            if not isinstance(current, list) or len(current) <= step:
                return None
        elif not isinstance(current, dict):
            return None
        current = current[step] if isinstance(step, int) else current.get(step)
    return current


def _text_at(*path: str | int) -> Callable[[Any], str | None]:
    def extract(payload: Any) -> str | None:
        value = _dig(payload, *path)
        if isinstance(value, str) and value.strip():
            return value
        return None

    return extract


def _joined_titles(payload: Any) -> str | None:
    titles = _dig(payload, "titles")
    if not isinstance(titles, list):
        return None
    joined = ", ".join(title.strip() for title in titles if isinstance(title, str) and title.strip())
    return joined or None


RESPONSE_EXTRACTORS: tuple[ResponseExtractor, ...] = (
    ResponseExtractor("choices[0].message.content", _text_at("choices", 0, "message", "content")),
    ResponseExtractor("choices[0].message.reasoning", _text_at("choices", 0, "message", "reasoning")),
    ResponseExtractor(
        "choices[0].message.reasoning_details[0].text",
        _text_at("choices", 0, "message", "reasoning_details", 0, "text"),
    ),
    ResponseExtractor("choices[0].text", _text_at("choices", 0, "text")),
    ResponseExtractor("content", _text_at("content")),
    ResponseExtractor("text", _text_at("text")),
    ResponseExtractor("response", _text_at("response")),
    ResponseExtractor("titles", _joined_titles),
)


def extract_response_text(
    payload: Any,
    extractors: tuple[ResponseExtractor, ...] = RESPONSE_EXTRACTORS,
) -> str:
    """Return the first non-empty text any extractor finds.

    Raises:
        ParseError: If no extractor finds text
    """
    for extractor in extractors:
        text = extractor.extract(payload)
        if text is not None:
            return text

    keys = sorted(payload) if isinstance(payload, dict) else []
    raise create_parse_error(
        f"No recommendation text in response (top-level keys: {', '.join(keys) or 'none'})",
        operation="extract_response_text",
        code=ErrorCode.RESPONSE_TEXT_MISSING,
    )
