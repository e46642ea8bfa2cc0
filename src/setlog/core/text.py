"""Line splitting that keeps each line's own ending."""


def split_lines(text: str) -> list[str]:
    """Split text on ``\\n``.

    A CRLF-terminated line keeps its trailing ``\\r``, so documents with mixed
    endings round-trip through join_lines unchanged. A trailing newline yields
    a trailing empty line.
    """
    return text.split("\n")


def join_lines(lines: list[str]) -> str:
    return "\n".join(lines)


def line_ending(lines: list[str], index: int) -> str:
    """
    Carriage return to use for a line inserted at index.

    Taken from the nearest terminated line above index, else below it.
    Every line but the last one is terminated.
    """
    last = len(lines) - 1
    candidates = [*range(min(index, last) - 1, -1, -1), *range(index, last)]
    if not candidates:
        return ""
    return "\r" if lines[candidates[0]].endswith("\r") else ""
