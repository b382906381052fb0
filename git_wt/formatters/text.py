"""Text formatting utilities."""


def truncate(text: str, max_len: int) -> str:
    """
    Shorten text to at most max_len characters, ending in "..." when cut.

    Example:
        truncate("Add a very long commit subject", 10) -> "Add a v..."
    """
    if len(text) <= max_len:
        return text
    if max_len <= 3:
        return text[:max_len]
    return text[:max_len - 3] + "..."


def format_completion(candidate: str, description: str = "") -> str:
    """One completion line: candidate and optional description separated by a tab."""
    if not description:
        return candidate
    return f"{candidate}\t{description}"
