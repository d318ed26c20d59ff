def extract_plain_text(data: bytes) -> str:
    """Decode a plain-text upload verbatim. Invalid UTF-8 sequences are replaced."""
    return data.decode("utf-8", errors="replace")
