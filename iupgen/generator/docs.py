"""Documentation comment formatting."""


def zig_doc(text: str | None) -> str:
    """Format free text as a Zig doc comment block.

    The block opens with an empty `///` line, one `/// ` line per source line
    follows. Returns an empty string when there is nothing to document.
    """
    if not text or not text.strip():
        return ""

    lines = ["///"]
    for line in text.strip().splitlines():
        line = line.rstrip()
        lines.append(f"/// {line}" if line else "///")
    return "\n".join(lines) + "\n"
