"""
Token highlighting for terminals and HTML hosts.

Reading-mode hosts use ``ll-*`` classes and editor hosts ``ll-ed-*``;
terminal output is produced as ``rich.text.Text``.
"""

from typing import Iterable, List, Optional

from rich.style import Style
from rich.text import Text

from lonelog.config import LonelogConfig
from lonelog.notation.tokenizer import Token, TokenType, tokenize_line

READING_PREFIX = "ll"
EDITOR_PREFIX = "ll-ed"


def token_class(token_type: TokenType, prefix: str = READING_PREFIX) -> str:
    """CSS class for a token type; empty for plain text."""
    if token_type is TokenType.TEXT:
        return ""
    return f"{prefix}-{token_type.value}"


def css_variables(config: Optional[LonelogConfig] = None) -> str:
    """Stylesheet block defining the --ll-<type>-color variables."""
    config = config or LonelogConfig()
    lines = [":root {"]
    for token_type in TokenType:
        color = config.colors.color_for(token_type)
        if color is not None:
            lines.append(f"  --ll-{token_type.value}-color: {color};")
    lines.append("}")
    return "\n".join(lines)


def render_tokens(tokens: Iterable[Token], config: Optional[LonelogConfig] = None,
                  enabled: bool = True) -> Text:
    """Assemble tokens of one line into styled rich text."""
    config = config or LonelogConfig()
    text = Text()
    for token in tokens:
        color = config.colors.color_for(token.type) if enabled else None
        if color is None:
            text.append(token.text)
        else:
            text.append(token.text, style=Style(color=color))
    return text


def highlight_line(line: str, config: Optional[LonelogConfig] = None,
                   editor: bool = False) -> Text:
    """
    Highlight one line for terminal display.

    ``editor`` selects which toggle applies: ``enable_editor_highlighting``
    for editing views, ``enable_reading_highlighting`` otherwise.
    """
    config = config or LonelogConfig()
    if editor:
        enabled = config.enable_editor_highlighting
    else:
        enabled = config.enable_reading_highlighting
    return render_tokens(tokenize_line(line), config, enabled=enabled)


def highlight(text: str, config: Optional[LonelogConfig] = None,
              editor: bool = False) -> List[Text]:
    """Highlight every line of a document."""
    return [highlight_line(line, config, editor) for line in text.split("\n")]
