from pygments.style import Style
from pygments.token import Keyword, Name, Number, Punctuation, String, Token


class LogStyle(Style):
    """Muted JSON highlighting for `extra` fields trailing a log line."""

    styles = {
        Token: "#888888",
        Punctuation: "#666666",
        Name.Tag: "#5f87af",
        String: "#87af87",
        String.Double: "#87af87",
        Number: "#d7af5f",
        Keyword.Constant: "#af87d7",
    }
