"""Custom exception hierarchy for metatemplate."""

__all__ = [
    "CompileError",
    "ConfigError",
    "CssParseError",
    "DuplicateAttributeError",
    "DynamicKeyError",
    "ExpressionError",
    "FormatError",
    "MetaTemplateError",
    "OutputError",
    "PluginError",
    "ProjectError",
    "TemplateCompileError",
    "UsageError",
]


class MetaTemplateError(Exception):
    """Base exception for all metatemplate errors."""


class ConfigError(MetaTemplateError):
    """Raised when configuration loading or validation fails."""


class ProjectError(MetaTemplateError):
    """Raised when project initialization or discovery fails."""


class CompileError(MetaTemplateError):
    """Raised when a template cannot be compiled."""


class ExpressionError(CompileError):
    """Raised when a ``{{ key: options }}`` attribute expression is malformed."""


class DynamicKeyError(CompileError):
    """Raised when a dynamic key cannot be registered (e.g. a blank name)."""


class DuplicateAttributeError(CompileError):
    """Raised when one element ends up with two attributes of the same name."""

    def __init__(self, message: str, *, key: str = "") -> None:
        self.key = key
        super().__init__(message)


class CssParseError(CompileError):
    """Raised when template CSS cannot be parsed into a rule tree."""


class TemplateCompileError(CompileError):
    """Raised when compiling one template fails.

    Carries enough context to locate the author error: the template id,
    a snippet of the source HTML and the offending key (when known).
    """

    def __init__(
        self,
        message: str,
        *,
        template_id: str = "",
        html: str = "",
        key: str = "",
    ) -> None:
        self.message = message
        self.template_id = template_id
        self.html_snippet = _snippet(html)
        self.key = key
        details = [f"template {template_id!r}"]
        if key:
            details.append(f"key {key!r}")
        if self.html_snippet:
            details.append(f"html {self.html_snippet!r}")
        super().__init__(f"{message} ({', '.join(details)})")


class FormatError(MetaTemplateError):
    """Raised when an unknown or unsupported output format is requested."""


class PluginError(MetaTemplateError):
    """Raised when format registration or lookup fails."""


class OutputError(MetaTemplateError):
    """Raised when generated files cannot be written."""


class UsageError(MetaTemplateError):
    """Raised when a usage example is malformed."""


def _snippet(html: str, limit: int = 120) -> str:
    collapsed = " ".join(html.split())
    if len(collapsed) <= limit:
        return collapsed
    return collapsed[: limit - 3] + "..."
