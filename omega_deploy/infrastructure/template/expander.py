"""
Bootstrap template expansion.

Placeholders use the ``${Name}`` form, where ``Name`` is an identifier, so
brace-less shell variables such as ``$HOME`` pass through untouched. Anything
else inside ``${...}`` (filters, method calls, literals, shell parameter
expansion) is rejected rather than evaluated.
"""
import re
from typing import Any, List, Mapping, Set

from omega_deploy.domain.core.exceptions import UndefinedVariableError
from omega_deploy.infrastructure.logging.logger import get_logger

# Body runs to the closing brace on the same line; without one group 2 is empty
_PLACEHOLDER_PATTERN = re.compile(r'\$\{([^}\n]*)(\})?')
_IDENTIFIER_PATTERN = re.compile(r'[A-Za-z_][A-Za-z0-9_]*')


class BootstrapTemplateExpander:
    """Substitutes named parameters into bootstrap script text."""

    def __init__(self):
        self._logger = get_logger(__name__)

    def placeholders(self, template_text: str) -> Set[str]:
        """
        Names referenced by placeholders in ``template_text``.

        Raises:
            UndefinedVariableError: If a placeholder is not a plain identifier
        """
        names = set()
        malformed: List[str] = []
        for match in _PLACEHOLDER_PATTERN.finditer(template_text):
            body, closed = match.group(1), match.group(2)
            if closed and _IDENTIFIER_PATTERN.fullmatch(body):
                names.add(body)
            else:
                malformed.append(match.group(0))
        if malformed:
            raise UndefinedVariableError(malformed)
        return names

    def expand(self, template_text: str, parameters: Mapping[str, Any]) -> str:
        """
        Expand every placeholder in ``template_text``.

        Args:
            template_text: Template source
            parameters: Values keyed by placeholder name

        Returns:
            Expanded text

        Raises:
            UndefinedVariableError: If a placeholder is malformed or has no matching parameter
        """
        missing = self.placeholders(template_text) - set(parameters)
        if missing:
            raise UndefinedVariableError(missing)
        expanded = _PLACEHOLDER_PATTERN.sub(
            lambda match: str(parameters[match.group(1)]), template_text
        )
        self._logger.debug("Expanded template", parameters=sorted(parameters))
        return expanded


_default_expander = None


def expand(template_text: str, parameters: Mapping[str, Any]) -> str:
    """Expand ``template_text`` with the module's shared expander."""
    global _default_expander
    if _default_expander is None:
        _default_expander = BootstrapTemplateExpander()
    return _default_expander.expand(template_text, parameters)
