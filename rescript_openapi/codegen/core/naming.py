"""
Naming utilities for safe code generation.

Handles word splitting, case conversion and keyword conflicts for
ReScript identifiers.
"""

import re
from typing import Dict, FrozenSet, Iterable, Optional, Set
from enum import Enum


class NamingCase(Enum):
    """Different naming case styles."""
    CAMEL_CASE = "camel"      # userName
    PASCAL_CASE = "pascal"    # UserName


# ReScript keywords that cannot be used as value, field or type names
RESCRIPT_RESERVED_WORDS: FrozenSet[str] = frozenset({
    "and", "as", "assert", "async", "await", "catch", "constraint",
    "downto", "else", "exception", "export", "external", "false", "for",
    "if", "import", "in", "include", "lazy", "let", "module", "mutable",
    "of", "open", "private", "rec", "switch", "to", "true", "try", "type",
    "when", "while", "with",
    # Reserved by OCaml-derived parsing of older syntax
    "land", "lor", "lxor", "lsl", "lsr", "asr", "mod", "not", "or",
})

# Builtin type names a generated type declaration must not shadow
RESCRIPT_BUILTIN_TYPES: FrozenSet[str] = frozenset({
    "array", "bigint", "bool", "char", "dict", "exn", "float", "int",
    "list", "option", "promise", "result", "string", "unit", "unknown",
})

# Words are runs of capitals followed by lowercase, capital-only runs,
# lowercase runs and digit runs: "HTTPServer2Id" -> HTTP Server 2 Id
_WORD_PATTERN = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|[0-9]+")


class NameSanitizer:
    """Handles name sanitization and case conversion."""

    def __init__(
        self,
        reserved_words: Optional[Iterable[str]] = None,
        builtin_types: Optional[Iterable[str]] = None,
        fallback_name: str = "value",
    ):
        """
        Initialize name sanitizer.

        Args:
            reserved_words: Language reserved words
            builtin_types: Builtin type names that type declarations must avoid
            fallback_name: Name used when the input has no usable characters
        """
        self.reserved_words = frozenset(reserved_words or ())
        self.builtin_types = frozenset(builtin_types or ())
        self.fallback_name = fallback_name
        self._name_cache: Dict[str, str] = {}

    def sanitize_name(self, name: str, target_case: NamingCase = NamingCase.CAMEL_CASE,
                      suffix_on_conflict: str = "_") -> str:
        """
        Sanitize a name for safe use in target language.

        Args:
            name: Original name to sanitize
            target_case: Desired case style
            suffix_on_conflict: Suffix appended to reserved words

        Returns:
            Sanitized name safe for use
        """
        cache_key = f"{name}\x00{target_case.value}\x00{suffix_on_conflict}"
        if cache_key in self._name_cache:
            return self._name_cache[cache_key]

        converted = self.convert_case(name, target_case)
        final_name = self._resolve_conflicts(converted, suffix_on_conflict, self.reserved_words)

        self._name_cache[cache_key] = final_name
        return final_name

    def sanitize_type_name(self, name: str, suffix_on_conflict: str = "_") -> str:
        """Sanitize a name used as a type declaration (camelCase, builtin-safe)."""
        converted = self.convert_case(name, NamingCase.CAMEL_CASE)
        return self._resolve_conflicts(
            converted, suffix_on_conflict, self.reserved_words | self.builtin_types
        )

    def convert_case(self, name: str, target_case: NamingCase) -> str:
        """Convert name to target case style without keyword checks."""
        words = self._split_words(name)
        if not words:
            words = self._split_words(self.fallback_name)

        if target_case == NamingCase.CAMEL_CASE:
            converted = self._to_camel_case(words)
            if converted[0].isdigit():
                converted = f"_{converted}"
        elif target_case == NamingCase.PASCAL_CASE:
            converted = self._to_pascal_case(words)
            if converted[0].isdigit():
                converted = f"V{converted}"
        else:
            raise ValueError(f"Unsupported naming case: {target_case}")

        return converted

    def _split_words(self, name: str) -> list:
        """Split a name on separators and case boundaries."""
        return _WORD_PATTERN.findall(str(name))

    def _to_camel_case(self, words: list) -> str:
        """Convert words to camelCase."""
        first, rest = words[0], words[1:]
        return first.lower() + "".join(word.capitalize() for word in rest)

    def _to_pascal_case(self, words: list) -> str:
        """Convert words to PascalCase."""
        return "".join(word.capitalize() for word in words)

    def _resolve_conflicts(self, name: str, suffix: str, reserved: FrozenSet[str]) -> str:
        """Append the conflict suffix to reserved words."""
        if name in reserved:
            return f"{name}{suffix}"
        return name


class NameScope:
    """
    Claims identifiers inside one declaration scope.

    Repeated identifiers get a numeric suffix starting at 2, in claim
    order, so the same input sequence always yields the same names.
    """

    def __init__(self, sanitizer: NameSanitizer, reserved: Iterable[str] = ()):
        self.sanitizer = sanitizer
        self.reserved = frozenset(reserved)
        self._used_names: Set[str] = set()

    def claim(self, name: str, target_case: NamingCase = NamingCase.CAMEL_CASE) -> str:
        """Sanitize a name and make it unique within this scope."""
        base = self.sanitizer.sanitize_name(name, target_case)
        if base in self.reserved:
            base = f"{base}_"

        candidate = base
        counter = 2
        while candidate in self._used_names:
            candidate = f"{base}{counter}"
            counter += 1

        self._used_names.add(candidate)
        return candidate


def create_rescript_sanitizer() -> NameSanitizer:
    """Create a name sanitizer configured for ReScript."""
    return NameSanitizer(RESCRIPT_RESERVED_WORDS, RESCRIPT_BUILTIN_TYPES)
