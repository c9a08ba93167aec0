"""Registry of known languages."""

from modelex.core.errors import UnknownLanguageError


class LanguageRegistry:
    """Grammars by name and alias, with their compiled forms.

    Registration is append-only: names and aliases can be added or rebound but
    never removed. Lookups are case-insensitive. Compiled grammars are cached per
    language and dropped when the language is re-registered.
    """

    def __init__(self):
        self.languages = {}
        self.aliases = {}
        self._compiled = {}

    def add(self, name, grammar):
        self.languages[name] = grammar
        self._compiled.pop(name, None)

    def addAliases(self, aliases, name):
        if isinstance(aliases, str):
            aliases = (aliases,)
        for alias in aliases:
            self.aliases[alias.lower()] = name

    def canonicalName(self, name):
        """The registered name for a name or alias, or None if unknown."""
        if name is None:
            return None
        if name in self.languages:
            return name
        lowered = name.lower()
        if lowered in self.languages:
            return lowered
        return self.aliases.get(lowered)

    def get(self, name):
        canonical = self.canonicalName(name)
        if canonical is None:
            return None
        return self.languages[canonical]

    def __contains__(self, name):
        return self.canonicalName(name) is not None

    def names(self):
        return list(self.languages)

    def compiled(self, name, compiler):
        """The compiled form of a language, built with ``compiler`` if needed."""
        canonical = self.canonicalName(name)
        if canonical is None:
            raise UnknownLanguageError(name)
        language = self._compiled.get(canonical)
        if language is None:
            language = compiler(self.languages[canonical], canonical)
            self._compiled[canonical] = language
        return language
