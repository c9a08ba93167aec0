"""Assorted utility functions."""

import functools

_HTML_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#x27;",
}
_HTML_ESCAPE_TABLE = str.maketrans(_HTML_ESCAPES)


def escapeHTML(value):
    """Escape the characters that are significant in HTML markup."""
    return value.translate(_HTML_ESCAPE_TABLE)


def containsMarkup(value):
    return any(char in value for char in "<>&")


def cached(oldMethod):
    """Decorator for making a method with no arguments cache its result"""
    storageName = f"_cached_{oldMethod.__name__}"

    @functools.wraps(oldMethod)
    def wrapper(self):
        try:
            return self.__getattribute__(storageName)
        except AttributeError:
            value = oldMethod(self)
            setattr(self, storageName, value)
            return value

    return wrapper


def cached_property(oldMethod):
    return property(cached(oldMethod))
