"""
Base class for emoji registry components.

Provides foundation for emoji category classes with
consistent structure and introspection support.
"""

from typing import Dict


class ComponentEmoji:
    """
    Base class for component-specific emoji collections.

    Class attributes define emojis as constants; everything
    else is class-level introspection.

    Example:
        >>> class MyEmoji(ComponentEmoji):
        ...     HELLO = "👋"
        >>> MyEmoji.format("HELLO", "world")
        '👋 world'
    """

    @classmethod
    def get_all(cls) -> Dict[str, str]:
        """
        Get all emoji definitions from this category.

        Returns:
            Dictionary mapping emoji name to emoji character
        """
        emojis: Dict[str, str] = {}
        for klass in reversed(cls.__mro__):
            for name, value in vars(klass).items():
                if name.isupper() and isinstance(value, str):
                    emojis[name] = value
        return emojis

    @classmethod
    def format(cls, name: str, message: str) -> str:
        """
        Prefix a message with the named emoji.

        Args:
            name: Emoji constant name (e.g. "BRANCH")
            message: Message text

        Returns:
            Formatted message

        Raises:
            KeyError: If the emoji name is unknown
        """
        return f"{cls.get_all()[name]} {message}"
