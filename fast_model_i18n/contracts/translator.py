from __future__ import annotations

from typing import Any, Iterable, Optional, Protocol, runtime_checkable


@runtime_checkable
class Translator(Protocol):
    """
    Contract for the catalog lookup consumed by `MessageResolver`.

    `core.localization.lookup` satisfies it; tests and apps with their own
    catalogs can pass any callable with the same shape.
    """

    def __call__(
        self,
        key: str,
        parameters: Optional[dict[str, Any]] = None,
        fallbacks: Iterable[str] = (),
    ) -> Optional[str]:
        """
        Resolve `key`, trying `fallbacks` in order when it is missing.

        Returns:
            The first translated, interpolated string of the chain, or None.
        """
        ...
