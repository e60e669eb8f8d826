"""
Preference store interface.

Other modules should depend on IPreferenceStore, not the concrete implementation.
"""

from typing import Any, Mapping, Protocol, Optional, Union, runtime_checkable

from .models import PreferenceCategory, PreferenceModel


@runtime_checkable
class IPreferenceStore(Protocol):
    """
    Interface for per-user namespaced preferences.

    Values are addressed by (user_id, category). A missing user ID falls
    back to ephemeral in-memory values that are never persisted.
    """

    def get(
        self,
        user_id: Optional[str],
        category: Union[PreferenceCategory, str],
    ) -> PreferenceModel:
        """
        Read a category for a user.

        Falls back to the legacy flat key, then to the category defaults.
        """
        ...

    def set(
        self,
        user_id: Optional[str],
        category: Union[PreferenceCategory, str],
        partial: Mapping[str, Any],
    ) -> PreferenceModel:
        """
        Merge a partial update onto the current value and persist it.

        Returns:
            The merged value

        Raises:
            ValidationError: If the update does not fit the category
            PersistenceError: If the write fails
        """
        ...

    def purge_for_user(self, user_id: str) -> None:
        """
        Remove every key for the user plus the legacy flat keys.

        Every removal is attempted even when an earlier one fails.

        Raises:
            PersistenceError: After all removals ran, if any of them failed
        """
        ...

    def reset_for_user(self, user_id: str) -> None:
        """Drop the user's stored values so defaults apply again."""
        ...

    def clear_all(self) -> None:
        """Remove preference data for every user. Maintenance only."""
        ...
