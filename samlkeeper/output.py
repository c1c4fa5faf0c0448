"""
Centralized output handling with consistent formatting.

This module provides a single point of control for all user-facing output,
ensuring consistent formatting and making it easy to modify output behavior.
"""

import json
from typing import Any, Optional, Sequence

from .types import Role


class OutputHandler:
    """Centralized output handling with consistent formatting."""

    @staticmethod
    def error(title: str, error: Exception) -> None:
        """
        Print formatted error message.

        Args:
            title: Error title
            error: Exception that occurred
        """
        print(f"\n🚨 {title}:\n{error}\n")

    @staticmethod
    def success(title: str, data: Optional[Any] = None) -> None:
        """
        Print formatted success message.

        Args:
            title: Success message title
            data: Optional data to display (dict will be JSON formatted)
        """
        print(f"\n✅ {title}")
        if not data:
            return

        if isinstance(data, dict):
            print(json.dumps(data, indent=2, default=str))
            return

        print(data)

    @staticmethod
    def roles(title: str, roles: Sequence[Role]) -> None:
        """
        Print the roles a user can choose from.

        Args:
            title: Heading for the list
            roles: Roles granted by the SAML assertion
        """
        print(f"\n{title}:")
        for index, role in enumerate(roles, start=1):
            print(f"  {index}. {role.role_arn} (via {role.principal_arn})")
