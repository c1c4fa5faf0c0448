"""Interface of the SAML assertion parser collaborator."""

from typing import Optional, Protocol

from .types import RoleSet


class SamlAssertionParser(Protocol):
    """
    Extracts granted roles from a SAML response.

    Implementations decode the base64 SAMLResponse, read the
    https://aws.amazon.com/SAML/Attributes/Role attribute values into Role
    records and return them together with the raw assertion. Signature
    validation is the identity provider's concern, not this package's.
    """

    def parse(self, saml_response: str, role_arn: Optional[str] = None) -> RoleSet:
        ...
