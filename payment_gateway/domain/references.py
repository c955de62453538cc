"""Default signer and reference generator"""

import secrets
from typing import Dict

from payment_gateway.domain.ports import ReferenceGenerator, Signer


class PlaceholderSigner(Signer):
    """Attaches a fixed literal in place of a real signature.

    Callers must not treat the block as a cryptographic signature.
    """

    def sign(self, payload: Dict) -> Dict[str, str]:
        return {"Signature": "Signature"}


class RandomDigitReferenceGenerator(ReferenceGenerator):
    """Prefix followed by random decimal digits, e.g. REF483920174652"""

    def generate(self, prefix: str, length: int) -> str:
        return prefix + "".join(secrets.choice("0123456789") for _ in range(length))
