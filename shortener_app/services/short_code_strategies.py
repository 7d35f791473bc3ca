"""
Short code derivation strategies for URL shortener.
Uses Strategy Pattern to allow different digest algorithms.

Every strategy is a pure function of the original URL: the same URL always
maps to the same code, so storage can detect duplicates by code alone.
"""

import base64
import hashlib
from abc import ABC, abstractmethod


class ShortCodeStrategy(ABC):
    """Abstract base class for short code derivation strategies"""

    @abstractmethod
    def generate(self, original_url: str) -> str:
        """
        Derive a short code.

        Args:
            original_url: The URL exactly as submitted

        Returns:
            A fixed-length, URL-safe code
        """
        pass


class DigestShortCodeStrategy(ShortCodeStrategy):
    """
    Hash the URL and encode the digest with URL-safe base64.

    Padding is stripped, so every code of one strategy has the same length
    and contains only [A-Za-z0-9_-].
    """

    algorithm = "sha1"

    def generate(self, original_url: str) -> str:
        digest = hashlib.new(self.algorithm, original_url.encode("utf-8")).digest()
        return base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")


class Sha1ShortCodeStrategy(DigestShortCodeStrategy):
    """
    SHA-1 digest (160 bits), 27 characters.

    Pros: Short codes, matches codes issued by earlier deployments
    Cons: Longer than a counter-based code
    """
    algorithm = "sha1"


class Sha256ShortCodeStrategy(DigestShortCodeStrategy):
    """SHA-256 digest (256 bits), 43 characters"""
    algorithm = "sha256"
