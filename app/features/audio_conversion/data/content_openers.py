import logging
from pathlib import Path
from typing import BinaryIO, Callable, Dict, Iterable, Optional
from urllib.parse import urlparse
from urllib.request import url2pathname

from ..domain.interfaces import IContentOpener

logger = logging.getLogger(__name__)

CONTENT_SCHEME = "content"
FILE_SCHEME = "file"


def uri_scheme(reference: str) -> Optional[str]:
    """
    Returns the lower-cased URI scheme, or None for plain paths.
    Single-letter "schemes" are Windows drive letters (C:\\music), not URIs.
    """
    scheme = urlparse(reference).scheme
    if len(scheme) < 2:
        return None
    return scheme.lower()


class FileUriOpener(IContentOpener):
    """
    Opens file:// URIs by mapping them back onto the local filesystem.
    """

    def can_open(self, reference: str) -> bool:
        return uri_scheme(reference) == FILE_SCHEME

    def open(self, reference: str) -> BinaryIO:
        return open(self.to_path(reference), "rb")

    @staticmethod
    def to_path(reference: str) -> Path:
        parsed = urlparse(reference)
        # file://localhost/x and file:///x are both local; anything else is a UNC-style host
        if parsed.netloc and parsed.netloc != "localhost":
            return Path(url2pathname(f"//{parsed.netloc}{parsed.path}"))
        return Path(url2pathname(parsed.path))


class ContentProviderOpener(IContentOpener):
    """
    Opens content:// URIs through providers registered by the host.

    The platform's document picker hands back opaque handles such as
    content://com.android.providers.media/audio/42. The shell registers a
    callable per authority that turns such a handle into a readable stream.
    """

    def __init__(self, providers: Optional[Dict[str, Callable[[str], BinaryIO]]] = None):
        self._providers: Dict[str, Callable[[str], BinaryIO]] = dict(providers or {})

    def register(self, authority: str, provider: Callable[[str], BinaryIO]) -> None:
        self._providers[authority] = provider

    def can_open(self, reference: str) -> bool:
        return uri_scheme(reference) == CONTENT_SCHEME

    def open(self, reference: str) -> BinaryIO:
        authority = urlparse(reference).netloc
        provider = self._providers.get(authority)
        if provider is None:
            raise LookupError(f"No content provider registered for authority '{authority}'")
        return provider(reference)


class OpenerChain(IContentOpener):
    """First opener that claims a reference wins."""

    def __init__(self, openers: Iterable[IContentOpener]):
        self.openers = list(openers)

    def can_open(self, reference: str) -> bool:
        return any(o.can_open(reference) for o in self.openers)

    def open(self, reference: str) -> BinaryIO:
        for opener in self.openers:
            if opener.can_open(reference):
                return opener.open(reference)
        raise LookupError(f"No opener handles reference: {reference}")


def default_opener(content_opener: Optional[ContentProviderOpener] = None) -> OpenerChain:
    return OpenerChain([FileUriOpener(), content_opener or ContentProviderOpener()])
