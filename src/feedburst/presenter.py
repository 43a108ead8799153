"""Showing a ready batch to the user."""

import logging
import sys
import webbrowser
from typing import TextIO

from feedburst.errors import PresentError

logger = logging.getLogger(__name__)


def describe_batch(name: str, count: int) -> str:
    noun = "comic" if count == 1 else "comics"
    return f"{name} ({count} {noun})"


class BrowserPresenter:
    """Prints the batch size and opens its oldest link in a web browser.

    The reader browses forward from there, so only the first link is opened.
    """

    def __init__(self, out: TextIO | None = None, opener=webbrowser.open):
        self.out = out if out is not None else sys.stdout
        self.opener = opener

    def __call__(self, name: str, batch: list[str]) -> None:
        print(describe_batch(name, len(batch)), file=self.out)
        logger.debug("Opening <%s>", batch[0])
        try:
            opened = self.opener(batch[0])
        except webbrowser.Error as e:
            raise PresentError(f"could not open <{batch[0]}>: {e}") from e
        if not opened:
            raise PresentError(f"no browser available to open <{batch[0]}>")
