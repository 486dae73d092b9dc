# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
HTTP client for adventofcode.com.

Two things are fetched from the site: the puzzle page (for the title and any
answers already accepted for this account) and the puzzle input. Both need
the account's session cookie; the token is read from AOC_TOKEN.

The page is parsed the plain way: the title sits in
`<h2>--- Day N: Title ---</h2>`, and each accepted answer is on a line
containing `Your puzzle answer was <code>...</code>`.
"""

import os
import re
from pathlib import Path
from typing import Optional

import httpx

from aocbench import __version__
from aocbench.logging.logger import get_logger
from aocbench.reference.source import InputUnavailableError, ReferenceUnavailableError
from aocbench.tally.models import ReferenceInfo
from aocbench.utils.filesystem import atomic_write

logger = get_logger(__name__)

DEFAULT_BASE_URL = "https://adventofcode.com"
TOKEN_ENV_VAR = "AOC_TOKEN"

_TITLE_RE = re.compile(r"<h2>--- (.*?) ---</h2>")
_ANSWER_RE = re.compile(r"Your puzzle answer was <code>(.*?)</code>")


def parse_puzzle_page(html: str) -> ReferenceInfo:
    """
    Extract the title and accepted answers from a puzzle page.

    Raises:
        ReferenceUnavailableError: If the page has no puzzle title.
    """
    title_match = _TITLE_RE.search(html)
    if title_match is None:
        raise ReferenceUnavailableError("Puzzle page has no title")

    heading = title_match.group(1)
    _, sep, title = heading.partition(": ")
    if not sep:
        title = heading

    answers = [m.group(1) for m in _ANSWER_RE.finditer(html)]
    return ReferenceInfo(
        title=title,
        part_one=answers[0] if len(answers) > 0 else None,
        part_two=answers[1] if len(answers) > 1 else None,
    )


def token_from_env() -> Optional[str]:
    token = os.environ.get(TOKEN_ENV_VAR, "").strip()
    return token or None


class AocClient:
    """Fetches puzzle pages and inputs for one year."""

    def __init__(
        self,
        year: int,
        token: Optional[str] = None,
        base_url: str = DEFAULT_BASE_URL,
        transport: Optional[httpx.BaseTransport] = None,
        timeout_seconds: float = 30.0,
    ) -> None:
        self.year = year
        self._token = token
        cookies = {"session": token} if token else None
        self._client = httpx.Client(
            base_url=base_url,
            cookies=cookies,
            headers={"User-Agent": f"aocbench/{__version__}"},
            transport=transport,
            timeout=timeout_seconds,
            follow_redirects=False,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "AocClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def get_info(self, index: int) -> ReferenceInfo:
        """
        Raises:
            ReferenceUnavailableError: On any HTTP failure or an unparseable page.
        """
        url = f"/{self.year}/day/{index}"
        try:
            response = self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as err:
            logger.warning(
                "Puzzle page request failed",
                extra={"day": index, "year": self.year, "error": str(err)},
            )
            raise ReferenceUnavailableError(f"Could not fetch day {index}: {err}") from err

        info = parse_puzzle_page(response.text)
        logger.debug(
            "Puzzle page fetched",
            extra={"day": index, "title": info.title, "answers": not info.is_unimplemented},
        )
        return info

    def download_input(self, index: int, folder: Path) -> Path:
        """
        Download a day's input into `<folder>/input` and return its path.

        Raises:
            InputUnavailableError: Without a token, or on any HTTP failure.
        """
        if not self._token:
            raise InputUnavailableError(
                f"Set {TOKEN_ENV_VAR} to download inputs (day {index})"
            )

        url = f"/{self.year}/day/{index}/input"
        try:
            response = self._client.get(url)
        except httpx.HTTPError as err:
            raise InputUnavailableError(f"Could not download input for day {index}: {err}") from err

        if response.status_code != httpx.codes.OK:
            raise InputUnavailableError(
                f"Couldn't download input for year: {self.year} and day: {index} "
                f"(HTTP {response.status_code})"
            )

        target = folder / "input"
        atomic_write(target, response.text)
        logger.info("Input downloaded", extra={"day": index, "path": str(target)})
        return target
