"""GitHub client for the release index and artifact downloads."""

import pathlib

import beartype
import requests

import grrsetup.errors

_API_BASE = "https://api.github.com"


class GitHubClient:
    """GitHub client. Every request is made once; failures are not retried."""

    def __init__(self, token: str | None) -> None:
        self._token = token
        self._session = requests.Session()

    @beartype.beartype
    def get_latest_tag(self, repo: str) -> str:
        """Fetch the tag of the most recent published release of owner/repo."""
        url = f"{_API_BASE}/repos/{repo}/releases/latest"
        headers = {"Accept": "application/vnd.github+json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"

        response = self._get(
            url,
            headers=headers,
            stream=False,
            error_cls=grrsetup.errors.ResolutionError,
        )
        with response:
            try:
                data = response.json()
            except requests.JSONDecodeError as err:
                raise grrsetup.errors.ResolutionError(
                    message=f"Invalid JSON response from {url}: {err}",
                ) from None

        tag = data.get("tag_name") if isinstance(data, dict) else None
        if not isinstance(tag, str) or not tag:
            raise grrsetup.errors.ResolutionError(
                message=f"Latest release of {repo} has no tag_name",
                hint="Pin an explicit version instead of 'latest'.",
            )
        return tag

    @beartype.beartype
    def download_asset(self, url: str, dest_fpath: pathlib.Path) -> None:
        """Download url to dest_fpath."""
        headers = {"Accept": "application/octet-stream"}
        response = self._get(
            url,
            headers=headers,
            stream=True,
            error_cls=grrsetup.errors.AcquisitionError,
        )
        with response:
            try:
                dest_fpath.parent.mkdir(parents=True, exist_ok=True)
                with dest_fpath.open("wb") as fd:
                    for chunk in response.iter_content(chunk_size=1024 * 1024):
                        if not chunk:
                            continue
                        fd.write(chunk)
            except requests.RequestException as err:
                raise grrsetup.errors.AcquisitionError(
                    message=f"Download interrupted for {url}: {err}", url=url
                ) from None
            except OSError as err:
                raise grrsetup.errors.AcquisitionError(
                    message=f"Could not write {dest_fpath}: {err}", url=url
                ) from None

    @beartype.beartype
    def _get(
        self,
        url: str,
        *,
        headers: dict[str, str],
        stream: bool,
        error_cls: type[grrsetup.errors.GrrSetupError],
    ) -> requests.Response:
        """Perform a single GET, turning failures into error_cls.

        The response is closed before any error is raised.
        """
        try:
            response = self._session.get(
                url, headers=headers, timeout=30, stream=stream
            )
        except requests.RequestException as err:
            raise error_cls(message=f"Network error fetching {url}: {err}") from None

        status_err = self._status_error(response.status_code, url, error_cls)
        if status_err is not None:
            response.close()
            raise status_err
        return response

    @beartype.beartype
    def _status_error(
        self,
        status_code: int,
        url: str,
        error_cls: type[grrsetup.errors.GrrSetupError],
    ) -> grrsetup.errors.GrrSetupError | None:
        """Map a non-success status to an error, or None on success."""
        if status_code == 404:
            return error_cls(
                message=f"Not found: {url}",
                hint="Check that the version exists and has a build for this platform.",
            )

        if status_code in {401, 403}:
            if self._token:
                return error_cls(
                    message=f"GitHub rejected the request ({status_code}) for {url}",
                    hint="Check that GITHUB_TOKEN is valid.",
                )
            return error_cls(
                message="GitHub API rate limit exceeded.",
                hint="Set GITHUB_TOKEN to increase the limit.",
            )

        if status_code >= 300:
            return error_cls(message=f"HTTP {status_code} for {url}")

        return None
