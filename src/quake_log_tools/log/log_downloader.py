"""
Game Log Downloader

This module downloads a Quake III Arena games.log from a game server host
over HTTP(S) into the configured log directory, ready to be parsed.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import urlparse

import requests

from ..base import FileBasedTool, QuakeTool

__all__ = ['QuakeLogDownloader', 'main']

logger = logging.getLogger(__name__)

DEFAULT_LOG_NAME = "games.log"
DEFAULT_TIMEOUT = 30


class QuakeLogDownloader(FileBasedTool):
    """Tool for downloading game logs from a server host."""

    def __init__(self, config: Optional[Dict[str, Any]] = None) -> None:
        """
        Initialize the log downloader.

        Args:
            config: Optional configuration dictionary.
        """
        super().__init__(config)
        self.initialize_directories()

        self.url = self.get_config('download.url', '')
        self.timeout = self.get_config('download.timeout', DEFAULT_TIMEOUT)
        self.ssl_verify = self.get_config('download.ssl_verify', True)
        token = self.get_config('download.api_token', '')

        self.headers = {"Authorization": f"Bearer {token}"} if token else {}

    def fetch(self, url: str) -> bytes:
        """
        Fetch a log file.

        Args:
            url: URL of the log file

        Returns:
            Binary content of the file

        Raises:
            requests.RequestException: If the request fails.
        """
        try:
            response = requests.get(
                url,
                headers=self.headers,
                timeout=self.timeout,
                verify=self.ssl_verify
            )
            response.raise_for_status()
            logger.info(f"Successfully downloaded {url} ({len(response.content)} bytes)")
            return response.content
        except requests.RequestException as e:
            logger.error(f"Failed to download {url}: {e}")
            if hasattr(e, 'response') and e.response is not None:
                logger.error(f"Response: {e.response.text}")
            raise

    def download(self, url: Optional[str] = None, file_name: Optional[str] = None) -> str:
        """
        Download a log file into the log directory.

        Args:
            url: URL of the log file; defaults to download.url from the profile
            file_name: Local file name; defaults to the last URL path segment

        Returns:
            Path of the saved file

        Raises:
            ValueError: If no URL is given or configured
            requests.RequestException: If the request fails.
        """
        url = url or self.url
        if not url:
            raise ValueError("No log URL specified and no 'download.url' configured in profile")

        if not file_name:
            file_name = Path(urlparse(url).path).name or DEFAULT_LOG_NAME

        content = self.fetch(url)

        file_path = Path(self.ensure_dir(self.log_dir)) / file_name
        with open(file_path, 'wb') as f:
            f.write(content)

        logger.info(f"Saved log to {file_path}")
        return str(file_path)

    def run(self, url: Optional[str] = None, file_name: Optional[str] = None) -> str:
        """
        Run the downloader.

        Args:
            url: URL of the log file
            file_name: Local file name

        Returns:
            Path of the saved file
        """
        return self.download(url, file_name)


def main():
    """Main function for the log downloader."""
    parser = argparse.ArgumentParser(
        description="Download a Quake III Arena games.log into the configured log directory."
    )
    parser.add_argument("--url", help="URL of the log file (default: download.url from the profile)")
    parser.add_argument("--name", help="Local file name (default: taken from the URL)")

    QuakeTool.add_standard_arguments(parser)
    args = parser.parse_args()

    try:
        config = QuakeTool.load_config(args.profile)
        downloader = QuakeLogDownloader(config)
        saved_path = downloader.run(args.url, args.name)

        if args.console:
            logger.info(f"Log downloaded to: {saved_path}")

        return 0
    except (ValueError, requests.RequestException, OSError) as e:
        logger.error(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
