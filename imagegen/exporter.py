"""
Exporter Module - Write generated images (data URLs or bare base64) to disk
"""

import base64
import binascii
from pathlib import Path
from typing import Optional, Union

from loguru import logger

from config import settings
from utils.exceptions import MalformedInputError


class Exporter:
    """
    Saves generated images under a single output directory
    """

    def __init__(self, output_dir: Optional[Path] = None):
        """
        Initialize Exporter

        Args:
            output_dir: Directory every read and written path must stay in
                (default: settings.OUTPUT_DIR)
        """
        self.output_dir = Path(output_dir or settings.OUTPUT_DIR)

    def resolve_path(self, path: Union[str, Path]) -> Path:
        """
        Resolve a caller-supplied relative path inside output_dir

        Args:
            path: Relative path such as ``cards/1a2b.png``

        Returns:
            Absolute path inside output_dir

        Raises:
            MalformedInputError: path is absolute or escapes output_dir
        """
        relative = Path(path)
        if relative.is_absolute() or relative.drive:
            raise MalformedInputError(f"Path must be relative to the output directory: {path}")

        root = self.output_dir.resolve()
        resolved = (root / relative).resolve()
        if resolved == root or not resolved.is_relative_to(root):
            raise MalformedInputError(f"Path escapes the output directory: {path}")

        return resolved

    @staticmethod
    def decode_payload(data: str) -> bytes:
        """
        Decode a data URL or a bare base64 string

        Args:
            data: ``data:image/png;base64,...`` or plain base64

        Returns:
            Raw bytes
        """
        if data.startswith("data:"):
            _, sep, data = data.partition(",")
            if not sep:
                raise MalformedInputError("Invalid data URL")

        try:
            return base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError) as e:
            raise MalformedInputError(f"Failed to decode base64: {e}") from e

    def save(self, data: str, path: Union[str, Path]) -> Path:
        """
        Save an encoded image

        Args:
            data: Data URL or bare base64 payload
            path: Destination file, relative to output_dir

        Returns:
            Path of the written file
        """
        output_path = self.resolve_path(path)

        payload = self.decode_payload(data)
        logger.info(f"Saving {len(payload)} bytes to {output_path}")

        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(payload)

        return output_path
