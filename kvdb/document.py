from __future__ import annotations

import json
from typing import Mapping

from pydantic import ConfigDict, RootModel, ValidationError


class StoreDocument(RootModel[dict[str, str]]):
    """
    Mirrors the on-disk file schema exactly: one flat JSON object of string to string.

      { "<key>": "<value>", ... }
    """

    model_config = ConfigDict(strict=True)

    @classmethod
    def from_mapping(cls, data: Mapping[str, str]) -> "StoreDocument":
        return cls(dict(data))

    @classmethod
    def from_disk_bytes(cls, raw: bytes) -> "StoreDocument | None":
        """
        Decode file content.

        Returns None for empty content, invalid UTF-8, invalid JSON, or any
        shape other than a flat string-to-string object.
        """
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError:
            return None
        if not text.strip():
            return None
        try:
            return cls.model_validate_json(text)
        except ValidationError:
            return None

    def to_disk_bytes(self, *, indent: int | None = None) -> bytes:
        separators = (",", ":") if indent is None else (",", ": ")
        text = json.dumps(self.root, indent=indent, sort_keys=True, ensure_ascii=False, separators=separators)
        return (text + "\n").encode("utf-8")


def check_entry(key: str, value: str) -> None:
    """
    Reject entries the file format cannot hold, before they reach a mapping.

    Raises TypeError for non-str keys/values and ValueError for strings that
    are not encodable as UTF-8 (e.g. lone surrogates).
    """
    for name, item in (("key", key), ("value", value)):
        if not isinstance(item, str):
            raise TypeError(f"{name} must be str, not {type(item).__name__}")
        try:
            item.encode("utf-8")
        except UnicodeEncodeError as e:
            raise ValueError(f"{name} is not valid UTF-8 text: {e.reason} at position {e.start}") from None
