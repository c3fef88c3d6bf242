"""Named binary resources stored in a map file (.cprm) and a data file (.cpr).

Map file layout (little endian)::

    16 17 62 | u16 path length | resources path
    then per resource: u16 name length | name | u32 offset into the data file

Data file layout::

    15 18 61 | "0.0.1"
    then per resource: u32 size | data
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import BinaryIO, Dict, Optional, Type, TypeVar

MAP_MAGIC = bytes((0x16, 0x17, 0x62))
RESOURCES_MAGIC = bytes((0x15, 0x18, 0x61))
RESOURCES_VERSION = b"0.0.1"
MAP_SUFFIX = ".cprm"
RESOURCES_SUFFIX = ".cpr"

_U16 = struct.Struct("<H")
_U32 = struct.Struct("<I")
_ENCODING = "utf-8"
_ERRORS = "surrogateescape"


class ResourceErrorCode(IntEnum):
    NONE = 0
    FAILED_TO_LOAD_FILE_PATH = 1
    NO_RESOURCES = 2
    FAILED_TO_WRITE_TO_MAP = 3
    FAILED_TO_WRITE_TO_RESOURCES = 4
    UNSUPPORTED_RESOURCE_MAP_VERSION = 5
    CORRUPTED_RESOURCE_MAP_INDEX = 6
    UNSUPPORTED_RESOURCE_VERSION = 7
    INVALID_RESOURCE_FORMAT = 8
    CORRUPTED_RESOURCE_MAP = 9
    CORRUPTED_RESOURCES = 10
    RESOURCE_NOT_FOUND = 11
    FAILED_ALLOCATION = 12
    AMBIGUOUS_RESOURCE = 13
    UNSUPPORTED = 14
    END_OF_FILE = 15
    CORRUPTED_RESOURCE = 16


class ResourceError(Exception):
    """Raised when a resource map or resource file cannot be used."""

    def __init__(self, code: ResourceErrorCode, message: Optional[str] = None) -> None:
        super().__init__(message or code.name.replace("_", " ").lower())
        self.code = code


@dataclass
class ResourceOffsets:
    """Where a resource's offset field sits in the map, and where its data sits."""

    map_offset: int = 0
    resources_offset: int = 0


R = TypeVar("R")


def _unpack_at(layout: struct.Struct, data: bytes, offset: int) -> Optional[int]:
    if offset < 0 or offset + layout.size > len(data):
        return None
    return layout.unpack_from(data, offset)[0]


def _decode(raw: bytes) -> str:
    return raw.decode(_ENCODING, _ERRORS)


def _encode(text: str) -> bytes:
    return text.encode(_ENCODING, _ERRORS)


class ResourceManager:
    """Loads resources from, and saves resources to, a map/resource file pair."""

    def __init__(self, map_path: str = "", load_whole_buffer: bool = False) -> None:
        self.map_path = str(map_path)
        self.load_whole_buffer = load_whole_buffer
        self.resources_path = ""
        self.resources_buffer = b""
        self.resource_map: Dict[str, ResourceOffsets] = {}
        self.write_offset = 0
        self.is_map_loaded = False
        self._loaded_resources = False
        self._map_stream: Optional[BinaryIO] = None
        self._resources_stream: Optional[BinaryIO] = None

    # paths -----------------------------------------------------------------

    def set_map_path(self, path: str) -> None:
        self.map_path = str(path)

    def _map_file(self) -> Path:
        if not self.map_path:
            raise ResourceError(ResourceErrorCode.FAILED_TO_LOAD_FILE_PATH, "no map path set")
        return Path(self.map_path).with_suffix(MAP_SUFFIX)

    def _resources_file(self) -> Path:
        if not self.resources_path:
            raise ResourceError(ResourceErrorCode.FAILED_TO_LOAD_FILE_PATH, "no resources path set")
        return Path(self.resources_path).with_suffix(RESOURCES_SUFFIX)

    # loading -----------------------------------------------------------------

    def load_map(self) -> None:
        """Read the map file into memory, replacing any map already loaded."""
        try:
            data = self._map_file().read_bytes()
        except OSError as exc:
            raise ResourceError(ResourceErrorCode.FAILED_TO_LOAD_FILE_PATH, str(exc)) from exc

        if not data.startswith(MAP_MAGIC):
            raise ResourceError(ResourceErrorCode.CORRUPTED_RESOURCE_MAP, "invalid map magic numbers")
        path_size = _unpack_at(_U16, data, 3)
        if path_size is None:
            raise ResourceError(ResourceErrorCode.CORRUPTED_RESOURCE_MAP, "missing resources path size")
        raw_path = data[5:5 + path_size]
        if len(raw_path) != path_size:
            raise ResourceError(ResourceErrorCode.CORRUPTED_RESOURCE_MAP, "truncated resources path")
        self.resources_path = _decode(raw_path)

        entries: Dict[str, ResourceOffsets] = {}
        i = 5 + path_size
        while i <= len(data):
            name_size = _unpack_at(_U16, data, i)
            if name_size is None:
                break
            i += 2
            raw_name = data[i:i + name_size]
            if len(raw_name) != name_size:
                raise ResourceError(ResourceErrorCode.CORRUPTED_RESOURCE_MAP, "truncated resource name")
            i += name_size
            offset = _unpack_at(_U32, data, i)
            if offset is None:
                raise ResourceError(ResourceErrorCode.CORRUPTED_RESOURCE_MAP, "truncated resource offset")
            entries.setdefault(_decode(raw_name), ResourceOffsets(i, offset))
            i += 4

        self.resource_map = entries
        self.is_map_loaded = True

    def load_resources_buffer(self) -> None:
        """Read the whole resources file into memory and verify its header."""
        self._loaded_resources = False
        try:
            data = self._resources_file().read_bytes()
        except OSError as exc:
            raise ResourceError(ResourceErrorCode.FAILED_TO_LOAD_FILE_PATH, str(exc)) from exc
        self.resources_buffer = data
        if not data.startswith(RESOURCES_MAGIC):
            raise ResourceError(ResourceErrorCode.CORRUPTED_RESOURCES, "invalid resources magic numbers")
        if data[3:3 + len(RESOURCES_VERSION)] != RESOURCES_VERSION:
            raise ResourceError(ResourceErrorCode.UNSUPPORTED_RESOURCE_VERSION)
        self._loaded_resources = True

    def load_resource(self, name: str) -> bytes:
        """Return the data stored under ``name``."""
        if not self.is_map_loaded:
            self.load_map()
        offsets = self.resource_map.get(name)
        if offsets is None:
            raise ResourceError(ResourceErrorCode.RESOURCE_NOT_FOUND, f"no resource named {name!r}")
        start = offsets.resources_offset

        if self.load_whole_buffer:
            if not self._loaded_resources:
                self.load_resources_buffer()
            size = _unpack_at(_U32, self.resources_buffer, start)
            if size is None:
                raise ResourceError(ResourceErrorCode.CORRUPTED_RESOURCES)
            data = self.resources_buffer[start + 4:start + 4 + size]
            if len(data) != size:
                raise ResourceError(ResourceErrorCode.CORRUPTED_RESOURCES)
            return data

        try:
            stream = open(self._resources_file(), "rb")
        except OSError as exc:
            raise ResourceError(ResourceErrorCode.FAILED_TO_LOAD_FILE_PATH, str(exc)) from exc
        with stream:
            file_size = stream.seek(0, 2)
            if file_size < start + _U32.size:
                raise ResourceError(ResourceErrorCode.CORRUPTED_RESOURCES)
            stream.seek(start)
            (size,) = _U32.unpack(stream.read(_U32.size))
            data = stream.read(size)
        if len(data) != size:
            raise ResourceError(ResourceErrorCode.END_OF_FILE)
        return data

    def create_resource(self, resource_class: Type[R], name: str) -> R:
        """Build ``resource_class()`` and hand it the data stored under ``name``.

        The class must provide ``load_resource(data)``.
        """
        resource = resource_class()
        resource.load_resource(self.load_resource(name))
        return resource

    # saving ------------------------------------------------------------------

    def start_saving(self) -> None:
        """Open the map and resources files for writing, creating them if needed.

        Existing files are validated and their entries loaded so resources can
        be appended or rewritten.
        """
        self.stop_saving()
        try:
            self._open_map()
            self._open_resources()
        except BaseException:
            self.stop_saving()
            raise

    def _open_map(self) -> None:
        map_file = self._map_file()
        if not map_file.exists():
            map_file.touch()
        stream = open(map_file, "r+b")
        self._map_stream = stream
        write_headers = True

        map_size = stream.seek(0, 2)
        if map_size > 0:
            write_headers = False
            stream.seek(0)
            magic = stream.read(3)
            if len(magic) != 3:
                raise ResourceError(ResourceErrorCode.CORRUPTED_RESOURCE_MAP,
                                    "Failed to read enough bytes for file map")
            if magic != MAP_MAGIC:
                raise ResourceError(ResourceErrorCode.CORRUPTED_RESOURCE_MAP,
                                    "File Map has Invalid Magic Numbers")
            raw = stream.read(2)
            if len(raw) != 2:
                raise ResourceError(ResourceErrorCode.CORRUPTED_RESOURCE_MAP)
            (path_size,) = _U16.unpack(raw)
            raw_path = stream.read(path_size)
            if len(raw_path) != path_size:
                raise ResourceError(ResourceErrorCode.CORRUPTED_RESOURCE_MAP,
                                    "Failed to get resource path from file map")
            self.resources_path = _decode(raw_path)
            self.resources_buffer = b""
            self._loaded_resources = False
            self.resource_map = {}

            while True:
                raw = stream.read(2)
                if len(raw) != 2:
                    if raw:
                        raise ResourceError(
                            ResourceErrorCode.CORRUPTED_RESOURCE_MAP_INDEX,
                            "resource map index failed to get resource name character count",
                        )
                    break
                (name_size,) = _U16.unpack(raw)
                raw_name = stream.read(name_size)
                if len(raw_name) != name_size:
                    raise ResourceError(ResourceErrorCode.CORRUPTED_RESOURCE_MAP_INDEX,
                                        "Failed to read resource path string from resource map")
                name = _decode(raw_name)
                if name in self.resource_map:
                    raise ResourceError(ResourceErrorCode.AMBIGUOUS_RESOURCE,
                                        f"resource {name!r} appears more than once")
                map_offset = stream.tell()
                raw = stream.read(4)
                if len(raw) != 4:
                    raise ResourceError(ResourceErrorCode.CORRUPTED_RESOURCE_MAP_INDEX)
                self.resource_map[name] = ResourceOffsets(map_offset, _U32.unpack(raw)[0])
            stream.seek(0, 2)

        if not self.resources_path:
            self.resources_path = self.map_path
        resources_file = self._resources_file()
        if not resources_file.exists():
            resources_file.touch()

        if write_headers:
            self.resources_path = str(resources_file)
            encoded = _encode(self.resources_path)
            stream.seek(0)
            stream.write(MAP_MAGIC)
            stream.write(_U16.pack(len(encoded)))
            stream.write(encoded)
            stream.flush()
        self.is_map_loaded = True

    def _open_resources(self) -> None:
        stream = open(self._resources_file(), "r+b")
        self._resources_stream = stream
        header_size = len(RESOURCES_MAGIC) + len(RESOURCES_VERSION)

        size = stream.seek(0, 2)
        if size > 0:
            stream.seek(0)
            header = stream.read(header_size)
            if len(header) != header_size:
                raise ResourceError(
                    ResourceErrorCode.CORRUPTED_RESOURCES,
                    "Failed to read enough bytes for resources magic number and version",
                )
            if header[:3] != RESOURCES_MAGIC:
                raise ResourceError(ResourceErrorCode.CORRUPTED_RESOURCES,
                                    "resources had invalid magic number")
            if header[3:] != RESOURCES_VERSION:
                raise ResourceError(ResourceErrorCode.UNSUPPORTED_RESOURCE_VERSION,
                                    "resources had unsupported version")
            self.write_offset = size
        else:
            stream.seek(0)
            stream.write(RESOURCES_MAGIC + RESOURCES_VERSION)
            stream.flush()
            self.write_offset = stream.tell()

        if self.load_whole_buffer:
            stream.seek(0)
            self.resources_buffer = stream.read()
            self._loaded_resources = True

    def stop_saving(self) -> None:
        """Close the files opened by :meth:`start_saving`."""
        for stream in (self._map_stream, self._resources_stream):
            if stream is not None:
                stream.close()
        self._map_stream = None
        self._resources_stream = None

    def append_resource(self, name: str, data: bytes) -> None:
        """Store ``data`` under ``name``, rewriting it if the name already exists."""
        if self._map_stream is None:
            raise ResourceError(ResourceErrorCode.FAILED_TO_WRITE_TO_MAP, "saving has not been started")
        if self._resources_stream is None:
            raise ResourceError(ResourceErrorCode.FAILED_TO_WRITE_TO_RESOURCES,
                                "saving has not been started")
        data = bytes(data)
        encoded_name = _encode(name)
        if len(encoded_name) > 0xFFFF:
            raise ValueError("resource name is too long")
        if len(data) > 0xFFFFFFFF:
            raise ValueError("resource data is too large")

        if name in self.resource_map:
            self._rewrite_resource(name, data)
        else:
            resources = self._resources_stream
            resources_offset = resources.seek(0, 2)
            resources.write(_U32.pack(len(data)))
            resources.write(data)
            self.write_offset = resources.tell()

            map_stream = self._map_stream
            map_stream.seek(0, 2)
            map_stream.write(_U16.pack(len(encoded_name)))
            map_stream.write(encoded_name)
            map_offset = map_stream.tell()
            map_stream.write(_U32.pack(resources_offset))
            self.resource_map[name] = ResourceOffsets(map_offset, resources_offset)

        self._map_stream.flush()
        self._resources_stream.flush()
        self._loaded_resources = False

    def _rewrite_resource(self, name: str, data: bytes) -> None:
        """Drop the old data of ``name``, close the gap, and append the new data."""
        resources = self._resources_stream
        map_stream = self._map_stream
        target = self.resource_map[name]
        write_at = target.resources_offset

        later = sorted(
            (offsets for other, offsets in self.resource_map.items()
             if other != name and offsets.resources_offset > write_at),
            key=lambda offsets: offsets.resources_offset,
        )
        for offsets in later:
            resources.seek(offsets.resources_offset)
            raw = resources.read(4)
            if len(raw) != 4:
                raise ResourceError(ResourceErrorCode.END_OF_FILE)
            (size,) = _U32.unpack(raw)
            payload = resources.read(size)
            if len(payload) != size:
                raise ResourceError(ResourceErrorCode.END_OF_FILE)
            resources.seek(write_at)
            resources.write(raw)
            resources.write(payload)
            map_stream.seek(offsets.map_offset)
            map_stream.write(_U32.pack(write_at))
            offsets.resources_offset = write_at
            write_at += 4 + size

        resources.seek(write_at)
        resources.write(_U32.pack(len(data)))
        resources.write(data)
        resources.truncate()
        map_stream.seek(target.map_offset)
        map_stream.write(_U32.pack(write_at))
        target.resources_offset = write_at
        self.write_offset = resources.tell()

    # context manager -----------------------------------------------------------

    def __enter__(self) -> "ResourceManager":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop_saving()