import struct

import pytest

from metamorphic.resources import (
    MAP_MAGIC,
    RESOURCES_MAGIC,
    RESOURCES_VERSION,
    ResourceError,
    ResourceErrorCode,
    ResourceManager,
)


@pytest.fixture
def base(tmp_path):
    return str(tmp_path / "assets")


def _save(base, items, load_whole_buffer=False):
    with ResourceManager(base, load_whole_buffer) as manager:
        manager.start_saving()
        for name, data in items:
            manager.append_resource(name, data)
    return manager


def test_new_files_have_headers(base, tmp_path):
    with ResourceManager(base) as manager:
        manager.start_saving()
    map_bytes = (tmp_path / "assets.cprm").read_bytes()
    res_bytes = (tmp_path / "assets.cpr").read_bytes()
    assert map_bytes[:3] == bytes((0x16, 0x17, 0x62))
    assert res_bytes == bytes((0x15, 0x18, 0x61)) + b"0.0.1"
    (path_size,) = struct.unpack_from("<H", map_bytes, 3)
    assert map_bytes[5:5 + path_size].decode() == str(tmp_path / "assets.cpr")
    assert len(map_bytes) == 5 + path_size
    reader = ResourceManager(base)
    reader.load_map()
    assert len(reader.resource_map) == 0


@pytest.mark.parametrize("whole", [False, True])
def test_round_trip(base, whole):
    items = [("player.png", b"\x00\x01\x02"), ("level", b"data" * 50), ("empty", b"")]
    _save(base, items)
    reader = ResourceManager(base, whole)
    for name, data in items:
        assert reader.load_resource(name) == data


def test_load_within_saving_session(base):
    with ResourceManager(base) as manager:
        manager.start_saving()
        manager.append_resource("a", b"alpha")
        assert manager.load_resource("a") == b"alpha"


def test_resources_file_layout(base, tmp_path):
    _save(base, [("a", b"xyz")])
    res_bytes = (tmp_path / "assets.cpr").read_bytes()
    header = RESOURCES_MAGIC + RESOURCES_VERSION
    assert res_bytes == header + struct.pack("<I", 3) + b"xyz"
    assert ResourceManager(base).load_resource("a") == b"xyz"


def test_reopen_and_append(base):
    _save(base, [("a", b"first")])
    _save(base, [("b", b"second")])
    reader = ResourceManager(base)
    reader.load_map()
    assert set(reader.resource_map) == {"a", "b"}
    assert reader.load_resource("a") == b"first"
    assert reader.load_resource("b") == b"second"


def test_rewrite_keeps_other_resources(base, tmp_path):
    _save(base, [("a", b"aaa"), ("b", b"bb"), ("c", b"c" * 10)])
    _save(base, [("b", b"a much longer replacement")])
    reader = ResourceManager(base)
    assert reader.load_resource("a") == b"aaa"
    assert reader.load_resource("b") == b"a much longer replacement"
    assert reader.load_resource("c") == b"c" * 10
    sizes = [3, len(b"a much longer replacement"), 10]
    expected = len(RESOURCES_MAGIC + RESOURCES_VERSION) + sum(4 + s for s in sizes)
    assert (tmp_path / "assets.cpr").stat().st_size == expected


def test_rewrite_in_same_session(base):
    with ResourceManager(base, True) as manager:
        manager.start_saving()
        manager.append_resource("x", b"one")
        manager.append_resource("y", b"two")
        manager.append_resource("x", b"three")
        assert manager.load_resource("x") == b"three"
        assert manager.load_resource("y") == b"two"


def test_resource_not_found(base):
    _save(base, [("a", b"1")])
    with pytest.raises(ResourceError) as info:
        ResourceManager(base).load_resource("missing")
    assert info.value.code is ResourceErrorCode.RESOURCE_NOT_FOUND


def test_missing_map(base):
    with pytest.raises(ResourceError) as info:
        ResourceManager(base).load_map()
    assert info.value.code is ResourceErrorCode.FAILED_TO_LOAD_FILE_PATH


def test_append_without_start(base):
    with pytest.raises(ResourceError) as info:
        ResourceManager(base).append_resource("a", b"1")
    assert info.value.code is ResourceErrorCode.FAILED_TO_WRITE_TO_MAP


def test_bad_map_magic(base, tmp_path):
    (tmp_path / "assets.cprm").write_bytes(b"\x00\x00\x00\x00\x00")
    with pytest.raises(ResourceError) as info:
        ResourceManager(base).load_map()
    assert info.value.code is ResourceErrorCode.CORRUPTED_RESOURCE_MAP
    with pytest.raises(ResourceError) as info:
        ResourceManager(base).start_saving()
    assert info.value.code is ResourceErrorCode.CORRUPTED_RESOURCE_MAP


def _map_with(path, *entries):
    encoded = path.encode()
    out = MAP_MAGIC + struct.pack("<H", len(encoded)) + encoded
    for entry in entries:
        out += entry
    return out


def test_duplicate_names_are_ambiguous(base, tmp_path):
    entry = struct.pack("<H", 1) + b"a" + struct.pack("<I", 8)
    (tmp_path / "assets.cprm").write_bytes(_map_with(str(tmp_path / "assets.cpr"), entry, entry))
    with pytest.raises(ResourceError) as info:
        ResourceManager(base).start_saving()
    assert info.value.code is ResourceErrorCode.AMBIGUOUS_RESOURCE


def test_trailing_byte_is_corrupted_index(base, tmp_path):
    (tmp_path / "assets.cprm").write_bytes(_map_with(str(tmp_path / "assets.cpr"), b"\x01"))
    with pytest.raises(ResourceError) as info:
        ResourceManager(base).start_saving()
    assert info.value.code is ResourceErrorCode.CORRUPTED_RESOURCE_MAP_INDEX


def test_truncated_offset_in_map(base, tmp_path):
    entry = struct.pack("<H", 1) + b"a" + b"\x08"
    (tmp_path / "assets.cprm").write_bytes(_map_with(str(tmp_path / "assets.cpr"), entry))
    with pytest.raises(ResourceError) as info:
        ResourceManager(base).load_map()
    assert info.value.code is ResourceErrorCode.CORRUPTED_RESOURCE_MAP


def test_unsupported_resource_version(base, tmp_path):
    _save(base, [])
    (tmp_path / "assets.cpr").write_bytes(RESOURCES_MAGIC + b"9.9.9")
    with pytest.raises(ResourceError) as info:
        ResourceManager(base).start_saving()
    assert info.value.code is ResourceErrorCode.UNSUPPORTED_RESOURCE_VERSION
    manager = ResourceManager(base)
    manager.load_map()
    with pytest.raises(ResourceError) as info:
        manager.load_resources_buffer()
    assert info.value.code is ResourceErrorCode.UNSUPPORTED_RESOURCE_VERSION


def test_corrupted_resources_magic(base, tmp_path):
    _save(base, [])
    (tmp_path / "assets.cpr").write_bytes(b"\x00" * 8)
    with pytest.raises(ResourceError) as info:
        ResourceManager(base).start_saving()
    assert info.value.code is ResourceErrorCode.CORRUPTED_RESOURCES


def test_truncated_resource_data(base, tmp_path):
    _save(base, [("a", b"abcdef")])
    path = tmp_path / "assets.cpr"
    path.write_bytes(path.read_bytes()[:-2])
    with pytest.raises(ResourceError) as info:
        ResourceManager(base).load_resource("a")
    assert info.value.code is ResourceErrorCode.END_OF_FILE
    with pytest.raises(ResourceError) as info:
        ResourceManager(base, True).load_resource("a")
    assert info.value.code is ResourceErrorCode.CORRUPTED_RESOURCES


class _Text:
    def __init__(self):
        self.text = ""

    def load_resource(self, data):
        self.text = data.decode()


def test_create_resource(base):
    _save(base, [("greeting", b"hello")])
    resource = ResourceManager(base).create_resource(_Text, "greeting")
    assert resource.text == "hello"


def test_set_map_path(base):
    _save(base, [("a", b"1")])
    manager = ResourceManager()
    manager.set_map_path(base)
    assert manager.load_resource("a") == b"1"


def test_empty_map_path():
    with pytest.raises(ResourceError) as info:
        ResourceManager().load_map()
    assert info.value.code is ResourceErrorCode.FAILED_TO_LOAD_FILE_PATH